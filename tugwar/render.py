"""Layout and drawing of the match view, and a window that shows it live."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

import pygame

from .state import Snapshot

Color = tuple[float, float, float]
Point = tuple[float, float]

WINDOW_TITLE = "Tug of War Visualization - Real-Time"
WINNER_DISPLAY_SECONDS = 5

_TEAM_BASE_X = (0.25, 0.75)
_ROPE_CENTER_X = 0.50
_ROPE_HALF_LENGTH = 100.0
_PLAYER_SPACING = 60.0
_LINE_WIDTH = 5

_TEAM_COLORS: tuple[Color, Color] = ((0.0, 0.3, 1.0), (0.0, 0.8, 0.0))
_ROPE_COLOR: Color = (0.6, 0.3, 0.1)
_RED: Color = (1.0, 0.0, 0.0)
_BLACK: Color = (0.0, 0.0, 0.0)
_DARK_GRAY: Color = (0.2, 0.2, 0.2)
_GRAY: Color = (0.5, 0.5, 0.5)
_WHITE: Color = (1.0, 1.0, 1.0)

_HEAD_SEGMENTS = 20


@dataclass(frozen=True)
class Figure:
    """A stick figure standing on (or fallen at) the point ``(x, y)``."""

    x: float
    y: float
    scale: float
    team: int
    fallen: bool
    color: Color


@dataclass(frozen=True)
class Label:
    """Text whose baseline starts at ``(x, y)``."""

    x: float
    y: float
    text: str
    color: Color


@dataclass(frozen=True)
class Scene:
    """Everything to draw for one frame, in coordinates with the origin bottom-left."""

    width: int
    height: int
    rope: Optional[tuple[Point, Point]] = None
    center_mark: Optional[tuple[Point, Point]] = None
    figures: tuple[Figure, ...] = ()
    labels: tuple[Label, ...] = ()
    finished: bool = False


def _clip(text: str, buffer_size: int) -> str:
    """Keep at most ``buffer_size - 1`` characters, as a fixed text buffer would."""
    return text[: buffer_size - 1]


def _finished_scene(snapshot: Snapshot, width: int, height: int) -> Scene:
    team_number = snapshot.final_winner + 1 if snapshot.final_winner is not None else 0
    first_wins, second_wins = snapshot.team_round_wins[0], snapshot.team_round_wins[1]
    x = width * 0.4
    y = height * 0.55
    labels = (
        Label(x, y, _clip(f"TEAM {team_number} IS THE WINNER!", 80), _RED),
        Label(
            x,
            y - 40,
            _clip(f"Final Score: Team1={first_wins}  |  Team2={second_wins}", 100),
            _BLACK,
        ),
    )
    return Scene(width=width, height=height, labels=labels, finished=True)


def build_scene(
    snapshot: Snapshot, rope_threshold: float, width: int, height: int, elapsed: int
) -> Scene:
    """Lay out rope, players and labels for ``snapshot`` in a window of the given size."""
    if snapshot.game_ended:
        return _finished_scene(snapshot, width, height)
    if rope_threshold <= 0:
        raise ValueError("rope_threshold must be positive")

    rope_position = snapshot.rope_position
    max_pixels = 0.25 * width
    rope_offset = -(rope_position / rope_threshold) * max_pixels
    rope_center = _ROPE_CENTER_X * width - rope_offset
    rope_y = 0.5 * height

    rope = (
        (rope_center - _ROPE_HALF_LENGTH, rope_y),
        (rope_center + _ROPE_HALF_LENGTH, rope_y),
    )
    mark_x = 0.5 * width
    center_mark = ((mark_x, rope_y - 20), (mark_x, rope_y + 20))

    base_y = rope_y - 50.0
    figures: list[Figure] = []
    labels: list[Label] = []
    for team_index, team in enumerate(snapshot.players[: len(_TEAM_BASE_X)]):
        base_x = _TEAM_BASE_X[team_index] * width - rope_offset
        for player in team:
            slot = player.position - 1
            if team_index == 0:
                px = base_x + (1.5 - slot) * _PLAYER_SPACING
                label_x = px + 15
            else:
                px = base_x + (slot - 1.5) * _PLAYER_SPACING
                label_x = px - 65
            scale = 0.6 + (player.energy / 100.0) * 0.4
            figures.append(
                Figure(
                    x=px,
                    y=base_y,
                    scale=scale,
                    team=team_index,
                    fallen=player.recovering,
                    color=_TEAM_COLORS[team_index],
                )
            )
            label_y = base_y + 70
            labels.append(Label(label_x, label_y, _clip(f"E {player.energy:.1f}", 12), _BLACK))
            labels.append(
                Label(label_x, label_y - 20, _clip(f"F{player.effort:.1f}", 12), _DARK_GRAY)
            )

    for team_index, base in enumerate(_TEAM_BASE_X):
        effort = snapshot.team_efforts[team_index] if team_index < len(snapshot.team_efforts) else 0.0
        labels.append(
            Label(
                base * width - 50,
                base_y - 40,
                _clip(f"Team {team_index + 1} Total Effort: {effort:.1f}", 50),
                _DARK_GRAY,
            )
        )

    first_wins, second_wins = snapshot.team_round_wins[0], snapshot.team_round_wins[1]
    header = (
        f"Time: {elapsed} sec | Round: {snapshot.round_number} | "
        f"Team1 Wins: {first_wins} | Team2 Wins: {second_wins} | "
        f"Rope: {rope_position:.1f}/{rope_threshold:.1f}"
    )
    labels.append(Label(20, height - 30, _clip(header, 128), _BLACK))

    return Scene(
        width=width,
        height=height,
        rope=rope,
        center_mark=center_mark,
        figures=tuple(figures),
        labels=tuple(labels),
    )


def _rgb(color: Color) -> tuple[int, int, int]:
    r, g, b = color
    return (round(r * 255), round(g * 255), round(b * 255))


def _draw_line(surface, height: int, color: Color, start: Point, end: Point) -> None:
    pygame.draw.line(
        surface,
        _rgb(color),
        (start[0], height - start[1]),
        (end[0], height - end[1]),
        _LINE_WIDTH,
    )


def _draw_head(surface, height: int, color: Color, center: Point, radius: float) -> None:
    points = [
        (
            center[0] + math.cos(2.0 * math.pi * i / _HEAD_SEGMENTS) * radius,
            height - (center[1] + math.sin(2.0 * math.pi * i / _HEAD_SEGMENTS) * radius),
        )
        for i in range(_HEAD_SEGMENTS)
    ]
    pygame.draw.polygon(surface, _rgb(color), points)


def _draw_standing(surface, height: int, figure: Figure) -> None:
    x, y, scale = figure.x, figure.y, figure.scale
    head_radius = 10.0 * scale
    body = 40.0 * scale
    limb = 20.0 * scale
    color = figure.color
    _draw_head(surface, height, color, (x, y + body), head_radius)
    _draw_line(surface, height, color, (x, y + body), (x, y))
    _draw_line(surface, height, color, (x, y + body * 0.7), (x - limb, y + body * 0.5))
    _draw_line(surface, height, color, (x, y + body * 0.7), (x + limb, y + body * 0.5))
    _draw_line(surface, height, color, (x, y), (x - limb * 0.8, y - limb))
    _draw_line(surface, height, color, (x, y), (x + limb * 0.8, y - limb))


def _draw_fallen(surface, height: int, figure: Figure) -> None:
    x, y, scale = figure.x, figure.y, figure.scale
    head_radius = 10.0 * scale
    body = 40.0 * scale
    head_y = y + body
    _draw_head(surface, height, _GRAY, (x, head_y), head_radius)
    _draw_line(
        surface, height, _RED,
        (x - head_radius, head_y + head_radius), (x + head_radius, head_y - head_radius),
    )
    _draw_line(
        surface, height, _RED,
        (x - head_radius, head_y - head_radius), (x + head_radius, head_y + head_radius),
    )
    _draw_line(
        surface, height, _GRAY,
        (x - 10.0 * scale, y + body * 0.5), (x + 10.0 * scale, y + body * 0.5),
    )


def draw_scene(surface, scene: Scene, font) -> None:
    """Draw ``scene`` onto a pygame surface; labels are skipped when ``font`` is None."""
    height = surface.get_height()
    surface.fill(_rgb(_WHITE))
    if scene.rope is not None:
        _draw_line(surface, height, _ROPE_COLOR, *scene.rope)
    if scene.center_mark is not None:
        _draw_line(surface, height, _RED, *scene.center_mark)
    for figure in scene.figures:
        if figure.fallen:
            _draw_fallen(surface, height, figure)
        else:
            _draw_standing(surface, height, figure)
    if font is None:
        return
    ascent = font.get_ascent()
    for label in scene.labels:
        rendered = font.render(label.text, True, _rgb(label.color))
        surface.blit(rendered, (label.x, height - label.y - ascent))


class Viewer:
    """A resizable window that shows snapshots of a running match."""

    def __init__(self, width: int = 800, height: int = 600) -> None:
        pygame.init()
        self.width = width
        self.height = height
        self.surface = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        self.font = pygame.font.Font(None, 24)
        self._winner_shown_at: Optional[float] = None
        self._open = True

    def __enter__(self) -> "Viewer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def show(self, snapshot: Snapshot, rope_threshold: float, elapsed: int) -> bool:
        """Draw one frame; returns False once the window should go away."""
        if not self._open:
            return False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.surface = pygame.display.get_surface()
        scene = build_scene(snapshot, rope_threshold, self.width, self.height, elapsed)
        draw_scene(self.surface, scene, self.font)
        pygame.display.flip()
        if scene.finished:
            now = time.monotonic()
            if self._winner_shown_at is None:
                self._winner_shown_at = now
            if now - self._winner_shown_at > WINNER_DISPLAY_SECONDS:
                return False
        return True

    def close(self) -> None:
        """Close the window."""
        if self._open:
            self._open = False
            pygame.quit()