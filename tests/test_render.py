import pygame
import pytest

from tugwar.render import Figure, Label, Scene, build_scene, draw_scene
from tugwar.state import Player, Snapshot

WIDTH, HEIGHT = 800, 600


def make_player(energy, position, recovering=False, effort=None):
    return Player(
        energy=energy,
        effort=energy * position if effort is None else effort,
        decay_rate=1.0,
        position=position,
        recovering=recovering,
    )


def make_snapshot(rope=0.0, recovering=(), energy=85.0, **kwargs):
    teams = tuple(
        tuple(
            make_player(energy, pos, recovering=(team, pos) in recovering)
            for pos in range(1, 5)
        )
        for team in range(2)
    )
    return Snapshot(rope_position=rope, players=teams, **kwargs)


def labels_text(scene):
    return [label.text for label in scene.labels]


def test_rope_centred_when_position_zero():
    scene = build_scene(make_snapshot(), 100.0, WIDTH, HEIGHT, 0)
    (x1, y1), (x2, y2) = scene.rope
    assert (x1 + x2) / 2 == pytest.approx(WIDTH / 2)
    assert y1 == y2 == pytest.approx(HEIGHT / 2)
    assert scene.center_mark[0][0] == scene.center_mark[1][0] == pytest.approx(WIDTH / 2)


def test_rope_moves_with_sign_and_is_symmetric():
    left = build_scene(make_snapshot(rope=-40.0), 100.0, WIDTH, HEIGHT, 0)
    right = build_scene(make_snapshot(rope=40.0), 100.0, WIDTH, HEIGHT, 0)
    left_mid = (left.rope[0][0] + left.rope[1][0]) / 2
    right_mid = (right.rope[0][0] + right.rope[1][0]) / 2
    assert left_mid < WIDTH / 2 < right_mid
    assert left_mid + right_mid == pytest.approx(WIDTH)


def test_figures_follow_rope_offset():
    still = build_scene(make_snapshot(), 100.0, WIDTH, HEIGHT, 0)
    moved = build_scene(make_snapshot(rope=50.0), 100.0, WIDTH, HEIGHT, 0)
    rope_shift = moved.rope[0][0] - still.rope[0][0]
    for before, after in zip(still.figures, moved.figures):
        assert after.x - before.x == pytest.approx(rope_shift)


def test_one_figure_per_player_with_team_and_fallen_flags():
    scene = build_scene(make_snapshot(recovering={(1, 2)}), 100.0, WIDTH, HEIGHT, 0)
    assert len(scene.figures) == 8
    assert [f.team for f in scene.figures] == [0] * 4 + [1] * 4
    assert [f.fallen for f in scene.figures] == [False] * 5 + [True] + [False] * 2


def test_team_positions_run_away_from_rope():
    scene = build_scene(make_snapshot(), 100.0, WIDTH, HEIGHT, 0)
    team0 = [f.x for f in scene.figures if f.team == 0]
    team1 = [f.x for f in scene.figures if f.team == 1]
    assert team0 == sorted(team0, reverse=True)
    assert team1 == sorted(team1)
    assert max(team0) < WIDTH / 2 < min(team1)


def test_scale_depends_on_energy():
    full = build_scene(make_snapshot(energy=100.0), 100.0, WIDTH, HEIGHT, 0)
    empty = build_scene(make_snapshot(energy=0.0), 100.0, WIDTH, HEIGHT, 0)
    assert all(f.scale == pytest.approx(1.0) for f in full.figures)
    assert all(f.scale == pytest.approx(0.6) for f in empty.figures)


def test_player_labels_show_energy_and_effort():
    scene = build_scene(make_snapshot(), 100.0, WIDTH, HEIGHT, 0)
    texts = labels_text(scene)
    assert "E 85.0" in texts
    assert "F340.0" in texts
    assert texts.count("E 85.0") == 8


def test_labels_are_clipped_to_buffer():
    teams = ((make_player(123456789.0, 1, effort=9876543210.5),),) + ((),)
    scene = build_scene(Snapshot(players=teams), 100.0, WIDTH, HEIGHT, 0)
    player_labels = scene.labels[:2]
    assert all(len(label.text) <= 11 for label in player_labels)
    assert player_labels[0].text.startswith("E 12345678")


def test_total_effort_labels():
    snapshot = make_snapshot(team_efforts=(340.0, 12.25))
    texts = labels_text(build_scene(snapshot, 100.0, WIDTH, HEIGHT, 0))
    assert "Team 1 Total Effort: 340.0" in texts
    assert "Team 2 Total Effort: 12.2" in texts


def test_header_text_and_placement():
    snapshot = make_snapshot(rope=-12.5, round_number=2, team_round_wins=(1, 0))
    scene = build_scene(snapshot, 100.0, WIDTH, HEIGHT, 7)
    header = scene.labels[-1]
    assert header.text == (
        "Time: 7 sec | Round: 2 | Team1 Wins: 1 | Team2 Wins: 0 | Rope: -12.5/100.0"
    )
    assert header.y == HEIGHT - 30


def test_finished_scene_shows_winner_only():
    snapshot = make_snapshot(game_ended=True, final_winner=1, team_round_wins=(1, 3))
    scene = build_scene(snapshot, 100.0, WIDTH, HEIGHT, 30)
    assert scene.finished
    assert scene.figures == ()
    assert scene.rope is None
    assert labels_text(scene) == [
        "TEAM 2 IS THE WINNER!",
        "Final Score: Team1=1  |  Team2=3",
    ]


def test_non_positive_threshold_rejected():
    with pytest.raises(ValueError):
        build_scene(make_snapshot(), 0.0, WIDTH, HEIGHT, 0)


def test_draw_scene_paints_rope_and_background():
    surface = pygame.Surface((WIDTH, HEIGHT))
    scene = build_scene(make_snapshot(), 100.0, WIDTH, HEIGHT, 0)
    draw_scene(surface, scene, None)
    assert tuple(surface.get_at((0, 0)))[:3] == (255, 255, 255)
    x = int(scene.rope[0][0] + 20)
    r, g, b = tuple(surface.get_at((x, HEIGHT // 2)))[:3]
    assert r > g > b


def test_draw_scene_fallen_figure_has_red_cross():
    figure = Figure(x=100.0, y=100.0, scale=1.0, team=0, fallen=True, color=(0.0, 0.3, 1.0))
    scene = Scene(width=200, height=200, figures=(figure,))
    surface = pygame.Surface((200, 200))
    draw_scene(surface, scene, None)
    head_center = tuple(surface.get_at((100, 200 - 140)))[:3]
    assert head_center[0] > head_center[1]
    assert head_center[0] > head_center[2]


def test_draw_scene_standing_figure_uses_team_color():
    figure = Figure(x=100.0, y=100.0, scale=1.0, team=1, fallen=False, color=(0.0, 0.8, 0.0))
    scene = Scene(width=200, height=200, figures=(figure,))
    surface = pygame.Surface((200, 200))
    draw_scene(surface, scene, None)
    r, g, b = tuple(surface.get_at((100, 200 - 120)))[:3]
    assert g > r and g > b


def test_draw_scene_renders_labels_with_font():
    pygame.font.init()
    font = pygame.font.Font(None, 24)
    scene = Scene(width=200, height=100, labels=(Label(10, 50, "E 85.0", (0.0, 0.0, 0.0)),))
    surface = pygame.Surface((200, 100))
    draw_scene(surface, scene, font)
    pixels = [
        tuple(surface.get_at((x, y)))[:3] for x in range(10, 80) for y in range(20, 60)
    ]
    assert any(pixel[0] < 128 for pixel in pixels)
    assert tuple(surface.get_at((190, 95)))[:3] == (255, 255, 255)