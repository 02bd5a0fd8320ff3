"""Referee loop that runs a match in real time, and the command that starts it."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Callable, Optional, TextIO

from .config import GameConfig, load_config
from .game import TICKS_PER_SECOND, RoundOutcome, RoundResult, TugOfWar
from .state import Snapshot

TICK_SECONDS = 1.0 / TICKS_PER_SECOND
STATS_PRINT_INTERVAL = 5
COUNTDOWN_SECONDS = 5

FrameCallback = Callable[[Snapshot, int], None]


def countdown(
    seconds: int,
    out: Optional[TextIO] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> None:
    """Print a countdown from ``seconds`` to one, a second apart, then ``Go!``."""
    out = out if out is not None else sys.stdout
    sleep = sleep if sleep is not None else time.sleep
    for remaining in range(seconds, 0, -1):
        print(f"{remaining}...", file=out)
        out.flush()
        sleep(1)
    print("Go!", file=out)


class Referee:
    """Drives a match tick by tick, announcing rounds and the final result."""

    def __init__(
        self,
        game: TugOfWar,
        out: Optional[TextIO] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        on_frame: Optional[FrameCallback] = None,
    ) -> None:
        self.game = game
        self.out = out if out is not None else sys.stdout
        self.sleep = sleep if sleep is not None else time.sleep
        self.clock = clock if clock is not None else game.clock
        self.on_frame = on_frame
        self.start_time: Optional[float] = None

    def _say(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)
        self.out.flush()

    def _elapsed(self) -> int:
        start = self.start_time if self.start_time is not None else self.clock()
        return int(self.clock() - start)

    def _frame(self) -> None:
        if self.on_frame is not None:
            self.on_frame(self.game.snapshot(), self._elapsed())

    def _align(self) -> None:
        self._say(*self.game.align_all_teams())
        self._frame()

    def _announce_round(self, winning_team: int) -> None:
        self._say(f"=== Round Winner: Team {winning_team + 1} ===")

    def _announce_match(self, winning_team: int) -> None:
        self._say(f"=== Match Winner: Team {winning_team + 1} ===")
        self._frame()

    def _handle_round(self, result: Optional[RoundResult]) -> None:
        if result is None:
            return
        winner = result.winning_team
        if result.outcome is RoundOutcome.ALL_EXHAUSTED:
            self._say(f"=== All players exhausted. Round winner: Team {winner + 1} ===")
            self._announce_round(winner)
            self._announce_match(winner)
            return
        self._announce_round(winner)
        if result.outcome is RoundOutcome.MATCH_WON:
            self._say(
                f"=== Team {winner + 1} wins the match by achieving "
                f"{self.game.config.consecutive_rounds_to_win} consecutive wins! ==="
            )
            self._announce_match(winner)
            return
        self._say("Aligning teams for new round...")
        self._align()
        self._say("Next round starting in:")
        countdown(COUNTDOWN_SECONDS, self.out, self.sleep)
        self.game.start_next_round()

    def _play(self) -> None:
        game = self.game
        duration = game.config.game_duration
        ticks = 0
        seconds_passed = 0
        while game.game_active:
            game.tick()
            self._frame()
            self.sleep(TICK_SECONDS)
            ticks += 1
            if ticks < TICKS_PER_SECOND:
                continue
            ticks = 0
            seconds_passed += 1
            if seconds_passed % STATS_PRINT_INTERVAL == 0:
                self.out.write(game.team_stats_text(self._elapsed()))
            if self._elapsed() >= duration:
                self._say("", "=== GAME TIME EXPIRED ===")
                game.game_active = False
                self.out.write(game.status_text())
                break
            self._handle_round(game.check_round_winner())

        if self._elapsed() >= duration:
            winner = game.timeout_winner()
            if winner is None:
                self._say("", "=== GAME TIME EXPIRED: The match is a tie! ===")
            else:
                self._say(
                    "",
                    f"=== GAME TIME EXPIRED: Team {winner + 1} wins the match by round wins! ===",
                )
                self._announce_match(winner)

    def run(self) -> Optional[int]:
        """Align the teams, count down and play until the match ends.

        Returns the winning team's index, or ``None`` when the match is a tie.
        """
        self.start_time = self.clock()
        self._align()
        self._say("Game starting in:")
        countdown(COUNTDOWN_SECONDS, self.out, self.sleep)
        self._play()
        self._frame()
        return self.game.final_winner


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tugwar", description="Simulate a tug-of-war match between two teams."
    )
    parser.add_argument("--config", metavar="FILE", help="configuration file of key=value lines")
    parser.add_argument(
        "--no-window", action="store_true", help="run without the live visualization window"
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Run a match from the command line; returns the exit status."""
    args = _parse_args(argv)

    config = GameConfig()
    if args.config is not None:
        try:
            config = load_config(args.config)
        except OSError as error:
            print(f"Error opening config file: {error}", file=sys.stderr)
            return 1

    try:
        game = TugOfWar(config)
    except ValueError as error:
        print(f"Invalid configuration: {error}", file=sys.stderr)
        return 1

    current_second = time.localtime(game.clock()).tm_sec
    for team_index, team in enumerate(game.teams):
        for player_index, player in enumerate(team):
            print(
                f"Team {team_index} Player {player_index}: init second={current_second}, "
                f"raw energy={player.energy:.2f}"
            )

    print("=== TUG OF WAR GAME SIMULATION ===")
    print("Configuration:")
    print(f"- Teams: {config.num_teams}")
    print(f"- Players per team: {config.players_per_team}")

    viewer = None
    on_frame: Optional[FrameCallback] = None
    if not args.no_window:
        from .render import Viewer

        viewer = Viewer()

        def on_frame(snapshot: Snapshot, elapsed: int) -> None:
            if viewer is not None and not viewer.show(snapshot, config.rope_threshold, elapsed):
                viewer.close()

    referee = Referee(game, on_frame=on_frame)
    try:
        referee.run()
    except KeyboardInterrupt:
        return 130
    finally:
        if viewer is not None:
            viewer.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())