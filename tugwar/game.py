"""Rules of the tug-of-war match: players, rope movement, rounds and alignment."""

from __future__ import annotations

import enum
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .config import GameConfig
from .state import NUM_TEAMS, Player, Snapshot

TICKS_PER_SECOND = 10
ROPE_PULL_FACTOR = 0.05


def create_players(
    config: GameConfig, rng: random.Random, current_second: int
) -> list[list[Player]]:
    """Create every team's players with randomised starting energy and decay."""
    if config.range <= 0:
        raise ValueError("range must be positive")
    teams: list[list[Player]] = []
    for _ in range(config.num_teams):
        team = []
        for index in range(config.players_per_team):
            energy = float(
                config.minimum_energy + rng.randrange(config.range) + current_second % 20
            )
            decay_rate = 0.5 + rng.randrange(16) / 10.0
            team.append(
                Player(
                    energy=energy,
                    effort=energy,
                    decay_rate=decay_rate,
                    position=index + 1,
                )
            )
        teams.append(team)
    return teams


class RoundOutcome(enum.Enum):
    """How a round came to an end."""

    ROUND_WON = "round_won"
    MATCH_WON = "match_won"
    ALL_EXHAUSTED = "all_exhausted"


@dataclass(frozen=True)
class RoundResult:
    """The winner of a finished round and what the win means for the match."""

    winning_team: int
    outcome: RoundOutcome

    @property
    def match_over(self) -> bool:
        return self.outcome is not RoundOutcome.ROUND_WON


class TugOfWar:
    """State and rules of one match, advanced in ticks of a tenth of a second."""

    def __init__(
        self,
        config: GameConfig,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if config.num_teams != NUM_TEAMS:
            raise ValueError(f"exactly {NUM_TEAMS} teams are supported")
        if config.players_per_team < 1:
            raise ValueError("players_per_team must be at least 1")
        if config.fall_recovery_max < config.fall_recovery_min:
            raise ValueError("fall_recovery_max must not be below fall_recovery_min")
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock if clock is not None else time.time
        current_second = time.localtime(self.clock()).tm_sec
        self.teams = create_players(config, self.rng, current_second)
        self.team_round_wins = [0] * NUM_TEAMS
        self.team_consecutive_wins = [0] * NUM_TEAMS
        self.team_efforts = [0.0] * NUM_TEAMS
        self.rope_position = 0.0
        self.round_number = 1
        self.game_active = True
        self.game_ended = False
        self.final_winner: Optional[int] = None

    def _pulling(self):
        for team_index, team in enumerate(self.teams):
            for player in team:
                if player.active and not player.recovering:
                    yield team_index, player

    def check_player_falls(self) -> None:
        """Let each pulling player fall with the per-tick fall probability."""
        chance = self.config.fall_probability / TICKS_PER_SECOND
        spread = self.config.fall_recovery_max - self.config.fall_recovery_min + 1
        for _, player in list(self._pulling()):
            if self.rng.random() < chance:
                player.recovering = True
                player.effort = 0.0
                player.recover_time = (
                    self.clock()
                    + self.rng.randrange(spread)
                    + self.config.fall_recovery_min
                )

    def recover_players(self) -> None:
        """Put fallen players back on the rope once their recovery time has passed."""
        now = self.clock()
        for team in self.teams:
            for player in team:
                if player.recovering and now >= player.recover_time:
                    player.recovering = False
                    player.effort = player.energy

    def update_efforts(self) -> None:
        """Drain energy of pulling players and set their effort from their position."""
        for _, player in self._pulling():
            player.energy = max(0.0, player.energy - player.decay_rate / TICKS_PER_SECOND)
            player.effort = player.energy * player.position

    def update_rope_position(self) -> None:
        """Sum team efforts and move the rope towards the stronger team."""
        totals = [0.0] * NUM_TEAMS
        for team_index, player in self._pulling():
            totals[team_index] += player.effort
        self.team_efforts = totals
        diff = totals[0] - totals[1]
        self.rope_position -= diff * ROPE_PULL_FACTOR / TICKS_PER_SECOND
        limit = self.config.rope_threshold
        self.rope_position = min(limit, max(-limit, self.rope_position))

    def tick(self) -> None:
        """Advance the match by one tick."""
        self.check_player_falls()
        self.recover_players()
        self.update_efforts()
        self.update_rope_position()

    def _end_match(self, winning_team: int) -> None:
        self.game_active = False
        self.game_ended = True
        self.final_winner = winning_team

    def check_round_winner(self) -> Optional[RoundResult]:
        """Decide whether the current round is over and record its result.

        Returns ``None`` while the round is still running.
        """
        all_exhausted = all(
            player.energy <= 0 for team in self.teams for player in team
        )
        if abs(self.rope_position) < self.config.round_win_threshold and not all_exhausted:
            return None

        winning_team = 1 if self.rope_position > 0 else 0
        self.team_round_wins[winning_team] += 1

        if all_exhausted:
            self._end_match(winning_team)
            return RoundResult(winning_team, RoundOutcome.ALL_EXHAUSTED)

        self.team_consecutive_wins[winning_team] += 1
        for team_index in range(NUM_TEAMS):
            if team_index != winning_team:
                self.team_consecutive_wins[team_index] = 0

        if self.team_consecutive_wins[winning_team] >= self.config.consecutive_rounds_to_win:
            self._end_match(winning_team)
            return RoundResult(winning_team, RoundOutcome.MATCH_WON)
        return RoundResult(winning_team, RoundOutcome.ROUND_WON)

    def start_next_round(self) -> None:
        """Reset the rope and efforts and move on to the next round."""
        self.round_number += 1
        self.rope_position = 0.0
        self.team_efforts = [0.0] * NUM_TEAMS

    def align_team(self, team_index: int) -> str:
        """Reorder a team so that position rises with energy; returns a summary line."""
        team = self.teams[team_index]
        by_energy = sorted(range(len(team)), key=lambda i: team[i].energy)
        for rank, index in enumerate(by_energy):
            player = team[index]
            player.position = rank + 1
            player.effort = player.energy * player.position
        order = by_energy[::-1] if team_index == 0 else by_energy
        entries = "".join(
            f"({index}: {team[index].position}, {team[index].energy:.1f}, "
            f"{team[index].effort:.1f}) "
            for index in order
        )
        return (
            f"Team {team_index + 1} aligned order "
            f"(player index: new position, energy, effort): {entries}"
        )

    def align_all_teams(self) -> list[str]:
        """Align every team; returns one summary line per team."""
        return [self.align_team(team_index) for team_index in range(len(self.teams))]

    def snapshot(self) -> Snapshot:
        """An independent copy of the state a display needs."""
        return Snapshot(
            rope_position=self.rope_position,
            team_round_wins=tuple(self.team_round_wins),
            players=tuple(
                tuple(replace(player) for player in team) for team in self.teams
            ),
            round_number=self.round_number,
            game_ended=self.game_ended,
            final_winner=self.final_winner,
            team_efforts=tuple(self.team_efforts),
        )

    def team_stats_text(self, elapsed: int) -> str:
        """Table of every player's energy, effort, status and position."""
        lines = [
            "",
            f"=== Game Stats at {elapsed} seconds (Round {self.round_number}) ===",
            f"Rope Position: {self.rope_position:.2f}/{self.config.rope_threshold:.2f}",
            f"Scores: Team 1: {self.team_round_wins[0]}, "
            f"Team 2: {self.team_round_wins[1]}",
        ]
        for team_index, team in enumerate(self.teams):
            lines.append("")
            lines.append(f"Team {team_index + 1} Players:")
            lines.append("ID  | Energy | Effort | Status     | Position")
            lines.append("----|--------|--------|------------|---------")
            for index, player in enumerate(team):
                lines.append(
                    f"{index + 1:2d}  | {player.energy:6.1f} | {player.effort:6.1f} | "
                    f"{player.status():<10s} | {player.position}"
                )
            lines.append(f"Total Team Effort: {self.team_efforts[team_index]:.2f}")
        lines.append("")
        return "\n".join(lines) + "\n"

    def status_text(self) -> str:
        """Summary of the rope position and each team's wins and effort."""
        lines = ["", "=== GAME STATUS ===", f"Rope Position: {self.rope_position:.2f}"]
        for team_index in range(len(self.teams)):
            lines.append(
                f"Team {team_index + 1}: Round Wins: {self.team_round_wins[team_index]}, "
                f"Consecutive Wins: {self.team_consecutive_wins[team_index]}, "
                f"Total Effort: {self.team_efforts[team_index]:.2f}"
            )
        return "\n".join(lines) + "\n"

    def timeout_winner(self) -> Optional[int]:
        """End the match on time; the team with more round wins wins, ``None`` on a tie."""
        self.game_active = False
        first, second = self.team_round_wins[0], self.team_round_wins[1]
        if first == second:
            return None
        winner = 0 if first > second else 1
        self._end_match(winner)
        return winner