"""Player records and the read-only view of a match shown to a display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

NUM_TEAMS = 2
PLAYERS_PER_TEAM = 4


@dataclass
class Player:
    """One team member on the rope."""

    energy: float
    effort: float
    decay_rate: float
    position: int
    active: bool = True
    recovering: bool = False
    recover_time: float = 0.0

    def status(self) -> str:
        """Short status label: Recovering, Active or Inactive."""
        if self.recovering:
            return "Recovering"
        return "Active" if self.active else "Inactive"


@dataclass(frozen=True)
class Snapshot:
    """State of a match at one moment, as a display needs it."""

    rope_position: float = 0.0
    team_round_wins: tuple[int, ...] = (0,) * NUM_TEAMS
    players: tuple[tuple[Player, ...], ...] = ()
    round_number: int = 1
    game_ended: bool = False
    final_winner: Optional[int] = None
    team_efforts: tuple[float, ...] = field(default=(0.0,) * NUM_TEAMS)