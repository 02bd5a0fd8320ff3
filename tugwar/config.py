"""Game configuration: defaults and the ``key=value`` file format."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from os import PathLike
from typing import Callable, Union

_MAX_FIELD = 63

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class GameConfig:
    """Tunable parameters of a tug-of-war match."""

    num_teams: int = 2
    players_per_team: int = 4
    rope_threshold: float = 100.0
    game_duration: int = 120
    energy_report_interval: int = 1
    fall_recovery_min: int = 2
    fall_recovery_max: int = 5
    fall_probability: float = 0.1
    round_win_threshold: float = 25.0
    total_rounds: int = 5
    consecutive_rounds_to_win: int = 3
    minimum_energy: int = 80
    range: int = 20


def _leading_int(text: str) -> int:
    """Integer value of the numeric prefix of ``text``, or 0 if there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _leading_float(text: str) -> float:
    """Float value of the numeric prefix of ``text``, or 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


_CONVERTERS: dict[str, Callable[[str], Union[int, float]]] = {
    f.name: _leading_float if isinstance(f.default, float) else _leading_int
    for f in fields(GameConfig)
}


def _split_line(line: str) -> tuple[str, str] | None:
    """Split a ``key=value`` line; the key is taken verbatim, the value is one word."""
    key, sep, rest = line.partition("=")
    if not sep or not key or len(key) > _MAX_FIELD:
        return None
    words = rest.split()
    if not words:
        return None
    return key, words[0][:_MAX_FIELD]


def parse_config(text: str) -> GameConfig:
    """Build a configuration from ``key=value`` lines, starting from the defaults.

    Lines that are blank or start with ``#`` are skipped, as are unknown keys
    and malformed lines. Numbers are read from the leading part of the value.
    """
    overrides: dict[str, Union[int, float]] = {}
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        pair = _split_line(line)
        if pair is None:
            continue
        key, value = pair
        convert = _CONVERTERS.get(key)
        if convert is not None:
            overrides[key] = convert(value)
    return replace(GameConfig(), **overrides)


def load_config(path: Union[str, PathLike]) -> GameConfig:
    """Read a configuration file; raises ``OSError`` if it cannot be opened."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        return parse_config(handle.read())