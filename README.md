# tugwar

A simulated tug-of-war match between two teams of players.

A referee steps the match in ticks of a tenth of a second. On each tick, every
pulling player's energy decays by a tenth of their decay rate. A player's effort
is their energy multiplied by their position on the rope. Players can fall at
random. A fallen player sits out for a few seconds and then goes back to pulling.
The difference in team effort moves the rope towards the stronger team. The rope
is clamped to `rope_threshold` either way.

Once a second the referee checks the round:

- When the rope has moved at least `round_win_threshold` from the centre, the
  team it moved towards wins the round. A team that wins
  `consecutive_rounds_to_win` rounds in a row takes the match. Otherwise both
  teams line up again by energy, a five-second countdown runs, and the next round
  starts with the rope back at the centre.
- When every player has run out of energy, the current round is decided by the
  rope and that team also takes the match.
- When `game_duration` seconds have passed, the team with more round wins takes
  the match. With equal round wins the match is a tie.

Every five seconds a table of each player's energy, effort, status and position
is printed to the console. The match can also be watched live in a pygame window.

## Installation

```
pip install .
```

## Running a match

```
tugwar
```

Options:

- `--config FILE` reads settings from a configuration file. If the file cannot
  be opened, the command prints an error and exits with status 1.
- `--no-window` runs the match in the console only, without the pygame window.

For example:

```
tugwar --config match.conf --no-window
```

The command exits with status 1 for an invalid configuration and 130 when it is
interrupted with Ctrl-C. Otherwise it exits with status 0.

When the match ends, the window shows the winner and the final score for five
seconds and then closes. You can also close it yourself at any time, and the
match carries on in the console.

## Configuration

The configuration file is a plain text file with one `key=value` per line.
Lines that begin with `#` are ignored, and so are blank lines, unknown keys and
malformed lines. Numbers are read from the leading part of each value. A key you
leave out keeps its default.

```
# match.conf
rope_threshold=100.0
game_duration=120
fall_probability=0.1
fall_recovery_min=2
fall_recovery_max=5
round_win_threshold=25.0
consecutive_rounds_to_win=3
minimum_energy=80
range=20
```

| key                         | default | meaning                                                        |
|-----------------------------|---------|----------------------------------------------------------------|
| `num_teams`                 | 2       | number of teams; must be 2                                     |
| `players_per_team`          | 4       | players in each team; at least 1                               |
| `rope_threshold`            | 100.0   | how far the rope can move either way                           |
| `game_duration`             | 120     | match length in seconds                                        |
| `energy_report_interval`    | 1       | accepted and stored, not used by the match                     |
| `fall_recovery_min`         | 2       | shortest recovery after a fall, in seconds                     |
| `fall_recovery_max`         | 5       | longest recovery after a fall; not below the minimum           |
| `fall_probability`          | 0.1     | chance per second that a pulling player falls                  |
| `round_win_threshold`       | 25.0    | rope displacement that wins a round                            |
| `total_rounds`              | 5       | accepted and stored, not used by the match                     |
| `consecutive_rounds_to_win` | 3       | winning streak that ends the match                             |
| `minimum_energy`            | 80      | base starting energy                                           |
| `range`                     | 20      | random spread added to the starting energy; must be positive   |

Starting energy is `minimum_energy`, plus a random value below `range`, plus the
current clock second modulo 20. A configuration that breaks the limits above
raises `ValueError` when the match is created.

## Using it as a library

You can step the simulation yourself without a window:

```python
import random
import time

from tugwar.config import GameConfig, load_config
from tugwar.game import TugOfWar

game = TugOfWar(GameConfig(), random.Random(1), time.time)
for line in game.align_all_teams():
    print(line)
for _ in range(10):
    game.tick()
result = game.check_round_winner()  # None while the round is still running
print(game.status_text())
```

- `tugwar.config.parse_config(text)` builds a `GameConfig` from a string.
  `load_config(path)` does the same from a file.
- `TugOfWar.check_round_winner()` returns a `RoundResult`, which holds the
  `winning_team` and a `RoundOutcome`: `ROUND_WON`, `MATCH_WON` or
  `ALL_EXHAUSTED`. After a `ROUND_WON` result, call `start_next_round()`.
- `TugOfWar.timeout_winner()` ends the match on time.
- `TugOfWar.team_stats_text(elapsed)` and `status_text()` return the console
  reports.
- `TugOfWar.snapshot()` returns a read-only `tugwar.state.Snapshot`.
  `tugwar.render.build_scene` lays a snapshot out as a `Scene` of `Figure` and
  `Label` objects. `draw_scene` paints a scene onto a pygame surface, and
  `tugwar.render.Viewer` shows snapshots in a window.
- `tugwar.app.Referee(game, out, sleep, clock, on_frame)` runs a whole match in
  real time. `run()` returns the winning team's index, or `None` on a tie.
  `on_frame` is called with each snapshot and the number of seconds elapsed.