import io
import random

import pytest

from tugwar.app import Referee, countdown, main
from tugwar.config import GameConfig
from tugwar.game import TugOfWar


class FakeTime:
    """A clock that only moves when ``sleep`` is called, in exact tenths."""

    def __init__(self, start_tenths=10_000_000):
        self.tenths = start_tenths
        self.sleeps = []

    def time(self):
        return self.tenths / 10

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.tenths += round(seconds * 10)


def make_referee(**overrides):
    overrides.setdefault("fall_probability", 0.0)
    config = GameConfig(**overrides)
    clock = FakeTime()
    game = TugOfWar(config, random.Random(7), clock.time)
    out = io.StringIO()
    frames = []
    referee = Referee(
        game,
        out=out,
        sleep=clock.sleep,
        clock=clock.time,
        on_frame=lambda snapshot, elapsed: frames.append((snapshot, elapsed)),
    )
    return referee, game, out, frames


def test_countdown_prints_each_second_then_go():
    out = io.StringIO()
    sleeps = []
    countdown(3, out, sleeps.append)
    assert out.getvalue() == "3...\n2...\n1...\nGo!\n"
    assert sleeps == [1, 1, 1]


def test_countdown_zero_seconds_only_says_go():
    out = io.StringIO()
    sleeps = []
    countdown(0, out, sleeps.append)
    assert out.getvalue() == "Go!\n"
    assert sleeps == []


def test_timeout_tie_when_no_round_is_won():
    referee, game, out, frames = make_referee(game_duration=3, round_win_threshold=1e9)
    result = referee.run()
    text = out.getvalue()
    assert result is None
    assert "=== GAME TIME EXPIRED ===" in text
    assert "The match is a tie!" in text
    assert "=== GAME STATUS ===" in text
    assert game.game_active is False
    assert frames[-1][0].game_ended is False


def test_frames_have_non_decreasing_elapsed_time():
    referee, _, _, frames = make_referee(game_duration=8, round_win_threshold=1e9)
    referee.run()
    elapsed = [e for _, e in frames]
    assert elapsed == sorted(elapsed)
    assert elapsed[0] == 0


def test_timeout_winner_by_round_wins():
    referee, game, out, frames = make_referee(game_duration=3, round_win_threshold=1e9)
    game.team_round_wins = [2, 0]
    result = referee.run()
    text = out.getvalue()
    assert result == 0
    assert "Team 1 wins the match by round wins!" in text
    assert "=== Match Winner: Team 1 ===" in text
    assert frames[-1][0].final_winner == 0


def test_consecutive_win_ends_match():
    referee, game, out, frames = make_referee(
        game_duration=1000, round_win_threshold=0.0, consecutive_rounds_to_win=1
    )
    result = referee.run()
    text = out.getvalue()
    expected = 1 if game.rope_position > 0 else 0
    assert result == expected
    assert game.final_winner == expected
    assert f"=== Team {expected + 1} wins the match by achieving 1 consecutive wins! ===" in text
    assert f"=== Round Winner: Team {expected + 1} ===" in text
    assert frames[-1][0].game_ended is True
    assert game.round_number == 1


def test_won_round_leads_to_next_round():
    referee, game, out, _ = make_referee(
        game_duration=1000, round_win_threshold=0.0, consecutive_rounds_to_win=2
    )
    referee.run()
    text = out.getvalue()
    assert "Aligning teams for new round..." in text
    assert "Next round starting in:" in text
    assert game.round_number >= 2
    assert sum(game.team_round_wins) >= 2


def test_all_players_exhausted_ends_match():
    referee, game, out, _ = make_referee(game_duration=1000, round_win_threshold=1e9)
    for team in game.teams:
        for player in team:
            player.energy = 0.0
    result = referee.run()
    text = out.getvalue()
    assert result == 0
    assert "=== All players exhausted. Round winner: Team 1 ===" in text
    assert game.team_round_wins[0] == 1
    assert game.game_ended is True


def test_stats_are_printed_during_play():
    referee, _, out, _ = make_referee(game_duration=12, round_win_threshold=1e9)
    referee.run()
    text = out.getvalue()
    assert "=== Game Stats at" in text
    assert "Game starting in:" in text
    assert text.index("Game starting in:") < text.index("=== Game Stats at")


def test_main_reports_missing_config_file(tmp_path, capsys):
    missing = tmp_path / "missing.txt"
    status = main(["--no-window", "--config", str(missing)])
    assert status == 1
    assert "Error opening config file" in capsys.readouterr().err


def test_main_rejects_unsupported_team_count(tmp_path, capsys):
    path = tmp_path / "game.conf"
    path.write_text("num_teams=3\n", encoding="utf-8")
    status = main(["--no-window", "--config", str(path)])
    assert status == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as info:
        main(["--bogus"])
    assert info.value.code == 2