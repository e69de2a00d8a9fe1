"""Tests for the JSONL game log and its formatters."""

import json

from boards import make_level, make_session, swap
from tilematch.logging import GameLogConfig, GameLogger
from tilematch.logging.formatters import format_card, format_cards, format_grid
from tilematch.models.grid import Grid


def read_events(path) -> list[dict]:
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


class TestFormatters:
    """Tests for log formatters."""

    def test_format_card(self):
        """Test single card formatting."""
        grid = Grid.from_kinds([[3, 4]], traps=[(0, 1)])
        assert format_card(grid.get(0, 0)) == "3"
        assert format_card(grid.get(0, 1)) == "4*"
        assert format_card(None) == "."

    def test_removed_card(self):
        """Test that removed cards format as empty."""
        grid = Grid.from_kinds([[3]])
        grid.get(0, 0).mark_removed()
        assert format_card(grid.get(0, 0)) == "."

    def test_format_cards(self):
        """Test card list formatting."""
        grid = Grid.from_kinds([[2, 2, 2]])
        assert format_cards(grid.cards()) == "2@0:0,2@0:1,2@0:2"
        assert format_cards([]) == ""

    def test_format_grid(self):
        """Test grid formatting."""
        grid = Grid.from_kinds([[1, 2], [3, 4]])
        assert format_grid(grid) == ["1,2", "3,4"]


class TestGameLogger:
    """Tests for GameLogger."""

    def test_disabled_writes_nothing(self, tmp_path):
        """Test that a disabled logger creates no file."""
        path = tmp_path / "log.jsonl"
        with GameLogger(GameLogConfig(enabled=False, output_path=str(path))) as game_logger:
            game_logger.log_session_end(0, 0)
        assert not path.exists()

    def test_session_events(self, tmp_path):
        """Test the event stream of a won level."""
        path = tmp_path / "logs" / "game.jsonl"
        with GameLogger(GameLogConfig(enabled=True, output_path=str(path))) as game_logger:
            session = make_session(make_level(target_score=30), game_logger=game_logger)
            swap(session, (0, 2), (0, 3))
            session.stop()

        events = read_events(path)
        assert [e["type"] for e in events] == [
            "session_start",
            "level_start",
            "swap",
            "cascade",
            "level_end",
            "session_end",
        ]
        level_start = events[1]
        assert level_start["board"][0] == "1,1,2,1,3"
        assert level_start["target"] == 30

        assert events[2]["from"] == [0, 2]
        assert events[2]["to"] == [0, 3]
        assert events[2]["matched"]

        assert events[3]["wave"] == 1
        assert events[3]["gained"] == 30
        assert events[3]["cards"] == "1@0:0,1@0:1,1@0:2"

        assert events[4]["result"] == "win"
        assert "reason" not in events[4]
        assert events[5]["levels_won"] == 1

    def test_power_ups_logged(self, tmp_path):
        """Test shuffle and hint records."""
        path = tmp_path / "game.jsonl"
        with GameLogger(GameLogConfig(enabled=True, output_path=str(path))) as game_logger:
            session = make_session(game_logger=game_logger)
            session.use_hint()

        events = read_events(path)
        hint = [e for e in events if e["type"] == "power_up"][0]
        assert hint["kind"] == "hint"
        assert hint["remaining"] == 1
        assert hint["detail"]["pair"] == [[0, 2], [0, 3]]

    def test_loss_reason_logged(self, tmp_path):
        """Test that losses carry their reason."""
        path = tmp_path / "game.jsonl"
        with GameLogger(GameLogConfig(enabled=True, output_path=str(path))) as game_logger:
            session = make_session(make_level(time_limit=1), game_logger=game_logger)
            session.scheduler.advance(1)

        level_end = [e for e in read_events(path) if e["type"] == "level_end"][0]
        assert level_end["result"] == "lose"
        assert level_end["reason"] == "time"
