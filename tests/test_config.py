"""Tests for configuration and level normalization."""

import pytest
from pydantic import ValidationError

from tilematch.config import AudioConfig, Config, load_config
from tilematch.models.level import LevelDefinition


class TestLevelDefinition:
    """Tests for LevelDefinition normalization."""

    def test_defaults(self):
        """Test the default level values."""
        level = LevelDefinition()
        assert level.min_match == 3
        assert level.trap_rate == 0.0
        assert level.time_limit is None
        assert level.move_limit is None
        assert (level.rows, level.cols) == (8, 8)

    def test_camel_case_keys(self):
        """Test that host-style camelCase keys are accepted."""
        level = LevelDefinition.model_validate({
            "id": 3,
            "gridSize": {"rows": 6, "cols": 7},
            "cardKinds": 4,
            "minMatch": 4,
            "trapRate": 0.1,
            "timeLimit": 60,
            "moveLimit": 25,
            "targetScore": 800,
            "comboBonus": 0.2,
        })
        assert (level.rows, level.cols) == (6, 7)
        assert level.card_kinds == 4
        assert level.min_match == 4
        assert level.trap_rate == 0.1
        assert level.time_limit == 60
        assert level.move_limit == 25
        assert level.target_score == 800
        assert level.combo_bonus == 0.2

    def test_values_floored_and_clamped(self):
        """Test that out-of-range values are normalized, not rejected."""
        level = LevelDefinition.model_validate({
            "grid_size": {"rows": 0, "cols": 5.7},
            "card_kinds": 0,
            "min_match": 2,
            "trap_rate": 1.5,
            "time_limit": -10,
            "move_limit": 12.9,
            "target_score": -5,
            "shuffles": 1.5,
            "hints": -1,
            "combo_bonus": -0.3,
        })
        assert (level.rows, level.cols) == (1, 5)
        assert level.card_kinds == 1
        assert level.min_match == 3
        assert level.trap_rate == 0.9
        assert level.time_limit == 0
        assert level.move_limit == 12
        assert level.target_score == 0
        assert level.shuffles == 1
        assert level.hints == 0
        assert level.combo_bonus == 0.0

    def test_negative_trap_rate(self):
        """Test that negative trap rates clamp to zero."""
        assert LevelDefinition(trap_rate=-0.5).trap_rate == 0.0

    def test_malformed_value_rejected(self):
        """Test that non-numeric values fail validation."""
        with pytest.raises(ValidationError):
            LevelDefinition.model_validate({"card_kinds": "many"})

    def test_immutable(self):
        """Test that levels cannot be changed after load."""
        level = LevelDefinition()
        with pytest.raises(ValidationError):
            level.target_score = 10

    def test_display_name(self):
        """Test the display name fallback."""
        assert LevelDefinition(id=4).display_name == "Level 4"
        assert LevelDefinition(id=4, name="Boss").display_name == "Boss"


class TestConfig:
    """Tests for Config and load_config."""

    def test_defaults(self):
        """Test default configuration."""
        config = Config()
        assert config.game.card_num == 5
        assert config.timing.tick_interval == 1.0
        assert config.timing.hint_clear_delay == 1.8
        assert not config.timing.paced_cascades
        assert config.audio.volume == 1.0
        assert not config.game_log.enabled
        assert config.assets.palette().size == 24

    def test_volume_clamped(self):
        """Test that volume is clamped into 0..1."""
        assert AudioConfig(volume=2.0).volume == 1.0
        assert AudioConfig(volume=-1.0).volume == 0.0

    def test_load_none(self):
        """Test loading without a path."""
        assert load_config(None) == Config()

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file yields defaults."""
        assert load_config(tmp_path / "nope.yaml") == Config()

    def test_load_empty_file(self, tmp_path):
        """Test that an empty file yields defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_load_yaml(self, tmp_path):
        """Test loading values and inline levels from YAML."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "game:\n"
            "  card_num: 6\n"
            "  grid:\n"
            "    rows: 9\n"
            "    cols: 7\n"
            "  trap: true\n"
            "  levels:\n"
            "    - name: First\n"
            "      targetScore: 100\n"
            "      moveLimit: 10\n"
            "timing:\n"
            "  paced_cascades: true\n"
            "audio:\n"
            "  volume: 0.5\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        config = load_config(path)
        assert config.game.card_num == 6
        assert (config.game.grid.rows, config.game.grid.cols) == (9, 7)
        assert config.game.trap
        assert config.game.levels[0].target_score == 100
        assert config.game.levels[0].move_limit == 10
        assert config.timing.paced_cascades
        assert config.audio.volume == 0.5
        assert config.logging.level == "DEBUG"
