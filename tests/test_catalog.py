"""Tests for the level catalog."""

import pytest

from tilematch.catalog import (
    BUILTIN_LEVELS,
    LevelCatalog,
    default_level,
    load_levels,
    normalize_levels,
    resolve_levels,
)
from tilematch.config import Config, GameConfig
from tilematch.models.level import GridSize, LevelDefinition


class TestNormalizeLevels:
    """Tests for normalize_levels."""

    def test_ids_from_position(self):
        """Test that missing ids default to position + 1."""
        levels = normalize_levels([{"name": "a"}, {"id": 9}, {"name": "c"}])
        assert [lvl.id for lvl in levels] == [1, 9, 3]

    def test_accepts_models(self):
        """Test that already-built levels pass through."""
        level = LevelDefinition(id=5)
        assert normalize_levels([level]) == [level]


class TestLoadLevels:
    """Tests for load_levels."""

    def test_list_file(self, tmp_path):
        """Test a YAML list of levels."""
        path = tmp_path / "levels.yaml"
        path.write_text(
            "- name: One\n"
            "  cardKinds: 4\n"
            "- name: Two\n"
            "  timeLimit: 30\n"
        )
        levels = load_levels(path)
        assert [lvl.name for lvl in levels] == ["One", "Two"]
        assert levels[0].card_kinds == 4
        assert levels[1].time_limit == 30
        assert levels[1].id == 2

    def test_mapping_file(self, tmp_path):
        """Test a mapping with a levels key."""
        path = tmp_path / "levels.yaml"
        path.write_text("levels:\n  - name: Only\n")
        assert load_levels(path)[0].name == "Only"

    def test_missing_file(self, tmp_path):
        """Test that a missing level file is an error."""
        with pytest.raises(FileNotFoundError):
            load_levels(tmp_path / "missing.yaml")

    def test_not_a_list(self, tmp_path):
        """Test that a file without levels is an error."""
        path = tmp_path / "levels.yaml"
        path.write_text("name: nope\n")
        with pytest.raises(ValueError):
            load_levels(path)


class TestResolveLevels:
    """Tests for level resolution order."""

    def test_default_level(self):
        """Test the synthesized level."""
        config = Config(game=GameConfig(card_num=6, grid=GridSize(rows=5, cols=6), trap=True))
        level = default_level(config)
        assert level.id == 1
        assert level.name == "Default"
        assert (level.rows, level.cols) == (5, 6)
        assert level.card_kinds == 6
        assert level.trap_rate == 0.05
        assert level.target_score == 500
        assert level.shuffles == 2
        assert level.hints == 2
        assert level.combo_bonus == 0.1

    def test_default_without_traps(self):
        """Test that traps are off by default."""
        assert default_level(Config()).trap_rate == 0.0

    def test_falls_back_to_default(self):
        """Test that no levels means one default level."""
        levels = resolve_levels(Config())
        assert len(levels) == 1
        assert levels[0].name == "Default"

    def test_campaign(self):
        """Test the built-in campaign."""
        levels = resolve_levels(Config(game=GameConfig(campaign=True)))
        assert len(levels) == len(BUILTIN_LEVELS)
        assert [lvl.id for lvl in levels] == list(range(1, len(BUILTIN_LEVELS) + 1))

    def test_level_file_before_campaign(self, tmp_path):
        """Test that a level file wins over the campaign."""
        path = tmp_path / "levels.yaml"
        path.write_text("- name: File\n")
        config = Config(game=GameConfig(campaign=True, levels_file=str(path)))
        assert [lvl.name for lvl in resolve_levels(config)] == ["File"]

    def test_inline_levels_first(self, tmp_path):
        """Test that inline levels win over everything else."""
        path = tmp_path / "levels.yaml"
        path.write_text("- name: File\n")
        config = Config(game=GameConfig(
            campaign=True,
            levels_file=str(path),
            levels=[{"name": "Inline"}],
        ))
        assert [lvl.name for lvl in resolve_levels(config)] == ["Inline"]


class TestLevelCatalog:
    """Tests for LevelCatalog."""

    def test_empty_rejected(self):
        """Test that a catalog needs at least one level."""
        with pytest.raises(ValueError):
            LevelCatalog([])

    def test_clamp_index(self):
        """Test that indexes are clamped into range."""
        catalog = LevelCatalog([LevelDefinition(), LevelDefinition()])
        assert catalog.clamp_index(-3) == 0
        assert catalog.clamp_index(7) == 1
        assert catalog.get(7).id == 2

    def test_is_last(self):
        """Test last-level detection."""
        catalog = LevelCatalog([LevelDefinition(), LevelDefinition()])
        assert not catalog.is_last(0)
        assert catalog.is_last(1)
        assert len(catalog) == 2

    def test_from_config(self):
        """Test building from configuration."""
        catalog = LevelCatalog.from_config(Config(game=GameConfig(campaign=True)))
        assert [lvl.display_name for lvl in catalog][0] == "Warm Up"
