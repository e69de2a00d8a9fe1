"""Level catalog: built-in campaign, level files and default synthesis."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from tilematch.config import Config
from tilematch.models.level import GridSize, LevelDefinition

logger = logging.getLogger(__name__)

DEFAULT_TRAP_RATE = 0.05

# Built-in campaign, easiest first
BUILTIN_LEVELS: list[dict[str, Any]] = [
    {
        "name": "Warm Up",
        "grid_size": {"rows": 7, "cols": 7},
        "card_kinds": 4,
        "target_score": 300,
        "shuffles": 3,
        "hints": 3,
        "combo_bonus": 0.1,
    },
    {
        "name": "Countdown",
        "grid_size": {"rows": 8, "cols": 8},
        "card_kinds": 5,
        "time_limit": 90,
        "target_score": 600,
        "shuffles": 2,
        "hints": 2,
        "combo_bonus": 0.1,
    },
    {
        "name": "Few Moves",
        "grid_size": {"rows": 8, "cols": 8},
        "card_kinds": 5,
        "move_limit": 20,
        "target_score": 700,
        "shuffles": 2,
        "hints": 1,
        "combo_bonus": 0.15,
    },
    {
        "name": "Traps",
        "grid_size": {"rows": 8, "cols": 8},
        "card_kinds": 6,
        "trap_rate": 0.08,
        "time_limit": 120,
        "target_score": 900,
        "shuffles": 1,
        "hints": 1,
        "combo_bonus": 0.2,
    },
    {
        "name": "Long Lines",
        "grid_size": {"rows": 9, "cols": 9},
        "card_kinds": 5,
        "min_match": 4,
        "trap_rate": 0.05,
        "move_limit": 30,
        "time_limit": 180,
        "target_score": 800,
        "shuffles": 2,
        "hints": 2,
        "combo_bonus": 0.25,
    },
]


def normalize_levels(raw_levels: Iterable[LevelDefinition | dict[str, Any]]) -> list[LevelDefinition]:
    """Validate level records and assign missing ids (position + 1)."""
    levels: list[LevelDefinition] = []
    for idx, raw in enumerate(raw_levels):
        level = raw if isinstance(raw, LevelDefinition) else LevelDefinition.model_validate(raw)
        if level.id is None:
            level = level.model_copy(update={"id": idx + 1})
        levels.append(level)
    return levels


def load_levels(path: Path | str) -> list[LevelDefinition]:
    """Load a level list from a YAML file.

    The file holds either a list of level records or a mapping with a
    ``levels`` key.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a level list.
    """
    level_path = Path(path)
    if not level_path.exists():
        raise FileNotFoundError(f"Level file not found: {level_path}")

    with open(level_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("levels")
    if not isinstance(data, list):
        raise ValueError(f"{level_path.name}: expected a list of levels")
    return normalize_levels(data)


def default_level(config: Config) -> LevelDefinition:
    """Synthesize a single level from the game configuration."""
    game = config.game
    return LevelDefinition(
        id=1,
        name="Default",
        grid_size=GridSize(rows=game.grid.rows, cols=game.grid.cols),
        card_kinds=game.card_num,
        min_match=game.min_match,
        trap_rate=DEFAULT_TRAP_RATE if game.trap else 0.0,
        target_score=500,
        shuffles=2,
        hints=2,
        combo_bonus=0.1,
    )


def resolve_levels(config: Config) -> list[LevelDefinition]:
    """Resolve the level list for a session.

    Order: inline levels, level file, built-in campaign (when enabled),
    then one synthesized default level.
    """
    game = config.game
    if game.levels:
        return normalize_levels(game.levels)
    if game.levels_file:
        levels = load_levels(game.levels_file)
        if levels:
            return levels
        logger.warning(f"No levels in {game.levels_file}, using default level")
    if game.campaign:
        return normalize_levels(BUILTIN_LEVELS)
    return [default_level(config)]


class LevelCatalog:
    """Ordered, non-empty list of levels."""

    def __init__(self, levels: list[LevelDefinition]):
        if not levels:
            raise ValueError("Level catalog must not be empty")
        self._levels = normalize_levels(levels)

    @classmethod
    def from_config(cls, config: Config) -> LevelCatalog:
        return cls(resolve_levels(config))

    def all(self) -> list[LevelDefinition]:
        return list(self._levels)

    def clamp_index(self, index: int) -> int:
        """Clamp an index into the catalog."""
        return min(max(index, 0), len(self._levels) - 1)

    def get(self, index: int) -> LevelDefinition:
        """Get a level, clamping the index."""
        return self._levels[self.clamp_index(index)]

    def is_last(self, index: int) -> bool:
        return index >= len(self._levels) - 1

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self):
        return iter(self._levels)
