"""Level definition models."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

MIN_MATCH_FLOOR = 3
MAX_TRAP_RATE = 0.9


def _floor_at_least(value: Any, minimum: int) -> int:
    """Floor a numeric value and clamp it to a minimum."""
    return max(minimum, math.floor(float(value)))


class GridSize(BaseModel):
    """Grid dimensions."""

    model_config = ConfigDict(frozen=True)

    rows: int = 8
    cols: int = 8

    @field_validator("rows", "cols", mode="before")
    @classmethod
    def _at_least_one(cls, value: Any) -> int:
        return _floor_at_least(value, 1)


class LevelDefinition(BaseModel):
    """One level of the catalog.

    Values are normalized (floored and clamped) at load time rather than
    rejected. Accepts snake_case or camelCase keys.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int | None = None
    name: str | None = None
    grid_size: GridSize = GridSize()
    card_kinds: int = 5
    min_match: int = MIN_MATCH_FLOOR
    trap_rate: float = 0.0
    time_limit: int | None = None  # Seconds
    move_limit: int | None = None
    target_score: int = 500
    shuffles: int = 2
    hints: int = 2
    combo_bonus: float = 0.1

    @field_validator("card_kinds", mode="before")
    @classmethod
    def _normalize_kinds(cls, value: Any) -> int:
        return _floor_at_least(value, 1)

    @field_validator("min_match", mode="before")
    @classmethod
    def _normalize_min_match(cls, value: Any) -> int:
        return _floor_at_least(value, MIN_MATCH_FLOOR)

    @field_validator("trap_rate", mode="before")
    @classmethod
    def _normalize_trap_rate(cls, value: Any) -> float:
        if value is None:
            return 0.0
        return min(max(float(value), 0.0), MAX_TRAP_RATE)

    @field_validator("time_limit", "move_limit", mode="before")
    @classmethod
    def _normalize_limit(cls, value: Any) -> int | None:
        if value is None:
            return None
        return _floor_at_least(value, 0)

    @field_validator("target_score", "shuffles", "hints", mode="before")
    @classmethod
    def _normalize_count(cls, value: Any) -> int:
        return _floor_at_least(value, 0)

    @field_validator("combo_bonus", mode="before")
    @classmethod
    def _normalize_combo_bonus(cls, value: Any) -> float:
        if value is None:
            return 0.0
        return max(0.0, float(value))

    @property
    def rows(self) -> int:
        return self.grid_size.rows

    @property
    def cols(self) -> int:
        return self.grid_size.cols

    @property
    def display_name(self) -> str:
        """Name for display, falling back to the id."""
        return self.name or f"Level {self.id}"
