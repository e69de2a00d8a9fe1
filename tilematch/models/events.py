"""Outcome event payloads passed to session callbacks."""

from pydantic import BaseModel

from .game_state import LoseReason
from .level import LevelDefinition


class ScoreEvent(BaseModel):
    """Score changed after a scoring event."""

    total: int
    level_score: int
    gained: int
    base: int
    combo: int  # Streak before this event
    multiplier: float
    contains_trap: bool
    target: int


class LevelChangeEvent(BaseModel):
    """A level was (re)loaded."""

    level: LevelDefinition
    index: int


class WinEvent(BaseModel):
    """Level target reached."""

    score: int
    level: LevelDefinition
    level_score: int
    target_score: int
    remaining_time: int | None = None
    remaining_moves: int | None = None


class LoseEvent(BaseModel):
    """Level attempt lost; ``score`` is already rolled back."""

    score: int
    level: LevelDefinition
    reason: LoseReason
    level_score: int
    target_score: int


class ShuffleEvent(BaseModel):
    """Shuffle power-up used."""

    shuffles_left: int


class HintEvent(BaseModel):
    """Hint power-up used."""

    hints_left: int
    card_ids: tuple[str, str]
