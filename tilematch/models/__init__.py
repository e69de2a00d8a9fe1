"""Game models."""

from .card import TILE_SIZE, Card, CardState
from .events import (
    HintEvent,
    LevelChangeEvent,
    LoseEvent,
    ScoreEvent,
    ShuffleEvent,
    WinEvent,
)
from .game_state import GameResult, LoseReason, SessionPhase, SessionState, SoundKey
from .grid import CardFactory, Grid
from .level import GridSize, LevelDefinition
from .palette import CardPalette

__all__ = [
    "TILE_SIZE",
    "Card",
    "CardState",
    "CardFactory",
    "CardPalette",
    "Grid",
    "GridSize",
    "LevelDefinition",
    "GameResult",
    "LoseReason",
    "SessionPhase",
    "SessionState",
    "SoundKey",
    "HintEvent",
    "LevelChangeEvent",
    "LoseEvent",
    "ScoreEvent",
    "ShuffleEvent",
    "WinEvent",
]
