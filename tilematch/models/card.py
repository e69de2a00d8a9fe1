"""Card model."""

import time
import uuid
from enum import IntEnum

from pydantic import BaseModel, Field

# Layout size of one grid cell in pixels
TILE_SIZE = 40


class CardState(IntEnum):
    """Card lifecycle state."""

    NORMAL = 1
    SELECTED = 2
    REMOVED = 3  # Terminal


def new_card_id(row: int, column: int) -> str:
    """Create an opaque unique card id."""
    return f"{row}-{column}-{uuid.uuid4().hex[:12]}"


class Card(BaseModel):
    """Single card on the grid.

    Cards are mutated in place for position and state changes. A card
    that reaches ``REMOVED`` is never revived; refills create new cards.
    """

    card_id: str
    kind: int  # Index into the kind palette

    # Grid position
    row: int
    column: int

    # Layout position (derived from row/column)
    top: int = 0
    left: int = 0

    state: CardState = CardState.NORMAL
    is_trap: bool = False
    is_hinted: bool = False
    is_new: bool = False  # Entering from above during refill
    drop_distance: int = 0  # Rows fallen during the last compaction

    sprite: str | None = None
    sprite2x: str | None = None

    created_at: float = Field(default_factory=time.time)
    removed_at: float | None = None

    @property
    def is_removed(self) -> bool:
        """Check if this card has been removed from play."""
        return self.state == CardState.REMOVED

    @property
    def position(self) -> tuple[int, int]:
        """Grid position as (row, column)."""
        return (self.row, self.column)

    def place(self, row: int, column: int, tile_size: int = TILE_SIZE) -> None:
        """Move the card to a cell and recompute its layout position."""
        self.row = row
        self.column = column
        self.top = row * tile_size
        self.left = column * tile_size

    def mark_removed(self) -> None:
        """Transition the card to ``REMOVED``."""
        self.state = CardState.REMOVED
        self.removed_at = time.time()
        self.is_hinted = False

    def __str__(self) -> str:
        trap = "*" if self.is_trap else ""
        return f"{self.kind}{trap}@({self.row},{self.column})"

    def __repr__(self) -> str:
        return (
            f"Card(id={self.card_id!r}, kind={self.kind}, "
            f"pos=({self.row},{self.column}), state={self.state.name})"
        )
