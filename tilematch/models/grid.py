"""Card grid model."""

import random
from typing import Iterable, Iterator

from .card import TILE_SIZE, Card, CardState, new_card_id
from .level import LevelDefinition
from .palette import CardPalette


class Grid:
    """Rows x cols matrix of cards with a row-major flat view.

    Cells are only empty (``None``) between removal and refill during a
    cascade. Every occupied cell holds a card whose (row, column) matches
    the cell.
    """

    def __init__(self, rows: int, cols: int, tile_size: int = TILE_SIZE):
        """Initialize an empty grid.

        Args:
            rows: Number of rows.
            cols: Number of columns.
            tile_size: Layout size of one cell in pixels.
        """
        self.rows = rows
        self.cols = cols
        self.tile_size = tile_size
        self._cells: list[list[Card | None]] = [
            [None] * cols for _ in range(rows)
        ]

    @classmethod
    def from_kinds(
        cls,
        kinds: list[list[int]],
        traps: Iterable[tuple[int, int]] = (),
        tile_size: int = TILE_SIZE,
        palette: CardPalette | None = None,
    ) -> "Grid":
        """Build a grid from a matrix of card kinds.

        Args:
            kinds: Row-major matrix of kind indices.
            traps: Positions of trap cards.
            tile_size: Layout size of one cell in pixels.
            palette: Palette used to annotate sprites.

        Returns:
            Fully populated grid.

        Raises:
            ValueError: If the matrix is empty or ragged.
        """
        if not kinds or not kinds[0]:
            raise ValueError("Board must have at least one row and column")
        cols = len(kinds[0])
        if any(len(row) != cols for row in kinds):
            raise ValueError("Board rows must all have the same length")

        trap_cells = set(traps)
        grid = cls(len(kinds), cols, tile_size)
        for r, row in enumerate(kinds):
            for c, kind in enumerate(row):
                card = Card(
                    card_id=new_card_id(r, c),
                    kind=kind,
                    row=r,
                    column=c,
                    is_trap=(r, c) in trap_cells,
                )
                if palette is not None:
                    card.sprite, card.sprite2x = palette.sprite_for(kind)
                grid.set(r, c, card)
        return grid

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if (row, col) is inside the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Card | None:
        """Get the card at a cell (None if empty or out of bounds)."""
        if not self.in_bounds(row, col):
            return None
        return self._cells[row][col]

    def set(self, row: int, col: int, card: Card | None) -> None:
        """Assign a card to a cell and move the card there."""
        self._cells[row][col] = card
        if card is not None:
            card.place(row, col, self.tile_size)

    def clear_cell(self, row: int, col: int) -> None:
        """Empty a cell."""
        self._cells[row][col] = None

    def contains(self, card: Card) -> bool:
        """Check if the card is the one occupying its own cell."""
        return self.get(card.row, card.column) is card

    def swap(self, card_a: Card, card_b: Card) -> None:
        """Exchange the positions of two cards in place.

        Identity and kind never change. Both cards must belong to this grid.
        """
        row_a, col_a, top_a, left_a = card_a.row, card_a.column, card_a.top, card_a.left

        card_a.row, card_a.column = card_b.row, card_b.column
        card_a.top, card_a.left = card_b.top, card_b.left

        card_b.row, card_b.column = row_a, col_a
        card_b.top, card_b.left = top_a, left_a

        self._cells[card_a.row][card_a.column] = card_a
        self._cells[card_b.row][card_b.column] = card_b

    def cards(self) -> list[Card]:
        """All cards flattened in row-major order."""
        return [card for row in self._cells for card in row if card is not None]

    def live_cards(self) -> list[Card]:
        """Non-removed cards in row-major order."""
        return [card for card in self.cards() if card.state != CardState.REMOVED]

    def kinds(self) -> list[list[int | None]]:
        """Matrix of kinds (None for empty cells)."""
        return [
            [card.kind if card is not None else None for card in row]
            for row in self._cells
        ]

    def snapshot(self) -> list[list[str | None]]:
        """Matrix of card ids, for identity comparisons."""
        return [
            [card.card_id if card is not None else None for card in row]
            for row in self._cells
        ]

    def is_consistent(self) -> bool:
        """Check that every card's (row, column) matches its cell."""
        for r, row in enumerate(self._cells):
            for c, card in enumerate(row):
                if card is not None and (card.row, card.column) != (r, c):
                    return False
        return True

    def row_cards(self, row: int) -> list[Card | None]:
        """Cells of one row, left to right."""
        return list(self._cells[row])

    def column_cards(self, col: int) -> list[Card | None]:
        """Cells of one column, top to bottom."""
        return [self._cells[r][col] for r in range(self.rows)]

    def __iter__(self) -> Iterator[list[Card | None]]:
        return iter(self._cells)

    def __len__(self) -> int:
        return self.rows * self.cols

    def __str__(self) -> str:
        lines = []
        for row in self._cells:
            lines.append(" ".join(
                "." if card is None or card.is_removed else str(card.kind)
                for card in row
            ))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"


class CardFactory:
    """Creates cards for a level (initial fill and refills)."""

    def __init__(
        self,
        level: LevelDefinition,
        palette: CardPalette | None = None,
        rng: random.Random | None = None,
        tile_size: int = TILE_SIZE,
    ):
        """Initialize card factory.

        Args:
            level: Level providing card kinds and trap rate.
            palette: Sprite palette (bounds the kind pool).
            rng: Random source (a fresh one if not provided).
            tile_size: Layout size of one cell in pixels.
        """
        self.level = level
        self.palette = palette or CardPalette()
        self.rng = rng or random.Random()
        self.tile_size = tile_size
        self.pool_size = self.palette.pool_size(level.card_kinds)

    def _roll_kind(self) -> int:
        return self.rng.randrange(self.pool_size)

    def _roll_trap(self) -> bool:
        return self.rng.random() < self.level.trap_rate

    def create(self, row: int, col: int, entering: bool = False) -> Card:
        """Create a new card positioned at a cell.

        Args:
            row: Target row.
            col: Target column.
            entering: Place the card one tile above the grid so the
                presentation layer can animate a drop-in.

        Returns:
            New card. Slot assignment is the caller's job.
        """
        kind = self._roll_kind()
        sprite, sprite2x = self.palette.sprite_for(kind)
        card = Card(
            card_id=new_card_id(row, col),
            kind=kind,
            row=row,
            column=col,
            is_trap=self._roll_trap(),
            sprite=sprite,
            sprite2x=sprite2x,
        )
        card.place(row, col, self.tile_size)
        if entering:
            card.is_new = True
            card.top = -self.tile_size
        return card

    def fill(self, rows: int, cols: int) -> Grid:
        """Create a fully populated grid."""
        grid = Grid(rows, cols, self.tile_size)
        for r in range(rows):
            for c in range(cols):
                grid.set(r, c, self.create(r, c))
        return grid
