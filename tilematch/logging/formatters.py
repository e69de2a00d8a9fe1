"""Formatters for game log output."""

from tilematch.models.card import Card
from tilematch.models.grid import Grid

# Marker appended to trap cards
TRAP_MARK = "*"

# Placeholder for empty or removed cells
EMPTY_CELL = "."


def format_card(card: Card | None) -> str:
    """Format a single card to string.

    Args:
        card: Card to format (None for an empty cell).

    Returns:
        Formatted string (e.g., "3" for kind 3, "3*" for a trap of kind 3,
        "." for an empty or removed cell).
    """
    if card is None or card.is_removed:
        return EMPTY_CELL
    mark = TRAP_MARK if card.is_trap else ""
    return f"{card.kind}{mark}"


def format_cards(cards: list[Card]) -> str:
    """Format cards to a comma-separated list of kind@row:col.

    Returns:
        e.g. "2@0:1,2@0:2,2@0:3". Empty string if no cards.
    """
    return ",".join(
        f"{format_card(c)}@{c.row}:{c.column}" for c in cards
    )


def format_grid(grid: Grid) -> list[str]:
    """Format a grid to one comma-separated string per row."""
    return [",".join(format_card(card) for card in row) for row in grid]
