"""Match detection over a card grid.

All functions are side-effect free from the caller's point of view:
``detect_swap_match`` mutates the grid temporarily but always restores it.
"""

from tilematch.models.card import Card, CardState
from tilematch.models.grid import Grid
from tilematch.models.level import MIN_MATCH_FLOOR

MatchGroup = list[Card]
Position = tuple[int, int]


def _collect_runs(cells: list[Card | None], min_match: int) -> list[MatchGroup]:
    """Group consecutive cards of equal kind in one line.

    Empty or removed cells break a run.
    """
    runs: list[MatchGroup] = []
    current: MatchGroup = []
    for card in cells:
        if card is None or card.state == CardState.REMOVED:
            if len(current) >= min_match:
                runs.append(current)
            current = []
            continue
        if current and card.kind == current[-1].kind:
            current.append(card)
        else:
            if len(current) >= min_match:
                runs.append(current)
            current = [card]
    if len(current) >= min_match:
        runs.append(current)
    return runs


def find_matches(grid: Grid, min_match: int = MIN_MATCH_FLOOR) -> list[MatchGroup]:
    """Find every horizontal and vertical run of at least ``min_match`` cards.

    Rows are scanned left to right, then columns top to bottom. A card in
    both a horizontal and a vertical run appears in two separate groups.

    Args:
        grid: Grid to scan.
        min_match: Minimum run length (never below 3).

    Returns:
        Match groups in scan order.
    """
    min_match = max(MIN_MATCH_FLOOR, min_match)
    matches: list[MatchGroup] = []
    for r in range(grid.rows):
        matches.extend(_collect_runs(grid.row_cards(r), min_match))
    for c in range(grid.cols):
        matches.extend(_collect_runs(grid.column_cards(c), min_match))
    return matches


def detect_swap_match(
    grid: Grid,
    pos_a: Position,
    pos_b: Position,
    min_match: int = MIN_MATCH_FLOOR,
) -> list[MatchGroup]:
    """Test a hypothetical swap without committing it.

    Args:
        grid: Grid to test on.
        pos_a: First cell (row, col).
        pos_b: Second cell (row, col).
        min_match: Minimum run length.

    Returns:
        Matches the swap would produce (empty if either cell is empty).
    """
    card_a = grid.get(*pos_a)
    card_b = grid.get(*pos_b)
    if card_a is None or card_b is None:
        return []

    grid.swap(card_a, card_b)
    try:
        return find_matches(grid, min_match)
    finally:
        grid.swap(card_a, card_b)


def find_hint_pair(
    grid: Grid,
    min_match: int = MIN_MATCH_FLOOR,
) -> tuple[Card, Card] | None:
    """Find the first adjacent pair whose swap produces a match.

    Cells are visited in row-major order, trying the right neighbor before
    the down neighbor, so the result is reproducible for a given grid.
    """
    for r in range(grid.rows):
        for c in range(grid.cols):
            if c + 1 < grid.cols and detect_swap_match(grid, (r, c), (r, c + 1), min_match):
                return grid.get(r, c), grid.get(r, c + 1)
            if r + 1 < grid.rows and detect_swap_match(grid, (r, c), (r + 1, c), min_match):
                return grid.get(r, c), grid.get(r + 1, c)
    return None


def has_possible_move(grid: Grid, min_match: int = MIN_MATCH_FLOOR) -> bool:
    """Check if any adjacent swap produces a match."""
    return find_hint_pair(grid, min_match) is not None


def is_adjacent(card_a: Card, card_b: Card) -> bool:
    """Check if two cards are orthogonal neighbors (Manhattan distance 1)."""
    return abs(card_a.row - card_b.row) + abs(card_a.column - card_b.column) == 1


def matched_cards(matches: list[MatchGroup]) -> list[Card]:
    """Unique cards across match groups, in first-seen order."""
    seen: set[str] = set()
    cards: list[Card] = []
    for group in matches:
        for card in group:
            if card.card_id not in seen:
                seen.add(card.card_id)
                cards.append(card)
    return cards
