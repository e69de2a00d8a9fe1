"""Simple strategy implementations.

- HintStrategy: play the first swap the hint search finds
- GreedyStrategy: play the swap that matches the most cards
"""

from tilematch.game.matcher import detect_swap_match, find_hint_pair
from tilematch.game.session import GameSession
from tilematch.models.card import Card
from tilematch.strategy.base import Strategy


class HintStrategy(Strategy):
    """Plays the match engine's hint pair."""

    def select_move(self, session: GameSession) -> tuple[Card, Card] | None:
        return find_hint_pair(session.grid, session.level.min_match)


class GreedyStrategy(Strategy):
    """Plays the swap that immediately matches the most cards.

    Ties go to the first pair in row-major order (right before down).
    """

    def select_move(self, session: GameSession) -> tuple[Card, Card] | None:
        grid = session.grid
        min_match = session.level.min_match
        best: tuple[Card, Card] | None = None
        best_count = 0

        for r in range(grid.rows):
            for c in range(grid.cols):
                for nr, nc in ((r, c + 1), (r + 1, c)):
                    if not grid.in_bounds(nr, nc):
                        continue
                    matches = detect_swap_match(grid, (r, c), (nr, nc), min_match)
                    count = sum(len(group) for group in matches)
                    if count > best_count:
                        best_count = count
                        best = (grid.get(r, c), grid.get(nr, nc))
        return best
