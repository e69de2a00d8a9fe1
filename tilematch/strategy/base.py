"""Base strategy class for automatic players.

Defines the interface that all autoplay strategies must implement.
"""

from abc import ABC, abstractmethod

from tilematch.game.session import GameSession
from tilematch.models.card import Card


class Strategy(ABC):
    """Abstract base class for autoplay strategies."""

    @abstractmethod
    def select_move(self, session: GameSession) -> tuple[Card, Card] | None:
        """Pick an adjacent pair to swap.

        Args:
            session: Session to play

        Returns:
            Pair of cards to swap, or None if no move is worth making
        """
        pass

    def should_shuffle(self, session: GameSession) -> bool:
        """Decide whether to spend a shuffle instead of moving.

        Default: only when no move was found and a shuffle is left.
        """
        return session.state.shuffles_left > 0 and self.select_move(session) is None

    def play_turn(self, session: GameSession) -> bool:
        """Make one move (or shuffle) on the session.

        Returns:
            True if something was played
        """
        if self.should_shuffle(session):
            session.use_shuffle()
            return True

        move = self.select_move(session)
        if move is None:
            return False
        first, second = move
        session.back()
        session.select(first)
        session.select(second)
        return True
