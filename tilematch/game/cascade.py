"""Cascade resolution: remove -> compact -> refill -> settle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from tilematch.models.card import Card, CardState
from tilematch.models.grid import CardFactory, Grid

from .matcher import MatchGroup, find_matches, has_possible_move, matched_cards

logger = logging.getLogger(__name__)

# Upper bound on silent cleanup passes for a freshly generated board
MAX_CLEANUP_PASSES = 100


class CascadePhase(str, Enum):
    """Cascade state machine phases."""

    IDLE = "idle"
    REMOVING = "removing"
    COMPACTING = "compacting"
    REFILLING = "refilling"
    SETTLING = "settling"


class CascadeResult(str, Enum):
    """How a cascade ended."""

    SETTLED = "settled"  # Stable, at least one legal move
    NO_MOVES = "no_moves"  # Stable, no legal move left
    HALTED = "halted"  # Stopped by the removal hook (e.g. level won)


@dataclass
class CascadeOutcome:
    """Summary of a finished cascade."""

    result: CascadeResult
    waves: int  # Number of removal passes
    removed: int  # Cards removed in total


class CascadeResolver:
    """Drives the remove -> compact -> refill -> settle cycle.

    The resolver is logically synchronous. ``step()`` performs the work of
    the current phase and advances; callers that want to pace phases for
    animation call ``step()`` from timer callbacks, others use ``run()``.
    """

    def __init__(
        self,
        grid: Grid,
        factory: CardFactory,
        min_match: int,
        on_remove: Callable[[list[MatchGroup]], bool] | None = None,
        on_phase: Callable[[CascadePhase], None] | None = None,
    ):
        """Initialize resolver.

        Args:
            grid: Grid to mutate.
            factory: Creates refill cards.
            min_match: Minimum run length.
            on_remove: Called with the match groups on entering each
                removal pass, before cards are marked removed. Returning
                False halts the cascade after the removal.
            on_phase: Called after entering each phase (presentation hook).
        """
        self.grid = grid
        self.factory = factory
        self.min_match = min_match
        self._on_remove = on_remove
        self._on_phase = on_phase

        self.phase = CascadePhase.IDLE
        self.outcome: CascadeOutcome | None = None
        self.removal_list: list[Card] = []

        self._pending: list[MatchGroup] = []
        self._waves = 0
        self._removed = 0

    @property
    def is_running(self) -> bool:
        return self.phase != CascadePhase.IDLE

    @property
    def waves(self) -> int:
        """Removal passes so far in the current cascade."""
        return self._waves

    def begin(self, matches: list[MatchGroup]) -> None:
        """Start a cascade from resolved match groups.

        Raises:
            RuntimeError: If a cascade is already running.
            ValueError: If there are no matches.
        """
        if self.is_running:
            raise RuntimeError("Cascade already in progress")
        if not matches:
            raise ValueError("Cannot start a cascade without matches")

        self._pending = matches
        self._waves = 0
        self._removed = 0
        self.outcome = None
        self._enter(CascadePhase.REMOVING)

    def run(self, matches: list[MatchGroup]) -> CascadeOutcome:
        """Run a whole cascade synchronously."""
        self.begin(matches)
        while self.is_running:
            self.step()
        assert self.outcome is not None
        return self.outcome

    def step(self) -> CascadePhase:
        """Do the current phase's work and advance.

        Returns:
            The phase entered.
        """
        if self.phase == CascadePhase.REMOVING:
            self._remove()
        elif self.phase == CascadePhase.COMPACTING:
            self.compact()
            self._enter(CascadePhase.REFILLING)
        elif self.phase == CascadePhase.REFILLING:
            self.refill(entering=True)
            self._enter(CascadePhase.SETTLING)
        elif self.phase == CascadePhase.SETTLING:
            self._settle()
        return self.phase

    def drain_removed(self) -> list[Card]:
        """Take and clear the removal-visualization list."""
        removed, self.removal_list = self.removal_list, []
        return removed

    def _enter(self, phase: CascadePhase) -> None:
        self.phase = phase
        logger.debug(f"Cascade phase: {phase.value}")
        if self._on_phase:
            self._on_phase(phase)

    def _remove(self) -> None:
        matches, self._pending = self._pending, []
        self._waves += 1

        keep_going = True
        if self._on_remove:
            keep_going = self._on_remove(matches)

        cards = matched_cards(matches)
        for card in cards:
            card.mark_removed()
            self.removal_list.append(card)
        self._removed += len(cards)
        logger.debug(f"Wave {self._waves}: removed {len(cards)} cards")

        if not keep_going:
            self._finish(CascadeResult.HALTED)
            return
        self._enter(CascadePhase.COMPACTING)

    def compact(self) -> None:
        """Shift surviving cards down within each column (gravity).

        Relative vertical order of survivors is preserved; vacated cells at
        the top of each column are left empty.
        """
        grid = self.grid
        for col in range(grid.cols):
            write_row = grid.rows - 1
            for row in range(grid.rows - 1, -1, -1):
                card = grid.get(row, col)
                if card is None or card.state == CardState.REMOVED:
                    continue
                card.drop_distance = write_row - row
                if write_row != row:
                    grid.set(write_row, col, card)
                write_row -= 1
            for row in range(write_row, -1, -1):
                grid.clear_cell(row, col)

    def refill(self, entering: bool = False) -> int:
        """Fill every empty cell with a new card.

        Returns:
            Number of cards created.
        """
        created = 0
        grid = self.grid
        for col in range(grid.cols):
            for row in range(grid.rows):
                if grid.get(row, col) is not None:
                    break
                card = self.factory.create(row, col)
                grid.set(row, col, card)
                if entering:
                    card.is_new = True
                    card.top = -grid.tile_size
                created += 1
        return created

    def _settle(self) -> None:
        for card in self.grid.cards():
            card.is_new = False
            card.top = card.row * self.grid.tile_size
            if card.state != CardState.REMOVED:
                card.state = CardState.NORMAL

        matches = find_matches(self.grid, self.min_match)
        if matches:
            self._pending = matches
            self._enter(CascadePhase.REMOVING)
            return

        if has_possible_move(self.grid, self.min_match):
            self._finish(CascadeResult.SETTLED)
        else:
            self._finish(CascadeResult.NO_MOVES)

    def _finish(self, result: CascadeResult) -> None:
        self.outcome = CascadeOutcome(
            result=result,
            waves=self._waves,
            removed=self._removed,
        )
        self._enter(CascadePhase.IDLE)
        logger.debug(
            f"Cascade finished: {result.value} "
            f"({self._waves} waves, {self._removed} removed)"
        )

    def clear_initial_matches(self, max_passes: int = MAX_CLEANUP_PASSES) -> int:
        """Silently resolve matches on a freshly generated board.

        No scoring, no removal list, no entering animation.

        Returns:
            Number of passes performed.
        """
        passes = 0
        while passes < max_passes:
            matches = find_matches(self.grid, self.min_match)
            if not matches:
                return passes
            for card in matched_cards(matches):
                card.mark_removed()
            self.compact()
            self.refill()
            passes += 1

        if find_matches(self.grid, self.min_match):
            logger.warning(
                f"Initial board still has matches after {max_passes} cleanup passes"
            )
        return passes
