"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tilematch.game.session import GameSession
    from tilematch.models.events import LoseEvent, ScoreEvent, WinEvent
    from tilematch.models.level import LevelDefinition


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class BoardDisplay:
    """Display game state to stdout."""

    def __init__(self, show_board: bool = True):
        """Initialize display.

        Args:
            show_board: Whether to print the board after each move
        """
        self.show_board = show_board

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_level_start(self, level: "LevelDefinition", index: int, total: int) -> None:
        """Print level start message."""
        self.print_separator()
        print(f"LEVEL {index + 1}/{total}: {level.display_name}")
        limits = [f"target {level.target_score}"]
        if level.move_limit is not None:
            limits.append(f"{level.move_limit} moves")
        if level.time_limit is not None:
            limits.append(f"{level.time_limit}s")
        if level.min_match > 3:
            limits.append(f"match {level.min_match}+")
        print(", ".join(limits))
        self.print_separator()

    def print_board(self, session: "GameSession", force: bool = False) -> None:
        """Print the board with row/column indices."""
        if not (self.show_board or force):
            return
        grid = session.grid
        print("    " + " ".join(f"{c:>2}" for c in range(grid.cols)))
        for r, row in enumerate(grid):
            cells = []
            for card in row:
                if card is None or card.is_removed:
                    cells.append(" .")
                elif card.is_hinted:
                    cells.append(f"!{card.kind}")
                elif card.is_trap:
                    cells.append(f"*{card.kind}")
                else:
                    cells.append(f"{card.kind:>2}")
            print(f"{r:>2}  " + " ".join(cells))

    def print_status(self, session: "GameSession") -> None:
        """Print the one-line session status."""
        state = session.state
        print(
            f"{state}  target {session.level.target_score}  "
            f"shuffles {state.shuffles_left}  hints {state.hints_left}"
        )

    def print_score(self, event: "ScoreEvent") -> None:
        """Print a scoring event."""
        trap = " (trap!)" if event.contains_trap else ""
        print(
            f"  +{event.gained} (base {event.base} x{event.multiplier:.2f}){trap} "
            f"-> {event.level_score}/{event.target}"
        )

    def print_win(self, event: "WinEvent") -> None:
        """Print level win."""
        print(f"\nLevel {event.level.id} cleared! Total score: {event.score}")

    def print_lose(self, event: "LoseEvent") -> None:
        """Print level loss."""
        reasons = {
            "time": "time is up",
            "moves": "out of moves",
            "nomoves": "no moves left",
        }
        print(
            f"\nLevel {event.level.id} failed: {reasons[event.reason.value]}. "
            f"Total score: {event.score}"
        )

    def print_final_results(self, score: int, levels_won: int) -> None:
        """Print final session results."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()
        print(f"  Levels won: {levels_won}")
        print(f"  Total score: {score}")
