"""Game logger for detailed game replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from tilematch.models.card import Card
from tilematch.models.game_state import GameResult, LoseReason
from tilematch.models.grid import Grid
from tilematch.models.level import LevelDefinition

from .formatters import format_cards, format_grid


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for detailed game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    This allows step-by-step replay of a session.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def open(self) -> None:
        """Open the log file if logging is enabled."""
        if self._file is None and self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_session_start(self, levels: list[LevelDefinition]) -> None:
        """Log session start with the level catalog."""
        self._write({
            "type": "session_start",
            "timestamp": datetime.now().isoformat(),
            "levels": [
                {"id": lvl.id, "name": lvl.name, "target": lvl.target_score}
                for lvl in levels
            ],
        })

    def log_level_start(
        self,
        level: LevelDefinition,
        index: int,
        grid: Grid,
        total_score: int,
    ) -> None:
        """Log level start with the initial board.

        Args:
            level: Level being played.
            index: Catalog index of the level.
            grid: Board after initial cleanup.
            total_score: Total score carried into the level.
        """
        self._write({
            "type": "level_start",
            "level": level.id,
            "index": index,
            "board": format_grid(grid),
            "score": total_score,
            "target": level.target_score,
            "moves": level.move_limit,
            "time": level.time_limit,
        })

    def log_swap(
        self,
        level_id: int | None,
        from_pos: tuple[int, int],
        to_pos: tuple[int, int],
        matched: bool,
        moves_left: int | None,
    ) -> None:
        """Log a player swap.

        Args:
            level_id: Current level id.
            from_pos: Cell of the previously selected card.
            to_pos: Cell of the clicked card.
            matched: Whether the swap produced a match.
            moves_left: Remaining moves after the swap.
        """
        self._write({
            "type": "swap",
            "level": level_id,
            "from": list(from_pos),
            "to": list(to_pos),
            "matched": matched,
            "moves_left": moves_left,
        })

    def log_cascade(
        self,
        level_id: int | None,
        wave: int,
        cards: list[Card],
        gained: int,
        combo: int,
        contains_trap: bool,
    ) -> None:
        """Log one scoring wave of a cascade."""
        self._write({
            "type": "cascade",
            "level": level_id,
            "wave": wave,
            "cards": format_cards(cards),
            "gained": gained,
            "combo": combo,
            "trap": contains_trap,
        })

    def log_power_up(
        self,
        level_id: int | None,
        kind: str,
        remaining: int,
        detail: dict[str, Any] | None = None,
    ) -> None:
        """Log shuffle or hint use.

        Args:
            level_id: Current level id.
            kind: "shuffle" or "hint".
            remaining: Allowance left after use.
            detail: Additional details (e.g., board after shuffle).
        """
        record: dict[str, Any] = {
            "type": "power_up",
            "level": level_id,
            "kind": kind,
            "remaining": remaining,
        }
        if detail:
            record["detail"] = detail
        self._write(record)

    def log_level_end(
        self,
        level_id: int | None,
        result: GameResult,
        score: int,
        level_score: int,
        reason: LoseReason | None = None,
    ) -> None:
        """Log level end with the result."""
        record: dict[str, Any] = {
            "type": "level_end",
            "level": level_id,
            "result": result.value,
            "score": score,
            "level_score": level_score,
        }
        if reason is not None:
            record["reason"] = reason.value
        self._write(record)

    def log_session_end(self, final_score: int, levels_won: int) -> None:
        """Log session end with final results."""
        self._write({
            "type": "session_end",
            "timestamp": datetime.now().isoformat(),
            "final_score": final_score,
            "levels_won": levels_won,
        })
