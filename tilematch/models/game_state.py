"""Session state models."""

from enum import Enum

from pydantic import BaseModel


class SessionPhase(str, Enum):
    """Top-level session state."""

    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class GameResult(str, Enum):
    """Outcome of a level attempt."""

    WIN = "win"
    LOSE = "lose"


class LoseReason(str, Enum):
    """Why a level attempt was lost."""

    TIME = "time"  # Countdown reached zero
    MOVES = "moves"  # Move budget exhausted
    NO_MOVES = "nomoves"  # No legal swap left


class SoundKey(str, Enum):
    """Sound cues emitted to the presentation layer."""

    SELECT = "select"
    MATCH = "match"
    WIN = "win"
    LOSE = "lose"


class SessionState(BaseModel):
    """Plain, observable-free session state."""

    # Scores
    score: int = 0  # Total across levels
    level_score: int = 0
    combo_streak: int = 0

    # Limits (None when the level has no such limit)
    remaining_time: int | None = None
    remaining_moves: int | None = None
    shuffles_left: int = 0
    hints_left: int = 0

    level_index: int = 0

    # Flags
    is_game_over: bool = False
    last_result: GameResult | None = None
    lose_reason: LoseReason | None = None
    is_paused: bool = False
    animation_in_progress: bool = False

    # Audio
    is_sound_enabled: bool = True
    volume: float = 1.0

    @property
    def phase(self) -> SessionPhase:
        """Current top-level phase."""
        if self.is_game_over:
            return SessionPhase.GAME_OVER
        if self.is_paused:
            return SessionPhase.PAUSED
        return SessionPhase.PLAYING

    def reset_for_level(self, level_index: int) -> None:
        """Reset per-level counters (total score is handled by the caller)."""
        self.level_index = level_index
        self.level_score = 0
        self.combo_streak = 0
        self.is_game_over = False
        self.last_result = None
        self.lose_reason = None
        self.is_paused = False
        self.animation_in_progress = False

    def __str__(self) -> str:
        parts = [f"Level {self.level_index + 1}", f"Score {self.score}"]
        parts.append(f"(level {self.level_score})")
        if self.remaining_moves is not None:
            parts.append(f"Moves {self.remaining_moves}")
        if self.remaining_time is not None:
            parts.append(f"Time {self.remaining_time}s")
        if self.combo_streak:
            parts.append(f"Combo x{self.combo_streak}")
        if self.is_paused:
            parts.append("[PAUSED]")
        if self.last_result is not None:
            parts.append(f"[{self.last_result.value.upper()}]")
        return " ".join(parts)
