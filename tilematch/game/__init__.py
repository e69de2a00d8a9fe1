"""Game logic."""

from .cascade import CascadeOutcome, CascadePhase, CascadeResolver, CascadeResult
from .clock import AsyncioScheduler, CountdownTimer, ManualScheduler, Scheduler
from .matcher import (
    detect_swap_match,
    find_hint_pair,
    find_matches,
    has_possible_move,
)
from .scoring import ScoreBreakdown, score_matches
from .session import GameSession

__all__ = [
    "AsyncioScheduler",
    "CascadeOutcome",
    "CascadePhase",
    "CascadeResolver",
    "CascadeResult",
    "CountdownTimer",
    "GameSession",
    "ManualScheduler",
    "Scheduler",
    "ScoreBreakdown",
    "detect_swap_match",
    "find_hint_pair",
    "find_matches",
    "has_possible_move",
    "score_matches",
]
