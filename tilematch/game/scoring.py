"""Scoring rule for resolved matches."""

import math
from dataclasses import dataclass

from tilematch.models.card import Card

POINTS_PER_CARD = 10
TRAP_FACTOR = 0.5


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


@dataclass
class ScoreBreakdown:
    """Points awarded for one scoring event."""

    gained: int
    base: int
    combo: int  # Streak before this event
    multiplier: float
    contains_trap: bool
    cards_matched: int
    next_streak: int  # Streak after this event

    @property
    def resets_combo(self) -> bool:
        return self.next_streak == 0


def score_matches(
    matches: list[list[Card]],
    combo_streak: int,
    combo_bonus: float,
) -> ScoreBreakdown:
    """Score a set of match groups.

    base = cards matched across all groups x 10, scaled by
    ``1 + combo_streak x combo_bonus``. A trap card anywhere halves the
    points and resets the streak; otherwise the streak grows by one.

    Args:
        matches: Match groups resolved together.
        combo_streak: Consecutive successful matches before this one.
        combo_bonus: Level combo bonus factor.

    Returns:
        ScoreBreakdown with the points and the new streak.
    """
    cards_matched = sum(len(group) for group in matches)
    base = cards_matched * POINTS_PER_CARD
    multiplier = 1 + combo_streak * combo_bonus
    contains_trap = any(card.is_trap for group in matches for card in group)

    if contains_trap:
        gained = round_half_up(base * multiplier * TRAP_FACTOR)
        next_streak = 0
    else:
        gained = round_half_up(base * multiplier)
        next_streak = combo_streak + 1

    return ScoreBreakdown(
        gained=gained,
        base=base,
        combo=combo_streak,
        multiplier=multiplier,
        contains_trap=contains_trap,
        cards_matched=cards_matched,
        next_streak=next_streak,
    )
