"""Scoring rules: points per answer and lifeline prices."""

from __future__ import annotations

from enum import Enum
import math

from trivia_app.constants.quiz_constants import (
    COST_FIFTY_FIFTY,
    COST_HINT,
    COST_SWAP,
    MULTIPLIER_1,
    MULTIPLIER_2,
    POINTS_CORRECT,
    POINTS_INCORRECT,
    STREAK_THRESHOLD_1,
    STREAK_THRESHOLD_2,
)


class Lifeline(str, Enum):
    FIFTY_FIFTY = "fifty-fifty"
    HINT = "hint"
    SWAP = "swap"


_LIFELINE_COSTS: dict[Lifeline, int] = {
    Lifeline.FIFTY_FIFTY: COST_FIFTY_FIFTY,
    Lifeline.HINT: COST_HINT,
    Lifeline.SWAP: COST_SWAP,
}


def streak_multiplier(streak: int) -> float:
    """Multiplier earned by a run of ``streak`` consecutive correct answers."""
    if streak >= STREAK_THRESHOLD_2:
        return MULTIPLIER_2
    if streak >= STREAK_THRESHOLD_1:
        return MULTIPLIER_1
    return 1.0


def points_for_answer(is_correct: bool, streak_before: int) -> int:
    """Point delta for an answer given the streak held before answering."""
    if not is_correct:
        return -POINTS_INCORRECT
    multiplier = streak_multiplier(streak_before + 1)
    # round half up
    return math.floor(POINTS_CORRECT * multiplier + 0.5)


def next_streak(is_correct: bool, streak_before: int) -> int:
    return streak_before + 1 if is_correct else 0


def lifeline_cost(lifeline: Lifeline) -> int:
    return _LIFELINE_COSTS[lifeline]


def can_afford(score: int, lifeline: Lifeline) -> bool:
    return score >= lifeline_cost(lifeline)
