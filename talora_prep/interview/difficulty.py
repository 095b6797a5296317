"""
Difficulty tier transitions for adaptive questioning.
"""
from typing import Optional

from .models import (
    DIFFICULTY_ORDER,
    BodyLanguageSignals,
    ConfidenceLevel,
    Difficulty,
    Evaluation
)

EVALUATION_DELTA = {
    Evaluation.CORRECT: 1,
    Evaluation.PARTIAL: 0,
    Evaluation.INCORRECT: -1,
}


def shift_difficulty(current: Difficulty, delta: int) -> Difficulty:
    """Move delta tiers from current, clamped to easy..hard."""
    index = DIFFICULTY_ORDER.index(Difficulty(current)) + delta
    index = max(0, min(len(DIFFICULTY_ORDER) - 1, index))
    return DIFFICULTY_ORDER[index]


def has_downgrade_signal(
    confidence: Optional[ConfidenceLevel] = None,
    body_language: Optional[BodyLanguageSignals] = None
) -> bool:
    """Low confidence, low eye contact or high movement."""
    if confidence == ConfidenceLevel.LOW:
        return True
    return body_language is not None and body_language.suggests_slowing_down()


def resolve_next_difficulty(
    current: Difficulty,
    evaluation: Evaluation,
    confidence: Optional[ConfidenceLevel] = None,
    body_language: Optional[BodyLanguageSignals] = None
) -> Difficulty:
    """
    Tier of the next question, relative to the question just answered.

    Precedence:
    1. Any downgrade signal forces one tier down (floored at easy).
    2. Otherwise the evaluation decides: correct +1, partial 0, incorrect -1.

    Signals never upgrade on their own; only a correct evaluation does.
    """
    if has_downgrade_signal(confidence, body_language):
        return shift_difficulty(current, -1)
    return shift_difficulty(current, EVALUATION_DELTA[Evaluation(evaluation)])
