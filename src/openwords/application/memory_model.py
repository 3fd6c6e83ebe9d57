"""
SuperMemo-2 memory model.

Two update paths act on the same MemoryState:

1. `grade` - the full SM-2 recurrence used by graded review sessions.
2. `nudge_recall` - a light easiness adjustment used by recall typing, which
   leaves interval and repetition untouched.

This is a pure computation module with no I/O and no clock access.
"""

from datetime import date, timedelta

from openwords.domain.constants import (
    DEFAULT_EFACTOR,
    FIRST_INTERVAL,
    LAPSE_INTERVAL,
    MAX_GRADE,
    MIN_EFACTOR,
    PASSING_GRADE,
    RECALL_FIRST_TRY_BONUS,
    RECALL_PEEK_PENALTY,
    RECALL_RETRY_BONUS,
    SECOND_INTERVAL,
)
from openwords.domain.errors import InvalidGrade
from openwords.domain.models import GradeResult, MemoryState


def initial_state() -> MemoryState:
    """State of a never-reviewed card."""
    return MemoryState(interval=0, efactor=DEFAULT_EFACTOR, repetition=0)


def validate_grade(score: object) -> int:
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidGrade(score)
    if not 0 <= score <= MAX_GRADE:
        raise InvalidGrade(score)
    return score


def next_efactor(efactor: float, score: int) -> float:
    miss = MAX_GRADE - score
    return max(MIN_EFACTOR, efactor + (0.1 - miss * (0.08 + miss * 0.02)))


def grade(current: MemoryState, score: int, today: date) -> GradeResult:
    """
    Apply one graded review to a memory state.

    Args:
        current: The card's state before the review.
        score: 0..5; below 3 is a lapse.
        today: The caller's notion of today, used for the due date.

    Returns:
        GradeResult with the next state and its due date.

    Raises:
        InvalidGrade: If score is not an integer in 0..5.
    """
    score = validate_grade(score)
    efactor = next_efactor(current.efactor, score)

    if score < PASSING_GRADE:
        repetition = 0
        interval = LAPSE_INTERVAL
    else:
        if current.repetition == 0:
            interval = FIRST_INTERVAL
        elif current.repetition == 1:
            interval = SECOND_INTERVAL
        else:
            interval = round(current.interval * efactor)
        repetition = current.repetition + 1

    return GradeResult(
        interval=interval,
        efactor=efactor,
        repetition=repetition,
        due_date=today + timedelta(days=interval),
    )


def nudge_recall(efactor: float, *, peeked: bool, mistakes: int) -> float:
    """
    Adjust easiness after a correctly typed recall answer.

    Revealing the answer costs a little, a clean first attempt gains the most,
    and a success after visible mistakes gains only a small amount.
    """
    if peeked:
        delta = RECALL_PEEK_PENALTY
    elif mistakes == 0:
        delta = RECALL_FIRST_TRY_BONUS
    else:
        delta = RECALL_RETRY_BONUS
    return max(MIN_EFACTOR, efactor + delta)
