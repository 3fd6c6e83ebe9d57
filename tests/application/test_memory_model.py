"""Tests for the SM-2 recurrence and the recall easiness nudge."""

from datetime import date, timedelta

import pytest

from openwords.application.memory_model import (
    grade,
    initial_state,
    next_efactor,
    nudge_recall,
    validate_grade,
)
from openwords.domain.constants import FIRST_INTERVAL, MIN_EFACTOR, SECOND_INTERVAL
from openwords.domain.errors import InvalidGrade
from openwords.domain.models import MemoryState

TODAY = date(2024, 3, 1)


# ---------- grade ----------


def test_first_success_uses_seed_interval():
    result = grade(MemoryState(interval=0, efactor=2.5, repetition=0), 5, TODAY)
    assert result.repetition == 1
    assert result.interval == FIRST_INTERVAL
    assert result.efactor > 2.5
    assert result.efactor == pytest.approx(2.6)
    assert result.due_date == TODAY + timedelta(days=FIRST_INTERVAL)


def test_second_success_uses_second_seed():
    result = grade(MemoryState(interval=1, efactor=2.6, repetition=1), 4, TODAY)
    assert result.repetition == 2
    assert result.interval == SECOND_INTERVAL
    assert result.efactor == pytest.approx(2.6)


def test_later_success_multiplies_by_updated_efactor():
    result = grade(MemoryState(interval=6, efactor=2.6, repetition=2), 4, TODAY)
    assert result.repetition == 3
    assert result.interval == 16
    assert result.due_date == date(2024, 3, 17)


def test_barely_passing_lowers_efactor():
    result = grade(MemoryState(interval=6, efactor=2.5, repetition=2), 3, TODAY)
    assert result.efactor == pytest.approx(2.36)
    assert result.repetition == 3


@pytest.mark.parametrize("score", [0, 1, 2])
def test_lapse_resets_repetition(score):
    result = grade(MemoryState(interval=40, efactor=2.5, repetition=7), score, TODAY)
    assert result.repetition == 0
    assert result.interval == 1
    assert result.efactor < 2.5
    assert result.due_date == TODAY + timedelta(days=1)


def test_efactor_never_drops_below_floor():
    state = MemoryState(interval=1, efactor=MIN_EFACTOR, repetition=0)
    for _ in range(5):
        result = grade(state, 0, TODAY)
        assert result.efactor >= MIN_EFACTOR
        state = result.state
    assert state.efactor == MIN_EFACTOR


def test_grade_does_not_mutate_input():
    state = initial_state()
    grade(state, 5, TODAY)
    assert state == MemoryState(interval=0, efactor=2.5, repetition=0)


@pytest.mark.parametrize("score", [-1, 6, 2.5, True, "3", None])
def test_invalid_grade_rejected(score):
    with pytest.raises(InvalidGrade) as exc:
        grade(initial_state(), score, TODAY)
    assert exc.value.score == score


def test_invalid_grade_is_value_error():
    with pytest.raises(ValueError):
        validate_grade(9)


def test_next_efactor_perfect_score():
    assert next_efactor(2.5, 5) == pytest.approx(2.6)


def test_grade_result_to_fields_scales_efactor():
    result = grade(initial_state(), 5, TODAY)
    assert result.to_fields() == {
        "due_date": "2024-03-02",
        "interval": 1,
        "efactor": 260,
        "repetition": 1,
    }


# ---------- nudge_recall ----------


def test_recall_peek_penalty():
    assert nudge_recall(2.0, peeked=True, mistakes=0) == pytest.approx(1.98)


def test_recall_peek_wins_over_clean_attempt():
    assert nudge_recall(2.0, peeked=True, mistakes=3) == pytest.approx(1.98)


def test_recall_first_try_bonus():
    assert nudge_recall(2.0, peeked=False, mistakes=0) == pytest.approx(2.15)


def test_recall_retry_bonus():
    assert nudge_recall(2.0, peeked=False, mistakes=2) == pytest.approx(2.05)


def test_recall_respects_floor():
    assert nudge_recall(1.31, peeked=True, mistakes=0) == MIN_EFACTOR
