"""
Shared pytest fixtures for the IUI scorer test suite.

Provides:
  - ``make_record``: factory building an ``AttemptRecord`` from a neutral
    baseline with keyword overrides.
  - ``favorable_record`` / ``unfavorable_record``: the two reference
    attempts used across engine, reporting and CLI tests.
  - ``favorable_result``: ``evaluate(favorable_record)``.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from iui_scorer.models.attempt import AttemptRecord
from iui_scorer.models.result import ScoringResult
from iui_scorer.scoring.engine import evaluate

# Mid-tier on every factor: no rule fires advice.
_BASELINE: dict[str, Any] = {
    "age": 37,
    "sperm_count": 12.0,
    "sperm_motility": 35.0,
    "follicle_count": 1,
    "follicle_sizes": (18.5,),
    "endometrium_thickness": 7.5,
    "bmi": 22.0,
    "previous_iui_attempts": 0,
}


@pytest.fixture
def make_record() -> Callable[..., AttemptRecord]:
    """Return a factory: ``make_record(age=41, bmi=31.0)``."""

    def _make(**overrides: Any) -> AttemptRecord:
        data = dict(_BASELINE)
        data.update(overrides)
        return AttemptRecord(**data)

    return _make


@pytest.fixture
def favorable_record() -> AttemptRecord:
    """Young patient, good semen analysis, one mature follicle."""
    return AttemptRecord(
        age=32,
        sperm_count=18.0,
        sperm_motility=45.0,
        follicle_count=2,
        follicle_sizes=(19.0, 17.0),
        endometrium_thickness=8.5,
        bmi=23.5,
        previous_iui_attempts=0,
    )


@pytest.fixture
def unfavorable_record() -> AttemptRecord:
    """Every factor in its worst or near-worst tier."""
    return AttemptRecord(
        age=42,
        sperm_count=8.0,
        sperm_motility=20.0,
        follicle_count=1,
        follicle_sizes=(15.0,),
        endometrium_thickness=5.0,
        bmi=32.0,
        previous_iui_attempts=7,
    )


@pytest.fixture
def favorable_result(favorable_record: AttemptRecord) -> ScoringResult:
    return evaluate(favorable_record)
