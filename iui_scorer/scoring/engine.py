"""
Scoring engine: converts an ``AttemptRecord`` into a ``ScoringResult``.

    evaluate(record) -> ScoringResult

Pure and stateless — no I/O, no module-level mutable state — so it is safe
to call concurrently.  The engine assumes the record has already passed
``iui_scorer.intake.validation``; it never re-validates, but degenerate
values (no follicles, empty size list) still produce a bounded result.

Steps
-----
1. Walk ``RULES`` in order; each rule selects exactly one tier.
2. ``modifier_sum`` = Σ impact over all eight factors.
3. ``overall_chance`` = clamp(15 + modifier_sum × 2.5, 3, 40), rounded to
   one decimal (half away from zero, so 28.75 → 28.8).
4. Recommendations: tier advice in rule order, the default entry if no rule
   gave advice, then the lifestyle note and the specialist disclaimer.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from iui_scorer.models.attempt import AttemptRecord
from iui_scorer.models.result import FactorImpact, ScoringResult
from iui_scorer.scoring.rules import (
    BASELINE_CHANCE,
    CHANCE_DECIMALS,
    CLOSING_RECOMMENDATIONS,
    DEFAULT_RECOMMENDATION,
    MAX_CHANCE,
    MIN_CHANCE,
    POINTS_PER_IMPACT,
    RULES,
    FactorRule,
)

logger = logging.getLogger(__name__)


def evaluate(record: AttemptRecord) -> ScoringResult:
    """Score one IUI attempt.

    Args:
        record: A pre-validated attempt record.  Not modified.

    Returns:
        ``ScoringResult`` with eight factors, a clamped chance and a
        non-empty recommendation list.
    """
    return evaluate_with_rules(record, RULES)


def evaluate_with_rules(
    record: AttemptRecord,
    rules:  Sequence[FactorRule],
) -> ScoringResult:
    """Score ``record`` against an explicit rule sequence.

    ``evaluate()`` always passes the fixed ``RULES`` table; this entry point
    exists so individual rules can be exercised in isolation.
    """
    breakdown: dict[str, FactorImpact] = {}
    advice: list[str] = []

    for rule in rules:
        tier = rule.select(record)
        breakdown[rule.factor.value] = FactorImpact(
            impact=tier.impact,
            description=tier.description,
        )
        if tier.recommendation:
            advice.append(tier.recommendation)

    modifier_sum = sum(factor.impact for factor in breakdown.values())
    overall_chance = compute_overall_chance(modifier_sum)

    logger.debug(
        "Evaluated attempt: modifier_sum=%.1f overall_chance=%.1f advice=%d",
        modifier_sum, overall_chance, len(advice),
    )

    return ScoringResult(
        overall_chance=overall_chance,
        factor_breakdown=breakdown,
        recommendations=assemble_recommendations(advice),
        modifier_sum=modifier_sum,
    )


def evaluate_many(records: Iterable[AttemptRecord]) -> list[ScoringResult]:
    """Score several independent records, preserving input order."""
    return [evaluate(record) for record in records]


def compute_overall_chance(modifier_sum: float) -> float:
    """Scale, clamp and round an impact sum into a chance percentage.

    Args:
        modifier_sum: Σ impact across all factors.

    Returns:
        Percentage in [MIN_CHANCE, MAX_CHANCE] with one decimal place.
    """
    raw = BASELINE_CHANCE + modifier_sum * POINTS_PER_IMPACT
    clamped = _clamp(raw, MIN_CHANCE, MAX_CHANCE)
    return _round_half_up(clamped, CHANCE_DECIMALS)


def assemble_recommendations(advice: Sequence[str]) -> tuple[str, ...]:
    """Append the default and closing entries to rule advice.

    The result is never empty and always ends with the lifestyle note
    followed by the specialist disclaimer.
    """
    recommendations = list(advice)
    if not recommendations:
        recommendations.append(DEFAULT_RECOMMENDATION)
    recommendations.extend(CLOSING_RECOMMENDATIONS)
    return tuple(recommendations)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _round_half_up(value: float, decimals: int) -> float:
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
