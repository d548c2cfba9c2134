"""
Rule table for IUI attempt scoring.

The table is plain data: one ``FactorRule`` per clinical factor, each holding
an ordered tuple of ``Tier`` entries.  A tier pairs a predicate over the
factor's measured value with the impact, description and (optional)
recommendation it produces.  Tiers are tried in order and the first match
fires; every rule ends in a catch-all tier, so each factor always yields
exactly one impact — including for degenerate or non-finite measurements,
where every comparison is False and the catch-all fires.

Rule order (``RULES``) is the order factors appear in the breakdown and the
order rule advice appears in the recommendation list.  It does not affect
the numeric result.

Aggregation constants
---------------------
    overall = clamp(BASELINE_CHANCE + Σ impact × POINTS_PER_IMPACT,
                    MIN_CHANCE, MAX_CHANCE)

    BASELINE_CHANCE   = 15.0   # percent, typical unadjusted IUI cycle
    POINTS_PER_IMPACT = 2.5    # percent per impact point
    MIN_CHANCE        = 3.0
    MAX_CHANCE        = 40.0

Endometrium bucketing
---------------------
Lining above 12 mm falls through to the same tier (and description) as a
thin lining.  Thick and thin are medically different conditions; the shared
bucket is kept as-is until the rule table itself is revised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from iui_scorer.taxonomy.factors import FactorName

if TYPE_CHECKING:
    from iui_scorer.models.attempt import AttemptRecord

# ── Engine parameters ─────────────────────────────────────────────────────────

BASELINE_CHANCE: float = 15.0
POINTS_PER_IMPACT: float = 2.5
MIN_CHANCE: float = 3.0
MAX_CHANCE: float = 40.0
CHANCE_DECIMALS: int = 1

MATURE_FOLLICLE_MM: float = 18.0

# ── Impact scale ──────────────────────────────────────────────────────────────

IMPACT_STRONG_NEGATIVE: float = -2.0
IMPACT_NEGATIVE: float = -1.0
IMPACT_SLIGHT_NEGATIVE: float = -0.5
IMPACT_NEUTRAL: float = 0.0
IMPACT_SLIGHT_POSITIVE: float = 0.5
IMPACT_POSITIVE: float = 1.0

# ── Fixed recommendation texts ────────────────────────────────────────────────

DEFAULT_RECOMMENDATION = "Continue with your current treatment plan"
LIFESTYLE_RECOMMENDATION = (
    "Maintain a healthy lifestyle with proper nutrition and stress management"
)
SPECIALIST_DISCLAIMER = (
    "Always consult with your fertility specialist for personalized advice"
)
CLOSING_RECOMMENDATIONS: tuple[str, str] = (
    LIFESTYLE_RECOMMENDATION,
    SPECIALIST_DISCLAIMER,
)


# ── Table structures ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tier:
    """One row of a factor rule.

    Attributes:
        condition:      Human-readable form of ``matches`` (for audit output).
        matches:        Predicate over the measured value.
        impact:         Impact produced when this tier fires.
        description:    Explanation attached to the factor.
        recommendation: Advice appended to the recommendation list, or None.
    """

    condition:      str
    matches:        Callable[[float], bool]
    impact:         float
    description:    str
    recommendation: Optional[str] = None


@dataclass(frozen=True)
class FactorRule:
    """Ordered tiers for one factor plus how to measure it from a record."""

    factor:  FactorName
    measure: Callable[["AttemptRecord"], float]
    unit:    str
    tiers:   tuple[Tier, ...]

    def select(self, record: "AttemptRecord") -> Tier:
        """Return the first tier whose predicate matches the record."""
        value = self.measure(record)
        for tier in self.tiers:
            if tier.matches(value):
                return tier
        # Unreachable while every rule ends with a catch-all tier.
        return self.tiers[-1]


def _always(_value: float) -> bool:
    return True


def mature_follicle_count(record: "AttemptRecord") -> int:
    """Number of measured follicles at or above ``MATURE_FOLLICLE_MM``.

    Bounded by the sizes actually recorded, not by ``follicle_count``; an
    empty size list gives 0.
    """
    return sum(1 for size in record.follicle_sizes if size >= MATURE_FOLLICLE_MM)


# ── The table ─────────────────────────────────────────────────────────────────

AGE_RULE = FactorRule(
    factor=FactorName.AGE,
    measure=lambda r: r.age,
    unit="years",
    tiers=(
        Tier("<= 35", lambda v: v <= 35, IMPACT_POSITIVE,
             "Age under 35 is favorable for IUI success"),
        Tier("36-38", lambda v: v <= 38, IMPACT_NEUTRAL,
             "Age 36-38 has average IUI success rates"),
        Tier("39-40", lambda v: v <= 40, IMPACT_NEGATIVE,
             "Age 39-40 may reduce IUI success",
             "Consider discussing age-related fertility factors with your doctor"),
        Tier("> 40", _always, IMPACT_STRONG_NEGATIVE,
             "Age over 40 significantly impacts IUI success rates",
             "Discuss with your doctor about age-related factors and whether "
             "IVF might be more suitable"),
    ),
)

SPERM_COUNT_RULE = FactorRule(
    factor=FactorName.SPERM_COUNT,
    measure=lambda r: r.sperm_count,
    unit="million/mL",
    tiers=(
        Tier(">= 15", lambda v: v >= 15, IMPACT_POSITIVE,
             "Normal sperm count improves chances"),
        Tier("10-15", lambda v: v >= 10, IMPACT_NEUTRAL,
             "Borderline sperm count"),
        Tier("< 10", _always, IMPACT_NEGATIVE,
             "Low sperm count may reduce success rates",
             "Consider sperm quality improvement strategies or discuss "
             "alternative options"),
    ),
)

SPERM_MOTILITY_RULE = FactorRule(
    factor=FactorName.SPERM_MOTILITY,
    measure=lambda r: r.sperm_motility,
    unit="%",
    tiers=(
        Tier(">= 40", lambda v: v >= 40, IMPACT_POSITIVE,
             "Good sperm motility improves chances"),
        Tier("30-40", lambda v: v >= 30, IMPACT_NEUTRAL,
             "Average sperm motility"),
        Tier("< 30", _always, IMPACT_NEGATIVE,
             "Low sperm motility may reduce success rates",
             "Discuss sperm motility enhancement options with your fertility "
             "specialist"),
    ),
)

FOLLICLE_COUNT_RULE = FactorRule(
    factor=FactorName.FOLLICLE_COUNT,
    measure=lambda r: r.follicle_count,
    unit="follicles",
    tiers=(
        Tier("> 3", lambda v: v > 3, IMPACT_POSITIVE,
             "Multiple mature follicles increase chances"),
        Tier("2-3", lambda v: v > 1, IMPACT_SLIGHT_POSITIVE,
             "More than one follicle is good"),
        Tier("<= 1", _always, IMPACT_NEUTRAL,
             "Single follicle provides standard chances"),
    ),
)

FOLLICLE_SIZE_RULE = FactorRule(
    factor=FactorName.FOLLICLE_SIZE,
    measure=mature_follicle_count,
    unit="follicles >= 18mm",
    tiers=(
        Tier(">= 2", lambda v: v >= 2, IMPACT_POSITIVE,
             "Multiple mature follicles (≥18mm) increase chances"),
        Tier("== 1", lambda v: v == 1, IMPACT_SLIGHT_POSITIVE,
             "One mature follicle provides good chances"),
        Tier("0", _always, IMPACT_SLIGHT_NEGATIVE,
             "No follicles have reached optimal maturity",
             "Discuss follicle development and timing of IUI with your doctor"),
    ),
)

ENDOMETRIUM_RULE = FactorRule(
    factor=FactorName.ENDOMETRIUM_THICKNESS,
    measure=lambda r: r.endometrium_thickness,
    unit="mm",
    tiers=(
        Tier("8-12", lambda v: 8 <= v <= 12, IMPACT_POSITIVE,
             "Optimal endometrial thickness (8-12mm)"),
        Tier("7-8", lambda v: 7 <= v < 8, IMPACT_NEUTRAL,
             "Adequate endometrial thickness"),
        # Also catches > 12mm; see module docstring.
        Tier("< 7 or > 12", _always, IMPACT_NEGATIVE,
             "Thin endometrium may reduce implantation chances",
             "Discuss endometrial lining optimization strategies with your doctor"),
    ),
)

PREVIOUS_ATTEMPTS_RULE = FactorRule(
    factor=FactorName.PREVIOUS_ATTEMPTS,
    measure=lambda r: r.previous_iui_attempts,
    unit="attempts",
    tiers=(
        Tier("0", lambda v: v == 0, IMPACT_NEUTRAL,
             "First IUI attempt"),
        Tier("1-2", lambda v: v < 3, IMPACT_SLIGHT_POSITIVE,
             "Early IUI attempts often have better success rates"),
        Tier("3-5", lambda v: v < 6, IMPACT_SLIGHT_NEGATIVE,
             "Multiple previous attempts may indicate underlying issues",
             "Consider consulting your doctor about next steps if this attempt "
             "is unsuccessful"),
        Tier(">= 6", _always, IMPACT_NEGATIVE,
             "Success rates typically decline after 6+ attempts",
             "Discuss with your doctor whether continuing with IUI is the best "
             "approach"),
    ),
)

BMI_RULE = FactorRule(
    factor=FactorName.BMI,
    measure=lambda r: r.bmi,
    unit="kg/m²",
    tiers=(
        Tier("18.5-24.9", lambda v: 18.5 <= v <= 24.9, IMPACT_SLIGHT_POSITIVE,
             "Normal BMI range is optimal for fertility"),
        Tier("17-18.5 or 24.9-29.9",
             lambda v: 17 <= v < 18.5 or 24.9 < v <= 29.9, IMPACT_SLIGHT_NEGATIVE,
             "BMI slightly outside optimal range",
             "Consider lifestyle adjustments to optimize BMI if possible"),
        Tier("< 17 or > 29.9", _always, IMPACT_NEGATIVE,
             "BMI significantly outside optimal range may impact success",
             "Discuss weight management strategies with your healthcare provider"),
    ),
)

RULES: tuple[FactorRule, ...] = (
    AGE_RULE,
    SPERM_COUNT_RULE,
    SPERM_MOTILITY_RULE,
    FOLLICLE_COUNT_RULE,
    FOLLICLE_SIZE_RULE,
    ENDOMETRIUM_RULE,
    PREVIOUS_ATTEMPTS_RULE,
    BMI_RULE,
)
