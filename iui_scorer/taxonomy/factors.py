"""
Factor taxonomy for IUI attempt scoring.

Three small vocabularies describe every scoring result:
  - ``FactorName``  — which clinical factor a rule evaluates.
  - ``ImpactLabel`` — display label for a factor's signed impact.
  - ``ChanceBand``  — coarse band for the overall success estimate.

``FACTOR_ORDER`` is the fixed evaluation order of the rule table; it is also
the iteration order of every ``ScoringResult.factor_breakdown``.

Factor values keep the camelCase keys used by the form and history layers so
exported breakdowns stay readable by those collaborators.

This module has NO imports from any other ``iui_scorer`` package.
"""

from enum import StrEnum


class FactorName(StrEnum):
    """Clinical factor evaluated by exactly one rule."""

    AGE = "age"
    """Patient age in years."""

    SPERM_COUNT = "spermCount"
    """Partner sperm concentration (million/mL)."""

    SPERM_MOTILITY = "spermMotility"
    """Partner sperm motility (percent motile)."""

    FOLLICLE_COUNT = "follicleCount"
    """Number of follicles reported for the cycle."""

    FOLLICLE_SIZE = "follicleSize"
    """Count of measured follicles at or above the maturity threshold."""

    ENDOMETRIUM_THICKNESS = "endometriumThickness"
    """Endometrial lining thickness (mm)."""

    PREVIOUS_ATTEMPTS = "previousAttempts"
    """Number of earlier IUI cycles."""

    BMI = "bmi"
    """Body-mass index."""


FACTOR_ORDER: tuple[FactorName, ...] = (
    FactorName.AGE,
    FactorName.SPERM_COUNT,
    FactorName.SPERM_MOTILITY,
    FactorName.FOLLICLE_COUNT,
    FactorName.FOLLICLE_SIZE,
    FactorName.ENDOMETRIUM_THICKNESS,
    FactorName.PREVIOUS_ATTEMPTS,
    FactorName.BMI,
)


class ImpactLabel(StrEnum):
    """Display label derived from a factor's impact value."""

    POSITIVE = "Positive"
    SLIGHTLY_POSITIVE = "Slightly Positive"
    NEUTRAL = "Neutral"
    SLIGHTLY_NEGATIVE = "Slightly Negative"
    NEGATIVE = "Negative"


class ChanceBand(StrEnum):
    """Coarse band for ``ScoringResult.overall_chance``."""

    GOOD = "good"
    """25% and above."""

    MODERATE = "moderate"
    """15% up to 25%."""

    AVERAGE = "average"
    """10% up to 15%."""

    BELOW_AVERAGE = "below_average"
    """Under 10%."""


def label_for_impact(impact: float) -> ImpactLabel:
    """Map an impact value to its display label.

    ``>= 1`` Positive, ``> 0`` Slightly Positive, ``== 0`` Neutral,
    ``> -1`` Slightly Negative, otherwise Negative.
    """
    if impact >= 1:
        return ImpactLabel.POSITIVE
    if impact > 0:
        return ImpactLabel.SLIGHTLY_POSITIVE
    if impact == 0:
        return ImpactLabel.NEUTRAL
    if impact > -1:
        return ImpactLabel.SLIGHTLY_NEGATIVE
    return ImpactLabel.NEGATIVE


def band_for_chance(chance: float) -> ChanceBand:
    """Map an overall chance percentage to its band."""
    if chance >= 25:
        return ChanceBand.GOOD
    if chance >= 15:
        return ChanceBand.MODERATE
    if chance >= 10:
        return ChanceBand.AVERAGE
    return ChanceBand.BELOW_AVERAGE
