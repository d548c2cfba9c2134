"""
Scoring output models.

``FactorImpact`` is the outcome of one rule: a signed impact on the fixed
half-step scale and the rule's explanatory text.

``ScoringResult`` bundles the clamped overall chance, the ordered factor
breakdown and the recommendation list.  Both models are frozen; renderers
read them directly and never reinterpret the rule semantics.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from iui_scorer.taxonomy.factors import (
    ChanceBand,
    ImpactLabel,
    band_for_chance,
    label_for_impact,
)

IMPACT_MIN = -2.0
IMPACT_MAX = 1.0


class FactorImpact(BaseModel):
    """A single rule outcome.

    Attributes:
        impact: Signed weight in [-2.0, +1.0], in half steps.
        description: Fixed text chosen by the tier that fired.
    """

    model_config = ConfigDict(frozen=True)

    impact: float
    description: str

    @field_validator("impact")
    @classmethod
    def validate_impact_scale(cls, v: float) -> float:
        if not IMPACT_MIN <= v <= IMPACT_MAX:
            raise ValueError(
                f"impact must be in [{IMPACT_MIN}, {IMPACT_MAX}], got {v}."
            )
        if (v * 2) != int(v * 2):
            raise ValueError(f"impact must be a multiple of 0.5, got {v}.")
        return v

    @property
    def label(self) -> ImpactLabel:
        return label_for_impact(self.impact)


class ScoringResult(BaseModel):
    """Engine output for one ``AttemptRecord``.

    Attributes:
        overall_chance: Estimated success percentage, clamped to [3.0, 40.0]
            and rounded to one decimal place.
        factor_breakdown: Factor name → ``FactorImpact``; iteration order is
            the rule evaluation order.
        recommendations: Rule advice in evaluation order, followed by the two
            fixed closing entries.  Never empty.
        modifier_sum: Raw sum of all factor impacts, before scaling/clamping.
    """

    model_config = ConfigDict(frozen=True)

    overall_chance: float
    factor_breakdown: dict[str, FactorImpact]
    recommendations: tuple[str, ...]
    modifier_sum: float

    @field_validator("recommendations")
    @classmethod
    def validate_recommendations_not_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("recommendations must not be empty.")
        return v

    @property
    def chance_band(self) -> ChanceBand:
        return band_for_chance(self.overall_chance)
