"""
Input model for one IUI attempt.

``AttemptRecord`` is the only thing the scoring engine reads.  It is frozen:
once built, nothing in the engine or its collaborators can change it, so a
record can be evaluated any number of times (or from several threads) with
identical results.

The model coerces types but deliberately does NOT enforce clinical ranges —
a record with zero follicles or an empty size list is legal here and must
score cleanly.  Range checks (age 18–50, BMI 10–50, non-negative counts)
belong to ``iui_scorer.intake.validation``, which callers run before
``evaluate()``.

Field names are snake_case; the camelCase keys written by the form and
history layers (``spermCount``, ``follicleSizes``, ``previousIUIAttempts``,
``partnerSpermMotility`` …) are accepted as aliases so exported attempts
load unchanged.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer


class AttemptRecord(BaseModel):
    """Clinical measurements for a single IUI cycle.

    Attributes:
        age: Patient age in whole years.
        sperm_count: Partner sperm concentration, million/mL.
        sperm_motility: Partner sperm motility, percent.
        follicle_count: Number of follicles reported for the cycle.
        follicle_sizes: Measured follicle diameters in mm.  Length normally
            equals ``follicle_count`` but mismatches are tolerated.
        endometrium_thickness: Lining thickness in mm.
        bmi: Body-mass index.
        previous_iui_attempts: Number of earlier IUI cycles.
        medications_used: Medication names (may be empty).
        endometriosis: Diagnosed endometriosis.
        pcos: Diagnosed polycystic ovary syndrome.
        blocked_tubes: Known tubal blockage.
        prior_pregnancies: Informational; not consumed by the rule table.
        prior_miscarriages: Informational; not consumed by the rule table.
        amh_level: Optional anti-Müllerian hormone level; informational.
    """

    model_config = ConfigDict(frozen=True)

    age: int
    sperm_count: float = Field(
        validation_alias=AliasChoices("sperm_count", "spermCount", "partnerSpermCount"),
    )
    sperm_motility: float = Field(
        validation_alias=AliasChoices(
            "sperm_motility", "spermMotility", "partnerSpermMotility"
        ),
    )
    follicle_count: int = Field(
        validation_alias=AliasChoices("follicle_count", "follicleCount"),
    )
    follicle_sizes: tuple[float, ...] = Field(
        default=(),
        validation_alias=AliasChoices("follicle_sizes", "follicleSizes", "follicleSize"),
    )
    endometrium_thickness: float = Field(
        validation_alias=AliasChoices("endometrium_thickness", "endometriumThickness"),
    )
    bmi: float
    previous_iui_attempts: int = Field(
        default=0,
        validation_alias=AliasChoices("previous_iui_attempts", "previousIUIAttempts"),
    )
    medications_used: frozenset[str] = Field(
        default=frozenset(),
        validation_alias=AliasChoices("medications_used", "medicationsUsed"),
    )
    endometriosis: bool = False
    pcos: bool = Field(default=False, validation_alias=AliasChoices("pcos", "PCOS"))
    blocked_tubes: bool = Field(
        default=False,
        validation_alias=AliasChoices("blocked_tubes", "blockedTubes"),
    )
    prior_pregnancies: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "prior_pregnancies", "priorPregnancies", "previousPregnancies"
        ),
    )
    prior_miscarriages: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "prior_miscarriages", "priorMiscarriages", "previousMiscarriages"
        ),
    )
    amh_level: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("amh_level", "amhLevel"),
    )

    @field_serializer("medications_used")
    def _serialize_medications(self, value: frozenset[str]) -> list[str]:
        # Sorted so dumps of equal records are byte-identical
        return sorted(value)
