"""
Quick multiplicative success estimate.

A secondary, coarser estimate used by the calculator view.  Unlike the rule
table it does read comorbidity flags and medications.  It is independent of
``evaluate()`` and never alters the engine's output.

    p = 0.15
        × 1.2  if age <= 35        × 0.6 if age > 40
        × 1.2  if sperm_count > 15
        × 1.2  if sperm_motility > 40
        × (1 + 0.1 × follicle_count)
        × 0.8  endometriosis        × 0.9 PCOS        × 0.7 blocked tubes
        × 1.2  if any medication used
    clamped to [0, 1]
"""

from __future__ import annotations

from iui_scorer.models.attempt import AttemptRecord

QUICK_BASE_RATE = 0.15

_YOUNG_AGE_MULTIPLIER = 1.2
_ADVANCED_AGE_MULTIPLIER = 0.6
_SPERM_COUNT_MULTIPLIER = 1.2
_SPERM_MOTILITY_MULTIPLIER = 1.2
_PER_FOLLICLE_GAIN = 0.1
_MEDICATION_MULTIPLIER = 1.2

_COMORBIDITY_MULTIPLIERS: dict[str, float] = {
    "endometriosis": 0.8,
    "pcos":          0.9,
    "blocked_tubes": 0.7,
}


def estimate_success_probability(record: AttemptRecord) -> float:
    """Return a success probability in [0, 1] for ``record``."""
    rate = QUICK_BASE_RATE

    if record.age <= 35:
        rate *= _YOUNG_AGE_MULTIPLIER
    elif record.age > 40:
        rate *= _ADVANCED_AGE_MULTIPLIER

    if record.sperm_count > 15:
        rate *= _SPERM_COUNT_MULTIPLIER
    if record.sperm_motility > 40:
        rate *= _SPERM_MOTILITY_MULTIPLIER

    rate *= 1 + record.follicle_count * _PER_FOLLICLE_GAIN

    for flag, multiplier in _COMORBIDITY_MULTIPLIERS.items():
        if getattr(record, flag):
            rate *= multiplier

    if record.medications_used:
        rate *= _MEDICATION_MULTIPLIER

    return min(max(rate, 0.0), 1.0)
