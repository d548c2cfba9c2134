"""
Narrative provider interface and prompt construction.

A narrative provider turns a text prompt describing a ``ScoringResult`` into
free-form commentary.  Providers are external collaborators: they may fail
(network, credentials, quota) and they are always optional.  The engine
never calls one; ``iui_scorer.narrative.augment`` does, after scoring.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iui_scorer.models.result import ScoringResult


class NarrativeError(RuntimeError):
    """Raised by a provider when no narrative could be produced."""


class RateLimitedError(NarrativeError):
    """Raised when a provider is called again before its minimum interval."""


@runtime_checkable
class NarrativeProvider(Protocol):
    """Anything with ``generate(prompt) -> str``."""

    def generate(self, prompt: str) -> str:
        ...


def build_prompt(result: ScoringResult) -> str:
    """Summarise a scoring result as a prompt for a text-generation service.

    Only the engine's output is included — no raw record fields — so the
    prompt carries the same information the user already sees.
    """
    lines = [
        "You are assisting a patient who is reviewing an IUI (intrauterine "
        "insemination) attempt estimate produced by a fixed rule table.",
        f"Estimated chance of pregnancy: {result.overall_chance:.1f}% "
        f"({result.chance_band.value.replace('_', ' ')}).",
        "Factor breakdown (impact on a -2 to +1 scale):",
    ]
    for name, factor in result.factor_breakdown.items():
        lines.append(f"- {name}: {factor.impact:+.1f} ({factor.description})")
    lines.append("Recommendations already given:")
    for rec in result.recommendations:
        lines.append(f"- {rec}")
    lines.append(
        "Write a short, supportive explanation of these results in plain "
        "language. Do not change the estimate, do not give a diagnosis, and "
        "remind the reader to discuss the results with their specialist."
    )
    return "\n".join(lines)
