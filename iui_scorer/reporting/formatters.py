"""
ASCII terminal formatters for CLI output.

All formatters accept engine objects and return plain multi-line strings
suitable for ``typer.echo()``.  They render fields as-is; no rule logic is
repeated here.

Example::

    Estimated chance of pregnancy: 28.8%  [GOOD]

    Factor                  Impact  Effect              Detail
    ------------------------------------------------------------------------
    age                      +1.0  Positive            Age under 35 is ...
    ...

    Recommendations
      1. Maintain a healthy lifestyle with proper nutrition and stress management
      2. Always consult with your fertility specialist for personalized advice
"""

from __future__ import annotations

from typing import Optional, Sequence

from iui_scorer.models.result import ScoringResult
from iui_scorer.narrative.augment import NARRATIVE_LABEL
from iui_scorer.scoring.rules import FactorRule

_RULE_WIDTH = 72


def format_chance_line(result: ScoringResult) -> str:
    """One-line headline: chance percentage plus band tag."""
    band = result.chance_band.value.replace("_", " ").upper()
    return f"Estimated chance of pregnancy: {result.overall_chance:.1f}%  [{band}]"


def format_breakdown_table(result: ScoringResult) -> str:
    """Factor table in evaluation order."""
    header = f"{'Factor':<22}  {'Impact':>6}  {'Effect':<18}  Detail"
    lines = [header, "-" * _RULE_WIDTH]
    for name, factor in result.factor_breakdown.items():
        lines.append(
            f"{name:<22}  {factor.impact:>+6.1f}  {factor.label.value:<18}  "
            f"{factor.description}"
        )
    return "\n".join(lines)


def format_recommendations(recommendations: Sequence[str]) -> str:
    """Numbered recommendation list."""
    lines = ["Recommendations"]
    for idx, rec in enumerate(recommendations, start=1):
        lines.append(f"  {idx}. {rec}")
    return "\n".join(lines)


def format_result(
    result:          ScoringResult,
    narrative:       Optional[str] = None,
    narrative_error: Optional[str] = None,
) -> str:
    """Full report for one result.

    The narrative (when present) is appended after the engine's own output
    under a label marking it as supplementary.

    Args:
        result:          Engine output.
        narrative:       Optional generated commentary.
        narrative_error: Reason the narrative is missing, if one was requested.
    """
    sections = [
        format_chance_line(result),
        format_breakdown_table(result),
        format_recommendations(result.recommendations),
    ]
    if narrative is not None:
        sections.append(f"{NARRATIVE_LABEL}\n  {narrative}")
    elif narrative_error is not None:
        sections.append(f"{NARRATIVE_LABEL}\n  [unavailable] {narrative_error}")
    return "\n\n".join(sections)


def format_rule_table(rules: Sequence[FactorRule]) -> str:
    """Render the rule table for auditing, one block per factor."""
    blocks: list[str] = []
    for rule in rules:
        lines = [f"{rule.factor.value} ({rule.unit})"]
        for tier in rule.tiers:
            rec_flag = "  [+rec]" if tier.recommendation else ""
            lines.append(
                f"  {tier.condition:<22} {tier.impact:>+5.1f}  "
                f"{tier.description}{rec_flag}"
            )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
