"""
Augmentation: layer optional narrative text on top of a scoring result.

``augment()`` never raises on provider failure and never touches the
``ScoringResult`` it is given — the returned ``AugmentedReport`` holds the
same object plus either the narrative or the error text.  Renderers show the
narrative in a separate, labelled section after the engine's own breakdown
and recommendations.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from iui_scorer.models.result import ScoringResult
from iui_scorer.narrative.provider import NarrativeError, NarrativeProvider, build_prompt

logger = logging.getLogger(__name__)

NARRATIVE_LABEL = "AI-generated commentary (supplementary; not part of the score)"


class AugmentedReport(BaseModel):
    """A scoring result plus its optional narrative.

    Attributes:
        result: The engine output, unchanged.
        narrative: Generated commentary, or ``None``.
        narrative_error: Why no narrative is present, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    result: ScoringResult
    narrative: Optional[str] = None
    narrative_error: Optional[str] = None


def augment(
    result:   ScoringResult,
    provider: Optional[NarrativeProvider],
) -> AugmentedReport:
    """Request a narrative for ``result`` from ``provider``.

    Args:
        result:   Engine output to describe.
        provider: Narrative provider, or ``None`` when augmentation is off.

    Returns:
        ``AugmentedReport``; on provider failure ``narrative`` is ``None`` and
        ``narrative_error`` carries the reason.
    """
    if provider is None:
        return AugmentedReport(result=result)

    try:
        text = provider.generate(build_prompt(result))
    except NarrativeError as exc:
        logger.warning("Narrative unavailable: %s", exc)
        return AugmentedReport(result=result, narrative_error=str(exc))

    return AugmentedReport(result=result, narrative=text)
