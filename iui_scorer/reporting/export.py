"""
Export helpers for scoring results.

All writers create parent directories and return the written ``Path``.

``result_to_dict()`` produces the JSON shape consumed by the history and
result views: camelCase keys, breakdown in evaluation order::

    {
      "overallChance": 28.8,
      "factorBreakdown": {"age": {"impact": 1.0, "description": "..."}, ...},
      "recommendations": ["...", "..."],
      "modifierSum": 5.5,
      "chanceBand": "good"
    }

``flatten_breakdown_for_export()`` turns a result into one flat row per
factor so the CSV loads directly in a spreadsheet;
``flatten_results_for_export()`` does the same for a batch, prefixing each
row with its 1-based attempt number.

Relative output paths are placed under ``[output] reports_dir`` by
``resolve_report_path()``.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Optional, Sequence

from iui_scorer.models.result import ScoringResult


def result_to_dict(
    result:    ScoringResult,
    narrative: Optional[str] = None,
) -> dict:
    """Serialise ``result`` (and an optional narrative) to a plain dict."""
    data: dict = {
        "overallChance": result.overall_chance,
        "factorBreakdown": {
            name: {
                "impact": factor.impact,
                "description": factor.description,
                "label": factor.label.value,
            }
            for name, factor in result.factor_breakdown.items()
        },
        "recommendations": list(result.recommendations),
        "modifierSum": result.modifier_sum,
        "chanceBand": result.chance_band.value,
    }
    if narrative is not None:
        data["narrative"] = narrative
    return data


def flatten_breakdown_for_export(result: ScoringResult) -> list[dict]:
    """One row per factor: order, factor, impact, label, description."""
    return [
        {
            "order": idx,
            "factor": name,
            "impact": factor.impact,
            "label": factor.label.value,
            "description": factor.description,
        }
        for idx, (name, factor) in enumerate(result.factor_breakdown.items(), start=1)
    ]


def flatten_results_for_export(results: Sequence[ScoringResult]) -> list[dict]:
    """Breakdown rows for every result, each prefixed with an ``attempt`` column."""
    rows: list[dict] = []
    for attempt, result in enumerate(results, start=1):
        for row in flatten_breakdown_for_export(result):
            rows.append({"attempt": attempt, **row})
    return rows


def resolve_report_path(path: str | Path, reports_dir: str | Path) -> Path:
    """Place a relative ``path`` under ``reports_dir``; absolute paths are kept."""
    path = Path(path)
    if path.is_absolute():
        return path
    return Path(reports_dir) / path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed UTF-8 JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return path


def export_to_csv(
    records:    list[dict],
    path:       Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path.
        fieldnames: Column order.  If None, uses the keys of the first record.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path
