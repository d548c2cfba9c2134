"""Tests for iui_scorer.reporting.export."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from iui_scorer.reporting.export import (
    export_to_csv,
    export_to_json,
    flatten_breakdown_for_export,
    flatten_results_for_export,
    resolve_report_path,
    result_to_dict,
)
from iui_scorer.scoring.engine import evaluate


def test_result_to_dict_shape(favorable_result) -> None:
    data = result_to_dict(favorable_result)
    assert data["overallChance"] == 28.8
    assert data["modifierSum"] == 5.5
    assert data["chanceBand"] == "good"
    assert list(data["factorBreakdown"])[0] == "age"
    assert data["factorBreakdown"]["follicleSize"] == {
        "impact": 0.5,
        "description": "One mature follicle provides good chances",
        "label": "Slightly Positive",
    }
    assert data["recommendations"][-1] == favorable_result.recommendations[-1]
    assert "narrative" not in data


def test_result_to_dict_with_narrative(favorable_result) -> None:
    assert result_to_dict(favorable_result, narrative="hi")["narrative"] == "hi"


def test_flatten_breakdown(favorable_result) -> None:
    rows = flatten_breakdown_for_export(favorable_result)
    assert len(rows) == 8
    assert rows[0]["order"] == 1
    assert rows[0]["factor"] == "age"
    assert rows[-1]["factor"] == "bmi"


def test_export_to_json_roundtrip(tmp_path: Path, favorable_result) -> None:
    out = tmp_path / "nested" / "result.json"
    written = export_to_json(result_to_dict(favorable_result), out)
    assert written == out
    loaded = json.loads(out.read_text(encoding="utf-8"))
    assert loaded["overallChance"] == 28.8
    assert loaded["factorBreakdown"]["age"]["impact"] == 1.0


def test_export_to_csv(tmp_path: Path, favorable_result) -> None:
    out = tmp_path / "factors.csv"
    export_to_csv(flatten_breakdown_for_export(favorable_result), out)
    with out.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 8
    assert rows[0]["factor"] == "age"
    assert rows[0]["impact"] == "1.0"


def test_export_to_csv_empty(tmp_path: Path) -> None:
    out = tmp_path / "empty.csv"
    export_to_csv([], out)
    assert out.read_text(encoding="utf-8") == ""


def test_flatten_results_adds_attempt_column(favorable_result, unfavorable_record) -> None:
    rows = flatten_results_for_export([favorable_result, evaluate(unfavorable_record)])
    assert len(rows) == 16
    assert list(rows[0]) == ["attempt", "order", "factor", "impact", "label", "description"]
    assert [r["attempt"] for r in rows] == [1] * 8 + [2] * 8
    assert rows[8]["factor"] == "age"
    assert rows[8]["impact"] == -2.0


def test_resolve_report_path(tmp_path: Path) -> None:
    assert resolve_report_path("run/a.json", "data/reports") == Path("data/reports/run/a.json")
    absolute = tmp_path / "a.json"
    assert resolve_report_path(absolute, "data/reports") == absolute
