"""Tests for FactorImpact and ScoringResult models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from iui_scorer.models.result import FactorImpact, ScoringResult
from iui_scorer.taxonomy.factors import ChanceBand, ImpactLabel


class TestFactorImpact:
    @pytest.mark.parametrize("impact", [-2.0, -1.5, -1.0, -0.5, 0.0, 0.5, 1.0])
    def test_scale_values_accepted(self, impact):
        assert FactorImpact(impact=impact, description="x").impact == impact

    @pytest.mark.parametrize("impact", [-2.5, 1.5, 3.0])
    def test_out_of_scale_raises(self, impact):
        with pytest.raises(ValidationError, match="impact"):
            FactorImpact(impact=impact, description="x")

    def test_non_half_step_raises(self):
        with pytest.raises(ValidationError, match="multiple of 0.5"):
            FactorImpact(impact=0.25, description="x")

    def test_label(self):
        assert FactorImpact(impact=0.5, description="x").label == ImpactLabel.SLIGHTLY_POSITIVE


class TestScoringResult:
    def test_chance_band(self, favorable_result):
        assert favorable_result.chance_band == ChanceBand.GOOD

    def test_empty_recommendations_raise(self):
        with pytest.raises(ValidationError, match="recommendations"):
            ScoringResult(
                overall_chance=15.0,
                factor_breakdown={},
                recommendations=(),
                modifier_sum=0.0,
            )

    def test_frozen(self, favorable_result):
        with pytest.raises(ValidationError):
            favorable_result.overall_chance = 50.0
