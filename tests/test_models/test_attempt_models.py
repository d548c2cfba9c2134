"""Tests for AttemptRecord construction, aliases, and immutability."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from iui_scorer.models.attempt import AttemptRecord


class TestAttemptRecord:
    def test_valid_construction(self, favorable_record):
        r = favorable_record
        assert r.age == 32
        assert r.follicle_sizes == (19.0, 17.0)
        assert r.medications_used == frozenset()

    def test_camel_case_aliases(self):
        r = AttemptRecord.model_validate({
            "age": 33,
            "spermCount": 20,
            "spermMotility": 50,
            "follicleCount": 2,
            "follicleSizes": [18, 16],
            "endometriumThickness": 9,
            "bmi": 21,
            "previousIUIAttempts": 1,
            "medicationsUsed": ["letrozole"],
            "blockedTubes": True,
            "priorPregnancies": 1,
            "priorMiscarriages": 0,
            "amhLevel": 2.1,
        })
        assert r.sperm_count == 20.0
        assert r.follicle_sizes == (18.0, 16.0)
        assert r.previous_iui_attempts == 1
        assert r.medications_used == frozenset({"letrozole"})
        assert r.blocked_tubes is True
        assert r.prior_pregnancies == 1
        assert r.amh_level == 2.1

    def test_legacy_form_keys(self):
        r = AttemptRecord.model_validate({
            "age": 30,
            "partnerSpermCount": 16,
            "partnerSpermMotility": 41,
            "follicleCount": 1,
            "follicleSize": [18.5],
            "endometriumThickness": 8,
            "bmi": 22,
            "previousPregnancies": 2,
            "previousMiscarriages": 1,
        })
        assert r.sperm_count == 16.0
        assert r.sperm_motility == 41.0
        assert r.follicle_sizes == (18.5,)
        assert r.prior_pregnancies == 2
        assert r.prior_miscarriages == 1

    def test_missing_required_field_raises(self):
        with pytest.raises(ValidationError, match="bmi"):
            AttemptRecord(
                age=30, sperm_count=15.0, sperm_motility=40.0, follicle_count=1,
                endometrium_thickness=8.0,
            )

    def test_frozen(self, favorable_record):
        with pytest.raises(ValidationError):
            favorable_record.age = 45

    def test_out_of_domain_values_are_accepted(self):
        # Range enforcement belongs to intake validation, not the model.
        r = AttemptRecord(
            age=70, sperm_count=-1.0, sperm_motility=150.0, follicle_count=-2,
            endometrium_thickness=-3.0, bmi=80.0,
        )
        assert r.age == 70

    def test_medication_dump_is_sorted(self, make_record):
        r = make_record(medications_used=frozenset({"letrozole", "clomiphene", "hcg"}))
        assert r.model_dump()["medications_used"] == ["clomiphene", "hcg", "letrozole"]
