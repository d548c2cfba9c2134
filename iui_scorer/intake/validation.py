"""
Intake validation: the layer that keeps out-of-domain records away from the
scoring engine.

Two error classes exist around the engine:

  DomainViolation  — a field outside its clinical range (negative sperm count,
                     age 61, NaN thickness).  Detected here, before
                     ``evaluate()`` is called; the engine never checks.
  DegenerateInput  — legal but sparse data (zero follicles, empty size list).
                     Not an error: the rule table scores it normally.

Limits and messages match the attempt form so a CLI user sees the same text
a form user would.

Usage::

    record = load_attempt(raw_dict)        # pydantic.ValidationError on bad shape
    require_valid(record)                  # DomainViolationError on bad ranges
    result = evaluate(record)
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from iui_scorer.models.attempt import AttemptRecord

logger = logging.getLogger(__name__)

AGE_MIN, AGE_MAX = 18, 50
BMI_MIN, BMI_MAX = 10.0, 50.0
MOTILITY_MIN, MOTILITY_MAX = 0.0, 100.0


class DomainViolationError(ValueError):
    """Raised when a record has one or more out-of-range fields.

    Attributes:
        violations: Human-readable message per offending field, in field order.
    """

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        summary = "; ".join(self.violations)
        super().__init__(f"{len(self.violations)} domain violation(s): {summary}")


def validate_attempt(record: AttemptRecord) -> list[str]:
    """Return every domain violation in ``record`` (empty list when valid)."""
    errors: list[str] = []

    numeric_fields = {
        "sperm_count": record.sperm_count,
        "sperm_motility": record.sperm_motility,
        "endometrium_thickness": record.endometrium_thickness,
        "bmi": record.bmi,
    }
    for name, value in numeric_fields.items():
        if not math.isfinite(value):
            errors.append(f"{name} must be a finite number")

    if record.age < AGE_MIN:
        errors.append(f"Age must be at least {AGE_MIN}")
    elif record.age > AGE_MAX:
        errors.append(f"Age must be at most {AGE_MAX}")

    if record.sperm_count < 0:
        errors.append("Sperm count cannot be negative")

    if record.sperm_motility < MOTILITY_MIN:
        errors.append("Sperm motility cannot be negative")
    elif record.sperm_motility > MOTILITY_MAX:
        errors.append("Sperm motility cannot exceed 100%")

    if record.follicle_count < 0:
        errors.append("Follicle count cannot be negative")

    for idx, size in enumerate(record.follicle_sizes, start=1):
        if not math.isfinite(size):
            errors.append(f"Follicle #{idx} size must be a finite number")
        elif size < 0:
            errors.append(f"Follicle #{idx} size cannot be negative")

    if record.endometrium_thickness < 0:
        errors.append("Endometrium thickness cannot be negative")

    if record.bmi < BMI_MIN:
        errors.append(f"BMI must be at least {BMI_MIN:g}")
    elif record.bmi > BMI_MAX:
        errors.append(f"BMI must be at most {BMI_MAX:g}")

    if record.previous_iui_attempts < 0:
        errors.append("Previous IUI attempts cannot be negative")
    if record.prior_pregnancies < 0:
        errors.append("Previous pregnancies cannot be negative")
    if record.prior_miscarriages < 0:
        errors.append("Previous miscarriages cannot be negative")

    if record.amh_level is not None and not record.amh_level >= 0:
        errors.append("AMH level cannot be negative")

    return errors


def require_valid(record: AttemptRecord) -> AttemptRecord:
    """Return ``record`` unchanged, or raise ``DomainViolationError``."""
    errors = validate_attempt(record)
    if errors:
        logger.info("Rejected attempt record with %d violation(s)", len(errors))
        raise DomainViolationError(errors)
    return record


def load_attempt(data: dict[str, Any]) -> AttemptRecord:
    """Build an ``AttemptRecord`` from a raw dict (snake_case or camelCase keys).

    Raises:
        pydantic.ValidationError: Missing fields or un-coercible types.
    """
    return AttemptRecord.model_validate(data)


def load_attempts_file(path: Path) -> list[AttemptRecord]:
    """Load one record (JSON object) or several (JSON array) from ``path``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the JSON is malformed or not an object/array of objects.
        pydantic.ValidationError: If an entry cannot be parsed into a record.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Attempt file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if isinstance(payload, dict):
        entries = [payload]
    elif isinstance(payload, list):
        entries = payload
    else:
        raise ValueError(
            f"{path} must contain a JSON object or an array of objects."
        )

    records: list[AttemptRecord] = []
    for idx, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ValueError(f"Entry #{idx} in {path} is not a JSON object.")
        records.append(load_attempt(entry))

    logger.debug("Loaded %d attempt record(s) from %s", len(records), path)
    return records
