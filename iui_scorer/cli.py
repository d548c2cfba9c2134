"""
IUI Scorer — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (score, validate, print rules).
  5. Report result to stdout.

Install and run::

    pip install -e .
    iui-scorer --help
    iui-scorer evaluate attempt.json
    iui-scorer evaluate attempt.json --json --output attempt.json   # -> data/reports/
    iui-scorer evaluate attempt.json --narrative
    iui-scorer validate-input attempt.json
    iui-scorer rules
    iui-scorer validate-config
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="iui-scorer",
    help="IUI attempt scoring — deterministic rule-table estimate and advice.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from iui_scorer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config; ``debug = true`` forces DEBUG level."""
    from iui_scorer.utils.logging import configure_logging

    logging_config = config.logging
    if config.debug:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(logging_config)


def _load_records_or_exit(input_path: str):
    """Parse and domain-check every record in ``input_path``; exit 1 on failure."""
    from pydantic import ValidationError

    from iui_scorer.intake.validation import load_attempts_file, validate_attempt

    try:
        records = load_attempts_file(Path(input_path))
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Could not parse attempt record:\n{exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    failed = False
    for idx, record in enumerate(records, start=1):
        for msg in validate_attempt(record):
            typer.echo(f"[ERROR] Attempt #{idx}: {msg}", err=True)
            failed = True
    if failed:
        raise typer.Exit(code=1)
    return records


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("evaluate")
def evaluate_cmd(
    input_path: str = typer.Argument(
        ...,
        help="JSON file with one attempt object or an array of attempts.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON instead of the text report.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        help="Also write the JSON results here (relative paths go under reports_dir).",
    ),
    csv_output: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Also write a flat per-factor CSV for every attempt (relative paths go under reports_dir).",
    ),
    narrative: bool = typer.Option(
        False,
        "--narrative",
        help="Request supplementary AI commentary (needs an API key in .env).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score one or more IUI attempt records.

    Records are domain-checked first; any violation exits with code 1 and
    nothing is scored.
    """
    from iui_scorer.narrative.augment import augment
    from iui_scorer.reporting.export import (
        export_to_csv,
        export_to_json,
        flatten_results_for_export,
        resolve_report_path,
        result_to_dict,
    )
    from iui_scorer.reporting.formatters import format_result
    from iui_scorer.scoring.engine import evaluate
    from iui_scorer.scoring.quick_estimate import estimate_success_probability

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    records = _load_records_or_exit(input_path)

    provider = None
    if narrative or config.narrative.enabled:
        from iui_scorer.narrative.http_client import HttpNarrativeClient
        provider = HttpNarrativeClient.from_config(config.narrative)

    reports = []
    for record in records:
        result = evaluate(record)
        if provider is not None:
            # Space batch requests out to the configured minimum interval
            waited = provider.rate_limiter.wait()
            if waited:
                logger.debug("Waited %.1fs for the narrative rate limit", waited)
        reports.append(augment(result, provider))
    payload = [result_to_dict(r.result, narrative=r.narrative) for r in reports]

    if as_json:
        typer.echo(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    else:
        for idx, (record, report) in enumerate(zip(records, reports), start=1):
            if len(reports) > 1:
                typer.echo(f"=== Attempt #{idx} ===")
            typer.echo(format_result(
                report.result,
                narrative=report.narrative,
                narrative_error=report.narrative_error,
            ))
            quick = estimate_success_probability(record)
            typer.echo(f"\nQuick estimate (incl. comorbidities/medication): {quick:.1%}")
            typer.echo("")

    if output:
        written = export_to_json(
            payload[0] if len(payload) == 1 else payload,
            resolve_report_path(output, config.output.reports_dir),
        )
        typer.echo(f"[OK] JSON written to {written}", err=True)

    if csv_output:
        written = export_to_csv(
            flatten_results_for_export([r.result for r in reports]),
            resolve_report_path(csv_output, config.output.reports_dir),
        )
        typer.echo(f"[OK] CSV written to {written}", err=True)


@app.command("validate-input")
def validate_input(
    input_path: str = typer.Argument(..., help="JSON attempt file to check."),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Check attempt records against the intake limits without scoring them."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    records = _load_records_or_exit(input_path)
    typer.echo(f"[OK] {len(records)} attempt record(s) valid.")


@app.command("rules")
def rules_cmd() -> None:
    """Print the scoring rule table and aggregation constants."""
    from iui_scorer.reporting.formatters import format_rule_table
    from iui_scorer.scoring.rules import (
        BASELINE_CHANCE,
        MAX_CHANCE,
        MIN_CHANCE,
        POINTS_PER_IMPACT,
        RULES,
    )

    typer.echo(
        f"overall = clamp({BASELINE_CHANCE:g} + sum(impact) x {POINTS_PER_IMPACT:g}, "
        f"{MIN_CHANCE:g}, {MAX_CHANCE:g})"
    )
    typer.echo("")
    typer.echo(format_rule_table(RULES))


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Narrative enabled:  {config.narrative.enabled}")
    typer.echo(f"  Narrative model:    {config.narrative.model}")
    typer.echo(f"  Narrative API key:  {'set' if config.narrative.api_key else 'not set'}")
    typer.echo(f"  Reports dir:        {config.output.reports_dir}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        dumped = config.model_dump()
        if dumped["narrative"].get("api_key"):
            dumped["narrative"]["api_key"] = "***"
        typer.echo(json.dumps(dumped, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


if __name__ == "__main__":
    app()
