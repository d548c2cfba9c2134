"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``IUI_SCORER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Only the ambient layers (logging, narrative augmentation, report output) are
configurable.  The scoring engine's baseline, per-impact multiplier and clamp
bounds are module constants in ``iui_scorer.scoring.rules`` and are never
read from config.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

NARRATIVE_API_KEY_ENV = "IUI_SCORER_NARRATIVE_API_KEY"

# ── Sub-config models ─────────────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class NarrativeConfig(BaseModel):
    """Optional text-generation augmentation settings.

    The API key is never stored in TOML; it is read from the
    ``IUI_SCORER_NARRATIVE_API_KEY`` environment variable (or ``.env``).
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    endpoint: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o-mini"
    timeout_seconds: float = 20.0
    min_interval_seconds: float = 2.0
    max_tokens: int = 400
    api_key: Optional[str] = None

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v

    @field_validator("min_interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"min_interval_seconds must be >= 0, got {v}.")
        return v


class OutputConfig(BaseModel):
    """Where exported reports are written.

    Relative ``evaluate --output`` and ``--csv`` paths are resolved under
    ``reports_dir``; absolute paths are used as given.
    """

    model_config = ConfigDict(frozen=True)

    reports_dir: str = "data/reports"


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = LoggingConfig()
    narrative: NarrativeConfig = NarrativeConfig()
    output: OutputConfig = OutputConfig()
    # Forces DEBUG logging in the CLI regardless of [logging] level
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    # 3. Apply IUI_SCORER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _env_flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply IUI_SCORER_* env vars to the raw config dict.

    Supported overrides:
      IUI_SCORER_LOG_LEVEL          → raw["logging"]["level"]
      IUI_SCORER_NARRATIVE_ENABLED  → raw["narrative"]["enabled"]
      IUI_SCORER_NARRATIVE_API_KEY  → raw["narrative"]["api_key"]
      IUI_SCORER_REPORTS_DIR        → raw["output"]["reports_dir"]
      IUI_SCORER_DEBUG              → raw["debug"]
    """
    if log_level := os.environ.get("IUI_SCORER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if enabled := os.environ.get("IUI_SCORER_NARRATIVE_ENABLED"):
        raw.setdefault("narrative", {})["enabled"] = _env_flag(enabled)

    if api_key := os.environ.get(NARRATIVE_API_KEY_ENV):
        raw.setdefault("narrative", {})["api_key"] = api_key

    if reports_dir := os.environ.get("IUI_SCORER_REPORTS_DIR"):
        raw.setdefault("output", {})["reports_dir"] = reports_dir

    if debug := os.environ.get("IUI_SCORER_DEBUG"):
        raw["debug"] = _env_flag(debug)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        logging=LoggingConfig(**raw.get("logging", {})),
        narrative=NarrativeConfig(**raw.get("narrative", {})),
        output=OutputConfig(**raw.get("output", {})),
        debug=raw.get("debug", False),
    )
