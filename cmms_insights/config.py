"""
Application configuration.

Load order (each layer overrides the previous):
  1. ``config/default.toml``  — committed defaults
  2. ``config/local.toml``    — optional per-machine overrides (gitignored)
  3. ``.env``                 — secrets such as the remote API key (gitignored)
  4. Environment variables    — ``CMMS_INSIGHTS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``.

CLI commands and pipeline stages receive an ``AppConfig``; nothing else in
the package reads environment variables.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from cmms_insights.taxonomy.maintenance_taxonomy import ExpertiseScope

ENV_PREFIX = "CMMS_INSIGHTS_"


# ── Sub-config models ─────────────────────────────────────────────────────────

class DatabaseConfig(BaseModel):
    """Local SQLite database settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/cmms_insights.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class RemoteConfig(BaseModel):
    """Shared PostgREST database. Used only when ``enabled`` and fully configured."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    url: str = ""
    api_key: str = ""
    timeout_seconds: float = 10.0
    seed_if_empty: bool = True

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.url) and bool(self.api_key)


class ScoringConfig(BaseModel):
    """Parameters of the predictive core."""

    model_config = ConfigDict(frozen=True)

    risk_lookback_months: int = 6
    expertise_scope: ExpertiseScope = ExpertiseScope.ALL
    top_parts_limit: int = 3
    solution_refs_limit: int = 2
    high_risk_threshold: int = 70
    medium_risk_threshold: int = 40

    @field_validator("risk_lookback_months", "top_parts_limit", "solution_refs_limit")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must be >= 0, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ScoringConfig":
        if not 0 <= self.medium_risk_threshold < self.high_risk_threshold <= 100:
            raise ValueError(
                "Risk thresholds must satisfy 0 <= medium < high <= 100, got "
                f"medium={self.medium_risk_threshold}, high={self.high_risk_threshold}."
            )
        return self


class ReportingConfig(BaseModel):
    """Report export settings."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs/reports"
    top_risk_limit: int = 10
    mttr_trend_months: int = 6
    fault_distribution_limit: int = 5
    boundary_alert_hours: int = 24


class DemoConfig(BaseModel):
    """Demo data generation."""

    model_config = ConfigDict(frozen=True)

    seed: int = 42
    generated_assets: int = 20
    generated_parts: int = 20
    generated_work_orders: int = 60


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/cmms_insights.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, built by ``load_config()``."""

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    remote: RemoteConfig = RemoteConfig()
    scoring: ScoringConfig = ScoringConfig()
    reporting: ReportingConfig = ReportingConfig()
    demo: DemoConfig = DemoConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to the directory holding ``pyproject.toml``."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load, merge and validate the application configuration.

    Args:
        config_path: TOML file to load. Defaults to
            ``<project_root>/config/default.toml``. A ``local.toml`` next to
            it is merged on top when present.

    Returns:
        Validated ``AppConfig``.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: If a merged value is invalid.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            raw = _deep_merge(raw, tomllib.load(f))

    raw = _apply_env_overrides(raw)
    return AppConfig.model_validate(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply ``CMMS_INSIGHTS_*`` environment variables.

      CMMS_INSIGHTS_DB_PATH         → database.db_path
      CMMS_INSIGHTS_LOG_LEVEL       → logging.level
      CMMS_INSIGHTS_DEBUG           → debug
      CMMS_INSIGHTS_REMOTE_URL      → remote.url (and remote.enabled = true)
      CMMS_INSIGHTS_REMOTE_API_KEY  → remote.api_key
    """
    if db_path := os.environ.get(f"{ENV_PREFIX}DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path
    if log_level := os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level
    if debug := os.environ.get(f"{ENV_PREFIX}DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")
    if remote_url := os.environ.get(f"{ENV_PREFIX}REMOTE_URL"):
        remote = raw.setdefault("remote", {})
        remote["url"] = remote_url
        remote["enabled"] = True
    if api_key := os.environ.get(f"{ENV_PREFIX}REMOTE_API_KEY"):
        raw.setdefault("remote", {})["api_key"] = api_key
    return raw
