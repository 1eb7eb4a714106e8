"""
Central configuration for the schedule verification services.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings shared by the verifier run and its CLI."""

    model_config = SettingsConfigDict(
        env_prefix="SV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = "INFO"
    instance_id: str = Field(default="", description="Runner/container ID bound to every log entry")

    # ── Paths ────────────────────────────────────────────────
    data_dir: Path = Field(
        default=Path("docs/data"),
        description="Directory holding rss-digest.json, {sport}.json, history and health report",
    )
    config_dir: Path = Field(
        default=Path("scripts/config"),
        description="Directory holding curated event-group JSON files",
    )

    # ── Live-score provider ──────────────────────────────────
    request_timeout_s: float = Field(default=8.0, description="Per-request timeout for scoreboard fetches")
    live_scores_enabled: bool = True

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = False
    metrics_port: int = 9091

    @property
    def history_path(self) -> Path:
        return self.data_dir / "verification-history.json"

    @property
    def health_report_path(self) -> Path:
        return self.data_dir / "health-report.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
