"""
Verifier configuration.
Run limits come from the environment (SV_VERIFIER_ prefix); scoring thresholds are
empirically chosen constants and are not meant to be tuned per deployment.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Matching ────────────────────────────────────────────────
TITLE_WEIGHT = 0.6
DATE_WEIGHT = 0.4
MIN_MATCH_SCORE = 0.3  # candidates at or below this are ignored
EXACT_MATCH_HOURS = 1.0
CORRECTABLE_WINDOW_HOURS = 48.0

# Live service: fresher data, higher ceiling
LIVE_VERIFIED_CONFIDENCE = 0.9
LIVE_MISMATCH_CONFIDENCE = 0.7
LIVE_CORRECTION_MIN_SCORE = 0.7
LIVE_WEAK_CONFIDENCE = 0.3

# Local sport data: refreshed less often, never fully verified alone
SPORT_DATA_VERIFIED_CONFIDENCE = 0.8
SPORT_DATA_MISMATCH_CONFIDENCE = 0.5
SPORT_DATA_CORRECTION_MIN_SCORE = 0.6
SPORT_DATA_WEAK_CONFIDENCE = 0.2

# ── Static checks ───────────────────────────────────────────
STATIC_PASS_CONFIDENCE = 0.4
STATIC_ISSUE_CONFIDENCE = 0.1
MAX_FUTURE_DAYS = 365
MAX_PAST_DAYS = 7

# ── RSS ─────────────────────────────────────────────────────
RSS_MIN_WORD_LENGTH = 3
RSS_CORROBORATION_RATIO = 0.5
RSS_CORROBORATED_CONFIDENCE = 0.5
RSS_PARTIAL_CONFIDENCE = 0.2

# ── Web search ──────────────────────────────────────────────
WEB_SEARCH_VERIFIED_DEFAULT = 0.8
WEB_SEARCH_INCONCLUSIVE_DEFAULT = 0.3

# ── Aggregation ─────────────────────────────────────────────
VERIFIED_THRESHOLD = 0.7
PLAUSIBLE_THRESHOLD = 0.3
CORROBORATION_BONUS = 0.1
CORRECTION_APPLY_THRESHOLD = 0.7

# ── Hints ───────────────────────────────────────────────────
HINT_ACCURACY_WINDOW = 3
HINT_SPORT_WINDOW = 5
HINT_LOW_ACCURACY = 0.6
HINT_LOW_SPORT_ACCURACY = 0.5
HINT_MIN_SPORT_EVENTS = 2
HINT_HIGH_UNVERIFIED_RATIO = 0.3


class VerifierSettings(BaseSettings):
    """Run limits for one verification pass."""

    model_config = SettingsConfigDict(
        env_prefix="SV_VERIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Web search is the most expensive source
    web_search_budget: int = Field(default=3, description="Max web-search callback invocations per run")
    web_search_command: Optional[str] = Field(
        default=None,
        description="Search agent command; reads a prompt on stdin, answers JSON. Unset disables web search",
    )
    web_search_timeout_s: float = Field(default=30.0, description="Per-call deadline for the search command")

    # History and re-research
    max_history_runs: int = Field(default=50, description="Runs kept in verification-history.json")
    needs_research_threshold: float = Field(default=0.5, description="Unverified ratio above which a group is flagged")

    # Safety valve; the outer pipeline step times out at 60s
    safety_timeout_s: float = Field(default=50.0, description="Wall-clock deadline for a full run")

    # Live-score fetching
    retry_max_attempts: int = Field(default=2, description="Attempts per scoreboard request")
    retry_base_delay_s: float = Field(default=0.5, description="Base delay between retries")
    circuit_failure_threshold: int = Field(default=3, description="Failures before opening a domain circuit")
    circuit_recovery_s: float = Field(default=120.0, description="Seconds before half-open")


def get_verifier_settings() -> VerifierSettings:
    """Load verifier settings from the environment."""
    return VerifierSettings()
