"""
Pydantic v2 domain models for schedule verification.
These are the canonical persisted/wire representations; JSON keys are camelCase.
"""
from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.models.enums import IssueCode, IssueSeverity, VerificationStatus, VerifierSource


def clamp_confidence(value: Any) -> float:
    """Coerce to float and clamp into [0, 1]; anything non-numeric becomes 0."""
    try:
        conf = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(conf):
        return 0.0
    return min(1.0, max(0.0, conf))


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)


# ── Curated input ───────────────────────────────────────────────────────
class Event(DomainModel):
    """One curated event record. `time` is kept raw; parsing is the static verifier's job."""
    title: str = ""
    time: Optional[str] = None
    end_time: Optional[str] = None
    venue: Optional[str] = None
    sport: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("time", "end_time", "venue", "sport", mode="before")
    @classmethod
    def _optional_str(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)


class EventGroup(DomainModel):
    """A curated event group (one config file)."""
    file: str = ""
    sport: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    events: list[Event] = Field(default_factory=list)

    @field_validator("sport", "start_date", "end_date", mode="before")
    @classmethod
    def _optional_str(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)


# ── Verifier output ─────────────────────────────────────────────────────
class Correction(DomainModel):
    """A proposed replacement value for an event field."""
    model_config = ConfigDict(frozen=True)

    field: str = "time"
    old_value: Optional[str] = None
    new_value: str
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float:
        return clamp_confidence(v)


class EventCorrection(Correction):
    """Correction tagged with the event title it applies to (group level)."""
    event: str = ""


class VerifierResult(DomainModel):
    """Outcome of one verifier for one event. Created fresh per invocation."""
    model_config = ConfigDict(frozen=True)

    source: VerifierSource
    verified: bool = False
    confidence: float = 0.0
    details: str = ""
    correction: Optional[Correction] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float:
        return clamp_confidence(v)


class AggregateVerdict(DomainModel):
    model_config = ConfigDict(frozen=True)

    confidence: float = 0.0
    status: VerificationStatus = VerificationStatus.UNVERIFIED
    sources: list[VerifierSource] = Field(default_factory=list)


# ── Group results ───────────────────────────────────────────────────────
class EventVerificationMeta(DomainModel):
    confidence: float
    status: VerificationStatus
    sources: list[VerifierSource] = Field(default_factory=list)
    last_verified: str


class EventVerification(DomainModel):
    """Per-event record inside a ConfigVerificationResult."""
    title: str
    time: Optional[str] = None
    verification: EventVerificationMeta
    verifier_results: list[VerifierResult] = Field(default_factory=list)
    correction: Optional[EventCorrection] = None


class VerificationSummary(DomainModel):
    """Block written back onto each curated group file."""
    last_run: str
    events_checked: int = 0
    verified: int = 0
    plausible: int = 0
    unverified: int = 0
    overall_confidence: float = 0.0


class ConfigVerificationResult(DomainModel):
    file: str = ""
    sport: Optional[str] = None
    events_checked: int = 0
    verified: int = 0
    plausible: int = 0
    unverified: int = 0
    overall_confidence: float = 0.0
    event_results: list[EventVerification] = Field(default_factory=list)
    corrections: list[EventCorrection] = Field(default_factory=list)
    verification_summary: VerificationSummary


# ── History ─────────────────────────────────────────────────────────────
class RunResultSummary(DomainModel):
    """Per-group slice of a run, as persisted in history."""
    file: str = ""
    sport: Optional[str] = None
    events_checked: int = 0
    verified: int = 0
    plausible: int = 0
    unverified: int = 0
    overall_confidence: float = 0.0
    # kept loose: older history entries carry partial correction records
    corrections: list[dict[str, Any]] = Field(default_factory=list)


class VerificationRun(DomainModel):
    timestamp: str
    configs_checked: int = 0
    events_checked: int = 0
    results: list[RunResultSummary] = Field(default_factory=list)


class VerificationHistory(DomainModel):
    version: int = 1
    runs: list[VerificationRun] = Field(default_factory=list)


# ── Hints ───────────────────────────────────────────────────────────────
class HintMetrics(DomainModel):
    overall_accuracy: float
    unverified_ratio: float
    corrections_applied: int
    sport_accuracy: Optional[float] = None
    runs_analyzed: int


class VerificationHints(DomainModel):
    hints: list[str] = Field(default_factory=list)
    metrics: Optional[HintMetrics] = None


# ── Health report ───────────────────────────────────────────────────────
class HealthIssue(DomainModel):
    severity: IssueSeverity = IssueSeverity.WARNING
    code: IssueCode
    config: str
    event: Optional[str] = None
    message: str
