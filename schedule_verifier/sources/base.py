"""
Verifier interface and the evidence context every verifier reads from.
Evidence is fetched before the run; verifiers themselves never perform I/O
(web search, which awaits an injected callback, lives in web_search.py).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from shared.models.domain import Event, VerifierResult
from shared.models.enums import VerifierSource
from shared.utils.dates import utc_now


@dataclass
class EvidenceBundle:
    """Run-level evidence, shared by every event in every group."""
    live_events: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    rss_digest: Optional[dict[str, Any]] = None
    sport_data: dict[str, dict[str, Any]] = field(default_factory=dict)
    now: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.now.tzinfo is None:
            self.now = self.now.replace(tzinfo=timezone.utc)


@dataclass
class EventContext:
    """Event-local view: the group's date range, siblings and resolved sport key."""
    evidence: EvidenceBundle = field(default_factory=EvidenceBundle)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    siblings: Sequence[Event] = ()
    sport_key: Optional[str] = None

    @property
    def now(self) -> datetime:
        return self.evidence.now


class EvidenceVerifier(ABC):
    """Base for the synchronous verifiers in the chain."""

    @property
    @abstractmethod
    def source(self) -> VerifierSource:
        pass

    @abstractmethod
    def verify(self, event: Event, context: EventContext) -> VerifierResult:
        """Check one event. Implementations report problems in the result; they do not raise."""
        pass

    def _result(self, **fields: Any) -> VerifierResult:
        return VerifierResult(source=self.source, **fields)
