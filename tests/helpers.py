"""Builders shared across test modules: a fixed clock, events, groups and contexts."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from shared.models.domain import Event, EventGroup
from schedule_verifier.sources.base import EventContext, EvidenceBundle

NOW = datetime(2026, 2, 12, 12, 0, tzinfo=timezone.utc)


def make_context(
    event: Optional[Event] = None,
    siblings: Sequence[Event] = (),
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    sport_key: Optional[str] = None,
    now: datetime = NOW,
    **evidence: Any,
) -> EventContext:
    if event is not None and not siblings:
        siblings = [event]
    return EventContext(
        evidence=EvidenceBundle(now=now, **evidence),
        start_date=start_date,
        end_date=end_date,
        siblings=siblings,
        sport_key=sport_key,
    )


def make_group(events: list[dict[str, Any]], **fields: Any) -> EventGroup:
    return EventGroup.model_validate({"file": "test.json", **fields, "events": events})

