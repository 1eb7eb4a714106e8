"""Structural checks on an event's time. Always runs first; no evidence needed."""
from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from shared.models.domain import Event, VerifierResult
from shared.models.enums import VerifierSource
from shared.utils.dates import parse_range_end, parse_timestamp

from schedule_verifier.config import (
    MAX_FUTURE_DAYS,
    MAX_PAST_DAYS,
    STATIC_ISSUE_CONFIDENCE,
    STATIC_PASS_CONFIDENCE,
)
from schedule_verifier.sources.base import EventContext, EvidenceVerifier


def duplicate_siblings(event: Event, siblings: Sequence[Event]) -> list[Event]:
    """Other events (by identity) sharing this event's raw time and venue."""
    return [
        s for s in siblings
        if s is not event and s.time == event.time and s.venue == event.venue
    ]


class StaticVerifier(EvidenceVerifier):

    @property
    def source(self) -> VerifierSource:
        return VerifierSource.STATIC

    def verify(self, event: Event, context: EventContext) -> VerifierResult:
        if not event.time:
            return self._result(details="Missing time field")

        event_time = parse_timestamp(event.time)
        if event_time is None:
            return self._result(details=f"Invalid time: {event.time}")

        issues: list[str] = []

        if context.start_date and context.end_date:
            start = parse_timestamp(context.start_date)
            end = parse_range_end(context.end_date)
            if start and end and (event_time < start or event_time > end):
                issues.append(f"Outside config range {context.start_date} to {context.end_date}")

        now = context.now
        if event_time - now > timedelta(days=MAX_FUTURE_DAYS):
            issues.append("Event is more than 1 year in the future")
        if now - event_time > timedelta(days=MAX_PAST_DAYS):
            issues.append(f"Event is more than {MAX_PAST_DAYS} days in the past")

        dupes = duplicate_siblings(event, context.siblings)
        if dupes:
            issues.append(f"Shares time and venue with {len(dupes)} other event(s)")

        if not issues:
            return self._result(
                verified=True,
                confidence=STATIC_PASS_CONFIDENCE,
                details="Passes all static checks",
            )
        return self._result(confidence=STATIC_ISSUE_CONFIDENCE, details="; ".join(issues))
