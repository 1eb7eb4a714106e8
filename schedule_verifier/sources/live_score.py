"""
Live-score verifier: matches an event against pre-fetched scoreboard events for its
sport category. The live service is the freshest source, so an exact match is
enough to verify an event on its own.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.models.domain import Event
from shared.models.enums import VerifierSource

from schedule_verifier.config import (
    LIVE_CORRECTION_MIN_SCORE,
    LIVE_MISMATCH_CONFIDENCE,
    LIVE_VERIFIED_CONFIDENCE,
    LIVE_WEAK_CONFIDENCE,
)
from schedule_verifier.similarity import detect_sport_from_title
from schedule_verifier.sources.base import EventContext
from schedule_verifier.sources.espn import ESPN_SCOREBOARD_URLS
from schedule_verifier.sources.matching import ScheduleMatch, ScheduleMatchVerifier


class LiveScoreVerifier(ScheduleMatchVerifier):

    verified_confidence = LIVE_VERIFIED_CONFIDENCE
    mismatch_confidence = LIVE_MISMATCH_CONFIDENCE
    correction_min_score = LIVE_CORRECTION_MIN_SCORE
    weak_confidence = LIVE_WEAK_CONFIDENCE

    @property
    def source(self) -> VerifierSource:
        return VerifierSource.LIVE_API

    def _candidates(self, event: Event, context: EventContext) -> tuple[Optional[list[tuple[str, Any]]], str]:
        sport_key = detect_sport_from_title(event.title) or context.sport_key
        if not sport_key or sport_key not in ESPN_SCOREBOARD_URLS:
            return None, "No live-score endpoint for this sport"
        events = context.evidence.live_events.get(sport_key)
        if not isinstance(events, list) or not events:
            return None, "No live-score data available for this sport"
        return [
            (e.get("name") or e.get("title") or "", e.get("date") or e.get("time"))
            for e in events
            if isinstance(e, dict)
        ], ""

    def _describe(self, kind: str, match: Optional[ScheduleMatch]) -> str:
        if match is None:
            return "No matching live-score event found"
        if kind == "exact":
            return f"Matches live-score event (time diff: {round(match.time_diff_hours * 60)}min)"
        if kind == "mismatch":
            return f"Time mismatch: {round(match.time_diff_hours)}h diff (confidence: {match.score:.2f})"
        return f"Weak match: {round(match.time_diff_hours)}h diff, score={match.score:.2f}"
