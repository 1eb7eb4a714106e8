"""
Local sport-data verifier: matches against the per-sport tournament listings written
by the sport fetchers ({sport}.json). Those files go stale between fetches, so this
source caps below the live service and never verifies an event alone.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.models.domain import Event
from shared.models.enums import VerifierSource

from schedule_verifier.config import (
    SPORT_DATA_CORRECTION_MIN_SCORE,
    SPORT_DATA_MISMATCH_CONFIDENCE,
    SPORT_DATA_VERIFIED_CONFIDENCE,
    SPORT_DATA_WEAK_CONFIDENCE,
)
from schedule_verifier.sources.base import EventContext
from schedule_verifier.sources.matching import ScheduleMatch, ScheduleMatchVerifier


class SportDataVerifier(ScheduleMatchVerifier):

    verified_confidence = SPORT_DATA_VERIFIED_CONFIDENCE
    mismatch_confidence = SPORT_DATA_MISMATCH_CONFIDENCE
    correction_min_score = SPORT_DATA_CORRECTION_MIN_SCORE
    weak_confidence = SPORT_DATA_WEAK_CONFIDENCE

    @property
    def source(self) -> VerifierSource:
        return VerifierSource.SPORT_DATA

    def _candidates(self, event: Event, context: EventContext) -> tuple[Optional[list[tuple[str, Any]]], str]:
        sport_key = context.sport_key or event.sport
        data = context.evidence.sport_data.get(sport_key) if sport_key else None
        if not isinstance(data, dict) or not isinstance(data.get("tournaments"), list):
            return None, "No sport data file available"

        candidates: list[tuple[str, Any]] = []
        for tournament in data["tournaments"]:
            if not isinstance(tournament, dict) or not isinstance(tournament.get("events"), list):
                continue
            for e in tournament["events"]:
                if isinstance(e, dict):
                    candidates.append((e.get("title") or e.get("name") or "", e.get("time") or e.get("date")))
        return candidates, ""

    def _describe(self, kind: str, match: Optional[ScheduleMatch]) -> str:
        if match is None:
            return "No matching event in sport data"
        if kind == "exact":
            return f"Matches sport data event (time diff: {round(match.time_diff_hours * 60)}min)"
        if kind == "mismatch":
            return f"Sport data time mismatch: {round(match.time_diff_hours)}h diff"
        return f"Weak sport data match: {round(match.time_diff_hours)}h diff"
