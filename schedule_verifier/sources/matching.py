"""
Weighted title/date matching shared by the live-score and sport-data verifiers.
The two sources use the same scoring but different confidence ceilings.
"""
from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from shared.models.domain import Correction, Event, VerifierResult
from shared.utils.dates import parse_timestamp, to_iso_z

from schedule_verifier.config import (
    CORRECTABLE_WINDOW_HOURS,
    DATE_WEIGHT,
    EXACT_MATCH_HOURS,
    MIN_MATCH_SCORE,
    TITLE_WEIGHT,
)
from schedule_verifier.similarity import title_similarity
from schedule_verifier.sources.base import EventContext, EvidenceVerifier


@dataclass(frozen=True)
class ScheduleMatch:
    """Best candidate found for an event."""
    title: str
    when: datetime
    title_score: float
    time_diff_hours: float
    score: float


def date_score(time_diff_hours: float) -> float:
    if time_diff_hours < 1:
        return 1.0
    if time_diff_hours < 24:
        return 0.5
    if time_diff_hours < 72:
        return 0.2
    return 0.0


def find_best_match(
    title: str,
    event_time: datetime,
    candidates: Iterable[tuple[str, Any]],
) -> Optional[ScheduleMatch]:
    """
    Score (title, raw_time) candidates against an event.

    Candidates with unparsable times are skipped. Only scores above MIN_MATCH_SCORE
    count, and a later candidate must strictly beat the current best.
    """
    best: Optional[ScheduleMatch] = None
    for cand_title, raw_time in candidates:
        when = parse_timestamp(raw_time)
        if when is None:
            continue
        t_score = title_similarity(title, cand_title or "")
        diff_hours = abs((event_time - when).total_seconds()) / 3600
        score = t_score * TITLE_WEIGHT + date_score(diff_hours) * DATE_WEIGHT
        if score > MIN_MATCH_SCORE and (best is None or score > best.score):
            best = ScheduleMatch(
                title=cand_title or "",
                when=when,
                title_score=t_score,
                time_diff_hours=diff_hours,
                score=score,
            )
    return best


class ScheduleMatchVerifier(EvidenceVerifier):
    """Template for verifiers that match an event against a list of scheduled candidates."""

    verified_confidence: float
    mismatch_confidence: float
    correction_min_score: float
    weak_confidence: float

    @abstractmethod
    def _candidates(self, event: Event, context: EventContext) -> tuple[Optional[list[tuple[str, Any]]], str]:
        """Return (candidates, reason). candidates is None when no evidence exists; reason explains why."""
        pass

    @abstractmethod
    def _describe(self, kind: str, match: Optional[ScheduleMatch]) -> str:
        """Detail text for a "none", "exact", "mismatch" or "weak" outcome."""
        pass

    def verify(self, event: Event, context: EventContext) -> VerifierResult:
        candidates, reason = self._candidates(event, context)
        if candidates is None:
            return self._result(details=reason)

        event_time = parse_timestamp(event.time)
        if event_time is None:
            return self._result(details="Invalid event time")

        match = find_best_match(event.title, event_time, candidates)
        if match is None:
            return self._result(details=self._describe("none", None))

        if match.time_diff_hours <= EXACT_MATCH_HOURS:
            return self._result(
                verified=True,
                confidence=self.verified_confidence,
                details=self._describe("exact", match),
            )
        if match.time_diff_hours <= CORRECTABLE_WINDOW_HOURS and match.score > self.correction_min_score:
            return self._result(
                confidence=self.mismatch_confidence,
                details=self._describe("mismatch", match),
                correction=Correction(
                    field="time",
                    old_value=event.time,
                    new_value=to_iso_z(match.when),
                    confidence=match.score,
                ),
            )
        return self._result(confidence=self.weak_confidence, details=self._describe("weak", match))
