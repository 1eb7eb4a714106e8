"""RSS cross-reference: look for recent headlines that mention the event."""
from __future__ import annotations

from shared.models.domain import Event, VerifierResult
from shared.models.enums import VerifierSource

from schedule_verifier.config import (
    RSS_CORROBORATED_CONFIDENCE,
    RSS_CORROBORATION_RATIO,
    RSS_MIN_WORD_LENGTH,
    RSS_PARTIAL_CONFIDENCE,
)
from schedule_verifier.similarity import normalize_words
from schedule_verifier.sources.base import EventContext, EvidenceVerifier


class RssVerifier(EvidenceVerifier):

    @property
    def source(self) -> VerifierSource:
        return VerifierSource.RSS_CROSS_REF

    def verify(self, event: Event, context: EventContext) -> VerifierResult:
        digest = context.evidence.rss_digest
        if not isinstance(digest, dict) or not isinstance(digest.get("items"), list):
            return self._result(details="No RSS digest available")

        words = [w for w in normalize_words(event.title) if len(w) >= RSS_MIN_WORD_LENGTH]
        if not words:
            return self._result(details="Event title too short for RSS matching")

        best_ratio = 0.0
        best_headline = ""
        for item in digest["items"]:
            if not isinstance(item, dict):
                continue
            original = item.get("title") or item.get("headline") or ""
            headline = str(original).lower()
            if not headline:
                continue
            ratio = sum(1 for w in words if w in headline) / len(words)
            if ratio > best_ratio:
                best_ratio = ratio
                best_headline = str(original)

        if best_ratio >= RSS_CORROBORATION_RATIO:
            return self._result(
                verified=True,
                confidence=RSS_CORROBORATED_CONFIDENCE,
                details=f'Corroborated by RSS headline: "{best_headline}"',
            )
        if best_ratio > 0:
            return self._result(
                confidence=RSS_PARTIAL_CONFIDENCE,
                details=f"Partial RSS mention ({round(best_ratio * 100)}% word overlap)",
            )
        return self._result(details="No RSS mentions found")
