"""
Schedule verification engine.
Runs the verifier chain (static -> live-score -> RSS -> sport data -> optional web
search) over every event in a curated group and folds the verdicts into a summary.
Processing is sequential: escalation to web search depends on the running aggregate.
"""
from __future__ import annotations

from typing import Optional

from shared.models.domain import (
    ConfigVerificationResult,
    Event,
    EventCorrection,
    EventGroup,
    EventVerification,
    EventVerificationMeta,
    VerificationSummary,
    VerifierResult,
)
from shared.models.enums import VerificationStatus
from shared.utils.dates import utc_now_iso
from shared.utils.logging import get_logger
from shared.utils.metrics import CORRECTIONS_PROPOSED, EVENT_STATUS, VERIFIER_RESULTS

from schedule_verifier.confidence import aggregate_confidence, round_confidence
from schedule_verifier.config import CORRECTION_APPLY_THRESHOLD, VerifierSettings, get_verifier_settings
from schedule_verifier.similarity import detect_sport_from_title
from schedule_verifier.sources.base import EventContext, EvidenceBundle, EvidenceVerifier
from schedule_verifier.sources.live_score import LiveScoreVerifier
from schedule_verifier.sources.rss import RssVerifier
from schedule_verifier.sources.sport_data import SportDataVerifier
from schedule_verifier.sources.static import StaticVerifier
from schedule_verifier.sources.web_search import SearchCallback, WebSearchBudget, WebSearchVerifier

logger = get_logger(__name__)


def select_correction(results: list[VerifierResult]) -> Optional[VerifierResult]:
    """
    Pick the correction to apply for one event.

    Only results that are themselves confident (>= threshold) may propose; the most
    confident of those wins (first wins ties), and its correction must then clear
    the threshold strictly. Sport data (0.5) therefore never rewrites a file alone.
    """
    best: Optional[VerifierResult] = None
    for r in results:
        if r.correction is None or r.confidence < CORRECTION_APPLY_THRESHOLD:
            continue
        if best is None or r.confidence > best.confidence:
            best = r
    if best is None or best.correction is None or best.correction.confidence <= CORRECTION_APPLY_THRESHOLD:
        return None
    return best


class ScheduleVerificationEngine:
    """Verifies curated event groups against one run's evidence bundle."""

    def __init__(
        self,
        evidence: EvidenceBundle,
        search: Optional[SearchCallback] = None,
        settings: Optional[VerifierSettings] = None,
    ) -> None:
        self._evidence = evidence
        self._settings = settings or get_verifier_settings()
        self._chain: tuple[EvidenceVerifier, ...] = (
            StaticVerifier(),
            LiveScoreVerifier(),
            RssVerifier(),
            SportDataVerifier(),
        )
        self._web = WebSearchVerifier(search, WebSearchBudget(self._settings.web_search_budget))

    @property
    def evidence(self) -> EvidenceBundle:
        return self._evidence

    @property
    def web_search_budget(self) -> WebSearchBudget:
        return self._web.budget

    def context_for(self, group: EventGroup, event: Event) -> EventContext:
        return EventContext(
            evidence=self._evidence,
            start_date=group.start_date,
            end_date=group.end_date,
            siblings=group.events,
            sport_key=group.sport or detect_sport_from_title(event.title),
        )

    async def verify_event(
        self,
        event: Event,
        context: EventContext,
        allow_web_search: bool = True,
    ) -> EventVerification:
        """Run the chain for one event and aggregate."""
        results = [verifier.verify(event, context) for verifier in self._chain]
        aggregate = aggregate_confidence(results)

        if (
            allow_web_search
            and self._web.available
            and aggregate.status == VerificationStatus.UNVERIFIED
        ):
            results.append(await self._web.verify(event))
            aggregate = aggregate_confidence(results)

        for r in results:
            VERIFIER_RESULTS.labels(source=r.source.value, verified=str(r.verified).lower()).inc()
        EVENT_STATUS.labels(status=aggregate.status.value).inc()

        correction: Optional[EventCorrection] = None
        chosen = select_correction(results)
        if chosen is not None and chosen.correction is not None:
            correction = EventCorrection(event=event.title, **chosen.correction.model_dump())
            CORRECTIONS_PROPOSED.labels(source=chosen.source.value).inc()

        return EventVerification(
            title=event.title,
            time=event.time,
            verification=EventVerificationMeta(
                confidence=aggregate.confidence,
                status=aggregate.status,
                sources=aggregate.sources,
                last_verified=utc_now_iso(),
            ),
            verifier_results=results,
            correction=correction,
        )

    async def verify_group(self, group: EventGroup, allow_web_search: bool = True) -> ConfigVerificationResult:
        """Verify every event in a group and compute its summary."""
        event_results: list[EventVerification] = []
        for event in group.events:
            context = self.context_for(group, event)
            event_results.append(await self.verify_event(event, context, allow_web_search))

        counts = {status: 0 for status in VerificationStatus}
        for er in event_results:
            counts[er.verification.status] += 1
        overall = (
            round_confidence(sum(er.verification.confidence for er in event_results) / len(event_results))
            if event_results
            else 0.0
        )
        corrections = [er.correction for er in event_results if er.correction is not None]

        summary = VerificationSummary(
            last_run=utc_now_iso(),
            events_checked=len(group.events),
            verified=counts[VerificationStatus.VERIFIED],
            plausible=counts[VerificationStatus.PLAUSIBLE],
            unverified=counts[VerificationStatus.UNVERIFIED],
            overall_confidence=overall,
        )
        logger.info(
            "group_verified",
            file=group.file,
            events=summary.events_checked,
            verified=summary.verified,
            plausible=summary.plausible,
            unverified=summary.unverified,
            overall_confidence=overall,
            corrections=len(corrections),
        )
        return ConfigVerificationResult(
            file=group.file,
            sport=group.sport,
            events_checked=summary.events_checked,
            verified=summary.verified,
            plausible=summary.plausible,
            unverified=summary.unverified,
            overall_confidence=overall,
            event_results=event_results,
            corrections=corrections,
            verification_summary=summary,
        )
