"""
Tests for the per-group verification engine: chain order, web-search escalation,
correction selection and group summaries.

Run: pytest tests/test_engine.py -v
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from helpers import NOW, make_group
from shared.models.domain import Correction, VerifierResult
from shared.models.enums import VerificationStatus, VerifierSource
from schedule_verifier.config import VerifierSettings
from schedule_verifier.engine import ScheduleVerificationEngine, select_correction
from schedule_verifier.sources.base import EvidenceBundle


def _engine(search: Optional[AsyncMock] = None, budget: int = 3, **evidence: Any) -> ScheduleVerificationEngine:
    evidence.setdefault("now", NOW)
    return ScheduleVerificationEngine(
        EvidenceBundle(**evidence),
        search=search,
        settings=VerifierSettings(web_search_budget=budget),
    )


# ── select_correction ───────────────────────────────────────────────────

def _with_correction(
    source: VerifierSource,
    confidence: float,
    new_value: str,
    result_confidence: float = 0.7,
) -> VerifierResult:
    return VerifierResult(
        source=source,
        confidence=result_confidence,
        correction=Correction(old_value="x", new_value=new_value, confidence=confidence),
    )


class TestSelectCorrection:

    def test_most_confident_result_wins(self) -> None:
        chosen = select_correction([
            _with_correction(VerifierSource.LIVE_API, 0.9, "a", result_confidence=0.7),
            _with_correction(VerifierSource.WEB_SEARCH, 0.75, "b", result_confidence=0.85),
        ])
        assert chosen is not None and chosen.correction.new_value == "b"

    def test_first_wins_ties(self) -> None:
        chosen = select_correction([
            _with_correction(VerifierSource.LIVE_API, 0.8, "a"),
            _with_correction(VerifierSource.WEB_SEARCH, 0.9, "b"),
        ])
        assert chosen is not None and chosen.source == VerifierSource.LIVE_API

    def test_low_confidence_result_cannot_propose(self) -> None:
        chosen = select_correction([
            _with_correction(VerifierSource.SPORT_DATA, 0.8, "a", result_confidence=0.5),
            _with_correction(VerifierSource.WEB_SEARCH, 0.9, "b", result_confidence=0.3),
        ])
        assert chosen is None

    def test_correction_threshold_is_exclusive(self) -> None:
        assert select_correction([_with_correction(VerifierSource.LIVE_API, 0.7, "a")]) is None

    def test_winner_below_threshold_yields_nothing(self) -> None:
        chosen = select_correction([
            _with_correction(VerifierSource.LIVE_API, 0.9, "a", result_confidence=0.7),
            _with_correction(VerifierSource.WEB_SEARCH, 0.6, "b", result_confidence=0.9),
        ])
        assert chosen is None

    def test_none_without_corrections(self) -> None:
        assert select_correction([VerifierResult(source=VerifierSource.STATIC, confidence=0.4)]) is None


# ── verify_group ────────────────────────────────────────────────────────

class TestVerifyGroup:

    @pytest.mark.asyncio
    async def test_chain_order(self) -> None:
        group = make_group([{"title": "Biathlon Sprint", "time": "2026-02-15T10:00:00Z"}], sport="biathlon")
        result = await _engine().verify_group(group)
        sources = [r.source for r in result.event_results[0].verifier_results]
        assert sources == [
            VerifierSource.STATIC,
            VerifierSource.LIVE_API,
            VerifierSource.RSS_CROSS_REF,
            VerifierSource.SPORT_DATA,
        ]

    @pytest.mark.asyncio
    async def test_single_verified_event(self) -> None:
        group = make_group(
            [{"title": "Biathlon Sprint", "time": "2026-02-15T10:00:00Z"}],
            sport="biathlon",
            startDate="2026-02-06",
            endDate="2026-02-22",
        )
        engine = _engine(live_events={"biathlon": [{"name": "Biathlon Sprint", "date": "2026-02-15T10:00:00Z"}]})
        result = await engine.verify_group(group)
        assert result.file == "test.json"
        assert result.events_checked == 1
        assert result.verified == 1
        # static (0.4) and live (0.9) both verify: 0.9 + 0.1
        assert result.event_results[0].verification.confidence == 1.0
        assert result.verification_summary.events_checked == 1
        assert result.event_results[0].verification.last_verified

    @pytest.mark.asyncio
    async def test_overall_confidence_is_mean(self) -> None:
        # The matched event is long past, so static does not corroborate it.
        group = make_group(
            [
                {"title": "Biathlon Sprint", "time": "2026-02-15T10:00:00Z"},
                {"title": "Biathlon Relay"},
            ],
            sport="biathlon",
        )
        engine = _engine(
            live_events={"biathlon": [{"name": "Biathlon Sprint", "date": "2026-02-15T10:00:00Z"}]},
            now=datetime(2026, 3, 20, tzinfo=timezone.utc),
        )
        result = await engine.verify_group(group)
        first, second = result.event_results
        assert (first.verification.confidence, first.verification.status) == (0.9, VerificationStatus.VERIFIED)
        assert (second.verification.confidence, second.verification.status) == (0.0, VerificationStatus.UNVERIFIED)
        assert result.overall_confidence == 0.45
        assert (result.verified, result.plausible, result.unverified) == (1, 0, 1)

    @pytest.mark.asyncio
    async def test_empty_group(self) -> None:
        result = await _engine().verify_group(make_group([]))
        assert result.events_checked == 0
        assert result.overall_confidence == 0.0
        assert result.verification_summary.overall_confidence == 0.0

    @pytest.mark.asyncio
    async def test_group_correction_from_live_mismatch(self) -> None:
        group = make_group([{"title": "Biathlon Mixed Relay", "time": "2026-02-15T10:00:00Z"}], sport="biathlon")
        engine = _engine(
            live_events={"biathlon": [{"name": "Biathlon Mixed Relay", "date": "2026-02-15T15:00:00Z"}]},
            sport_data={"biathlon": {"tournaments": [{"events": [
                {"title": "Biathlon Mixed Relay", "time": "2026-02-15T05:00:00Z"},
            ]}]}},
        )
        result = await engine.verify_group(group)
        assert len(result.corrections) == 1
        correction = result.corrections[0]
        assert correction.event == "Biathlon Mixed Relay"
        assert correction.field == "time"
        assert correction.old_value == "2026-02-15T10:00:00Z"
        # sport data disagrees too, but its 0.5 result confidence cannot propose
        assert correction.new_value == "2026-02-15T15:00:00Z"
        assert result.event_results[0].verification.status == VerificationStatus.VERIFIED

    @pytest.mark.asyncio
    async def test_sport_data_alone_never_corrects(self) -> None:
        group = make_group([{"title": "Chess Final Round", "time": "2026-02-15T10:00:00Z"}], sport="chess")
        engine = _engine(sport_data={"chess": {"tournaments": [{"events": [
            {"title": "Chess Final Round", "time": "2026-02-15T15:00:00Z"},
        ]}]}})
        result = await engine.verify_group(group)
        sport = next(
            r for r in result.event_results[0].verifier_results if r.source == VerifierSource.SPORT_DATA
        )
        assert sport.correction is not None
        assert sport.confidence == 0.5
        assert result.corrections == []
        assert result.event_results[0].correction is None


# ── Web-search escalation ───────────────────────────────────────────────

class TestWebSearchEscalation:

    @pytest.mark.asyncio
    async def test_unverified_event_escalates(self) -> None:
        search = AsyncMock(return_value={"verified": True, "confidence": 0.85, "details": "Official site"})
        group = make_group(
            [{"title": "Biathlon Sprint", "time": "2026-02-15T10:00:00Z"}],
            sport="biathlon",
            startDate="2026-02-16",
            endDate="2026-02-22",
        )
        result = await _engine(search).verify_group(group)
        search.assert_awaited_once()
        meta = result.event_results[0].verification
        assert meta.confidence == 0.85
        assert meta.status == VerificationStatus.VERIFIED
        assert meta.sources == [VerifierSource.STATIC, VerifierSource.WEB_SEARCH]
        assert len(result.event_results[0].verifier_results) == 5

    @pytest.mark.asyncio
    async def test_plausible_event_does_not_escalate(self) -> None:
        search = AsyncMock(return_value={"verified": True})
        group = make_group([{"title": "Biathlon Sprint", "time": "2026-02-15T10:00:00Z"}])
        result = await _engine(search).verify_group(group)
        search.assert_not_awaited()
        assert result.plausible == 1

    @pytest.mark.asyncio
    async def test_disallowed(self) -> None:
        search = AsyncMock(return_value={"verified": True})
        group = make_group([{"title": "Biathlon Sprint"}])
        await _engine(search).verify_group(group, allow_web_search=False)
        search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_budget_shared_across_groups(self) -> None:
        search = AsyncMock(return_value=None)
        engine = _engine(search, budget=2)
        for name in ("a.json", "b.json"):
            group = make_group([{"title": "X One"}, {"title": "X Two"}], file=name)
            await engine.verify_group(group)
        assert search.await_count == 2
        assert engine.web_search_budget.remaining == 0

    @pytest.mark.asyncio
    async def test_search_failure_keeps_run_going(self) -> None:
        search = AsyncMock(side_effect=TimeoutError("slow"))
        group = make_group([{"title": "Mystery Event"}, {"title": "Other Event"}])
        result = await _engine(search).verify_group(group)
        assert result.unverified == 2
        web = result.event_results[0].verifier_results[-1]
        assert web.source == VerifierSource.WEB_SEARCH
        assert web.details == "Web search failed: slow"
