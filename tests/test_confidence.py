"""
Unit tests for confidence aggregation and status classification.

Run: pytest tests/test_confidence.py -v
"""
from __future__ import annotations

import pytest

from shared.models.domain import VerifierResult
from shared.models.enums import VerificationStatus, VerifierSource
from schedule_verifier.confidence import aggregate_confidence, classify_status, round_confidence


def _r(source: VerifierSource, confidence: float, verified: bool = False) -> VerifierResult:
    return VerifierResult(source=source, confidence=confidence, verified=verified)


# ── Status thresholds ───────────────────────────────────────────────────

@pytest.mark.parametrize(
    "confidence,status",
    [
        (0.70, VerificationStatus.VERIFIED),
        (0.699, VerificationStatus.PLAUSIBLE),
        (0.30, VerificationStatus.PLAUSIBLE),
        (0.299, VerificationStatus.UNVERIFIED),
        (0.0, VerificationStatus.UNVERIFIED),
        (1.0, VerificationStatus.VERIFIED),
    ],
)
def test_classify_boundaries(confidence: float, status: VerificationStatus) -> None:
    assert classify_status(confidence) == status


def test_round_half_up() -> None:
    assert round_confidence(0.125) == 0.13
    assert round_confidence(0.9000000000000001) == 0.9


# ── aggregate_confidence ────────────────────────────────────────────────

class TestAggregateConfidence:

    def test_empty(self) -> None:
        verdict = aggregate_confidence([])
        assert verdict.confidence == 0.0
        assert verdict.status == VerificationStatus.UNVERIFIED
        assert verdict.sources == []

    def test_none(self) -> None:
        assert aggregate_confidence(None).status == VerificationStatus.UNVERIFIED

    def test_malformed_entries_ignored(self) -> None:
        verdict = aggregate_confidence([None, {"confidence": 0.9}, _r(VerifierSource.STATIC, 0.4, True)])
        assert verdict.confidence == 0.4
        assert verdict.sources == [VerifierSource.STATIC]

    def test_best_single_source(self) -> None:
        verdict = aggregate_confidence([
            _r(VerifierSource.STATIC, 0.1),
            _r(VerifierSource.LIVE_API, 0.7),
            _r(VerifierSource.RSS_CROSS_REF, 0.2),
        ])
        assert verdict.confidence == 0.7
        assert verdict.status == VerificationStatus.VERIFIED

    def test_corroboration_bonus(self) -> None:
        verdict = aggregate_confidence([
            _r(VerifierSource.RSS_CROSS_REF, 0.5, True),
            _r(VerifierSource.LIVE_API, 0.8, True),
        ])
        assert verdict.confidence == 0.9
        assert verdict.status == VerificationStatus.VERIFIED

    def test_bonus_capped(self) -> None:
        verdict = aggregate_confidence([
            _r(VerifierSource.LIVE_API, 0.95, True),
            _r(VerifierSource.SPORT_DATA, 0.9, True),
            _r(VerifierSource.WEB_SEARCH, 0.95, True),
        ])
        assert verdict.confidence == 1.0

    def test_single_verified_gets_no_bonus(self) -> None:
        verdict = aggregate_confidence([_r(VerifierSource.STATIC, 0.4, True), _r(VerifierSource.LIVE_API, 0.3)])
        assert verdict.confidence == 0.4
        assert verdict.status == VerificationStatus.PLAUSIBLE

    def test_classified_before_rounding(self) -> None:
        verdict = aggregate_confidence([_r(VerifierSource.WEB_SEARCH, 0.699)])
        assert verdict.confidence == 0.7
        assert verdict.status == VerificationStatus.PLAUSIBLE

    def test_sources_ordered_and_positive_only(self) -> None:
        verdict = aggregate_confidence([
            _r(VerifierSource.STATIC, 0.1),
            _r(VerifierSource.LIVE_API, 0.0),
            _r(VerifierSource.RSS_CROSS_REF, 0.2),
            _r(VerifierSource.SPORT_DATA, 0.5),
        ])
        assert verdict.sources == [
            VerifierSource.STATIC,
            VerifierSource.RSS_CROSS_REF,
            VerifierSource.SPORT_DATA,
        ]

    def test_results_confidence_bounded(self) -> None:
        assert VerifierResult(source=VerifierSource.STATIC, confidence=1.7).confidence == 1.0
        assert VerifierResult(source=VerifierSource.STATIC, confidence=-3).confidence == 0.0
        assert VerifierResult(source=VerifierSource.STATIC, confidence="n/a").confidence == 0.0
