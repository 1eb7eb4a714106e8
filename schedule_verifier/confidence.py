"""
Confidence aggregation for one event's verifier results.
Best single source wins; two or more positive verifications add a corroboration bonus.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from shared.models.domain import AggregateVerdict, VerifierResult
from shared.models.enums import VerificationStatus, VerifierSource

from schedule_verifier.config import (
    CORROBORATION_BONUS,
    PLAUSIBLE_THRESHOLD,
    VERIFIED_THRESHOLD,
)


def round_confidence(value: float) -> float:
    """Round half-up to two decimals (0.125 -> 0.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def classify_status(confidence: float) -> VerificationStatus:
    if confidence >= VERIFIED_THRESHOLD:
        return VerificationStatus.VERIFIED
    if confidence >= PLAUSIBLE_THRESHOLD:
        return VerificationStatus.PLAUSIBLE
    return VerificationStatus.UNVERIFIED


def aggregate_confidence(results: Optional[Iterable[Any]]) -> AggregateVerdict:
    """
    Combine verifier results into a single verdict.

    Entries that are not VerifierResults are ignored. Status is classified on the
    unrounded confidence, so 0.699 stays "plausible" even though it rounds to 0.70.
    """
    valid = [r for r in (results or []) if isinstance(r, VerifierResult)]
    if not valid:
        return AggregateVerdict(confidence=0.0, status=VerificationStatus.UNVERIFIED, sources=[])

    confidence = max(r.confidence for r in valid)
    if sum(1 for r in valid if r.verified) >= 2:
        confidence = min(confidence + CORROBORATION_BONUS, 1.0)

    sources: list[VerifierSource] = []
    for r in valid:
        if r.confidence > 0 and r.source not in sources:
            sources.append(r.source)

    return AggregateVerdict(
        confidence=round_confidence(confidence),
        status=classify_status(confidence),
        sources=sources,
    )
