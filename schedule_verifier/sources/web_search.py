"""
Web-search verifier.

The most expensive source: the engine only escalates here for events the cheaper
verifiers left unverified, and a per-run budget caps how many times the injected
search callback is awaited. Callback failures degrade to confidence 0.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import ValidationError

from shared.models.domain import Correction, Event, VerifierResult
from shared.models.enums import VerifierSource
from shared.utils.logging import get_logger
from shared.utils.metrics import WEB_SEARCHES

from schedule_verifier.config import WEB_SEARCH_INCONCLUSIVE_DEFAULT, WEB_SEARCH_VERIFIED_DEFAULT

logger = get_logger(__name__)

SearchCallback = Callable[[Event], Awaitable[Optional[Mapping[str, Any]]]]


class WebSearchBudget:
    """Count-based cap on search callback invocations for one run."""

    def __init__(self, limit: int) -> None:
        self.limit = max(0, limit)
        self.used = 0

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    def try_consume(self) -> bool:
        if self.used >= self.limit:
            return False
        self.used += 1
        return True


def _parse_correction(raw: Any, event: Event) -> Optional[Correction]:
    if not isinstance(raw, Mapping):
        return None
    payload = dict(raw)
    if "oldValue" not in payload and "old_value" not in payload:
        payload["oldValue"] = event.time
    try:
        return Correction.model_validate(payload)
    except ValidationError as e:
        logger.warning("web_search_correction_invalid", event=event.title, error=str(e))
        return None


class WebSearchVerifier:
    """Async verifier wrapping the injected search callback."""

    def __init__(self, search: Optional[SearchCallback], budget: WebSearchBudget) -> None:
        self._search = search
        self._budget = budget

    @property
    def source(self) -> VerifierSource:
        return VerifierSource.WEB_SEARCH

    @property
    def available(self) -> bool:
        return self._search is not None

    @property
    def budget(self) -> WebSearchBudget:
        return self._budget

    def _result(self, **fields: Any) -> VerifierResult:
        return VerifierResult(source=self.source, **fields)

    async def verify(self, event: Event) -> VerifierResult:
        if self._search is None:
            return self._result(details="No web search function available")
        if not self._budget.try_consume():
            WEB_SEARCHES.labels(outcome="budget_exhausted").inc()
            return self._result(
                details=f"Web search budget exhausted ({self._budget.limit}/run)",
            )

        try:
            outcome = await self._search(event)
        except Exception as e:
            WEB_SEARCHES.labels(outcome="error").inc()
            logger.warning("web_search_failed", event=event.title, error=str(e))
            return self._result(details=f"Web search failed: {e}")

        if outcome is None:
            WEB_SEARCHES.labels(outcome="empty").inc()
            return self._result(details="Web search returned no results")
        if not isinstance(outcome, Mapping):
            WEB_SEARCHES.labels(outcome="error").inc()
            logger.warning("web_search_unexpected_payload", event=event.title, payload_type=type(outcome).__name__)
            return self._result(details="Web search returned an unexpected payload")

        confidence = outcome.get("confidence")
        # zero counts as unset
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)) or not confidence:
            confidence = None
        if outcome.get("verified"):
            WEB_SEARCHES.labels(outcome="verified").inc()
            return self._result(
                verified=True,
                confidence=confidence or WEB_SEARCH_VERIFIED_DEFAULT,
                details=str(outcome.get("details") or "Verified via web search"),
                correction=_parse_correction(outcome.get("correction"), event),
            )

        WEB_SEARCHES.labels(outcome="inconclusive").inc()
        return self._result(
            confidence=confidence or WEB_SEARCH_INCONCLUSIVE_DEFAULT,
            details=str(outcome.get("details") or "Web search returned inconclusive results"),
            correction=_parse_correction(outcome.get("correction"), event),
        )
