"""
Per-domain circuit breaker for scoreboard fetches.
Opens after N consecutive failures; after the recovery window one probe is let through.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlparse

from shared.utils.logging import get_logger

from schedule_verifier.config import VerifierSettings, get_verifier_settings

logger = get_logger(__name__)


class CircuitState:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class _DomainCircuit:
    state: str = CircuitState.CLOSED
    failures: int = 0
    opened_at: float = 0.0


class CircuitBreaker:

    def __init__(
        self,
        settings: Optional[VerifierSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = settings or get_verifier_settings()
        self._threshold = max(1, settings.circuit_failure_threshold)
        self._recovery_s = settings.circuit_recovery_s
        self._clock = clock
        self._circuits: dict[str, _DomainCircuit] = {}

    @staticmethod
    def domain(url: str) -> str:
        return urlparse(url).netloc or "unknown"

    def _circuit(self, url: str) -> _DomainCircuit:
        return self._circuits.setdefault(self.domain(url), _DomainCircuit())

    def state(self, url: str) -> str:
        return self._circuit(url).state

    def allow_request(self, url: str) -> bool:
        circuit = self._circuit(url)
        if circuit.state != CircuitState.OPEN:
            return True
        if self._clock() - circuit.opened_at >= self._recovery_s:
            circuit.state = CircuitState.HALF_OPEN
            logger.info("circuit_half_open", domain=self.domain(url))
            return True
        return False

    def record_success(self, url: str) -> None:
        circuit = self._circuit(url)
        if circuit.state == CircuitState.HALF_OPEN:
            logger.info("circuit_closed", domain=self.domain(url))
        circuit.state = CircuitState.CLOSED
        circuit.failures = 0

    def record_failure(self, url: str) -> None:
        circuit = self._circuit(url)
        circuit.failures += 1
        if circuit.state == CircuitState.HALF_OPEN or circuit.failures >= self._threshold:
            circuit.state = CircuitState.OPEN
            circuit.opened_at = self._clock()
            logger.warning(
                "circuit_open",
                domain=self.domain(url),
                failures=circuit.failures,
                threshold=self._threshold,
            )
