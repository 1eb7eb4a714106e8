"""
Async HTTP client wrapper for live-score scoreboard requests.
Includes retry logic, timeout management, and metrics collection.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, Optional

import httpx

from shared.config import get_settings
from shared.utils.logging import get_logger
from shared.utils.metrics import LIVE_SCORE_LATENCY, LIVE_SCORE_REQUESTS

logger = get_logger(__name__)


class ScoreboardHTTPClient:
    """
    Async JSON client for public scoreboard endpoints.
    Retries timeouts, 429 and 5xx responses; records metrics per request.
    """

    def __init__(
        self,
        timeout_s: float | None = None,
        max_retries: int = 2,
        retry_base_delay_s: float = 0.5,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._timeout = timeout_s or settings.request_timeout_s
        self._max_retries = max(1, max_retries)
        self._retry_base_delay = retry_base_delay_s
        self._headers = headers or {"Accept": "application/json"}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        self._client = httpx.AsyncClient(
            headers=self._headers,
            timeout=httpx.Timeout(self._timeout, connect=5.0),
            follow_redirects=True,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ScoreboardHTTPClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_json(self, url: str, sport: str = "unknown") -> Any:
        """
        GET a JSON document with retry and metrics.

        Raises:
            httpx.HTTPStatusError: On non-retryable HTTP errors or exhausted retries.
            httpx.TimeoutException: If all retries time out.
            ValueError: If the body is not JSON.
        """
        if not self._client:
            raise RuntimeError("ScoreboardHTTPClient not started. Call start() first.")

        last_exc: Optional[Exception] = None
        for attempt in range(1, self._max_retries + 1):
            start_time = time.perf_counter()
            status = "unknown"
            try:
                resp = await self._client.get(url)
                status = str(resp.status_code)

                if resp.status_code == 429 or resp.status_code >= 500:
                    logger.warning(
                        "live_score_retryable_status",
                        url=url,
                        status=resp.status_code,
                        attempt=attempt,
                    )
                    if attempt < self._max_retries:
                        retry_after = resp.headers.get("Retry-After")
                        delay = float(retry_after) if retry_after and retry_after.isdigit() else self._retry_base_delay * attempt
                        await asyncio.sleep(min(delay, 5.0))
                        continue

                resp.raise_for_status()
                return resp.json()

            except httpx.TimeoutException as exc:
                status = "timeout"
                last_exc = exc
                logger.warning("live_score_timeout", url=url, attempt=attempt)
                if attempt < self._max_retries:
                    await asyncio.sleep(self._retry_base_delay * attempt)
                    continue

            except httpx.HTTPStatusError as exc:
                last_exc = exc
                logger.error(
                    "live_score_http_error",
                    url=url,
                    status=exc.response.status_code,
                    attempt=attempt,
                )
                raise

            finally:
                LIVE_SCORE_REQUESTS.labels(sport=sport, status=status).inc()
                LIVE_SCORE_LATENCY.labels(sport=sport).observe(time.perf_counter() - start_time)

        if last_exc:
            raise last_exc
        raise RuntimeError(f"Scoreboard request failed after {self._max_retries} attempts")
