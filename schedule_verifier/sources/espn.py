"""
ESPN scoreboard fetcher: the live-score evidence for a run.
Uses the public structured JSON endpoints; no HTML scraping. Fetched once per run,
before any event is verified.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from shared.models.enums import SportCategory
from shared.utils.logging import get_logger
from shared.utils.http_client import ScoreboardHTTPClient

from schedule_verifier.circuit_breaker import CircuitBreaker

logger = get_logger(__name__)

ESPN_BASE = "https://site.api.espn.com/apis/site/v2/sports"

ESPN_SCOREBOARD_URLS: dict[str, str] = {
    SportCategory.CROSS_COUNTRY.value: f"{ESPN_BASE}/skiing/cross-country/scoreboard",
    SportCategory.BIATHLON.value: f"{ESPN_BASE}/skiing/biathlon/scoreboard",
    SportCategory.SKI_JUMPING.value: f"{ESPN_BASE}/skiing/ski-jumping/scoreboard",
    SportCategory.ALPINE_SKIING.value: f"{ESPN_BASE}/skiing/alpine/scoreboard",
    SportCategory.NORDIC_COMBINED.value: f"{ESPN_BASE}/skiing/nordic-combined/scoreboard",
    SportCategory.FOOTBALL.value: f"{ESPN_BASE}/soccer/eng.1/scoreboard",
    SportCategory.GOLF.value: f"{ESPN_BASE}/golf/pga/scoreboard",
    SportCategory.TENNIS.value: f"{ESPN_BASE}/tennis/atp/scoreboard",
    SportCategory.F1.value: f"{ESPN_BASE}/racing/f1/scoreboard",
}


def _normalize_event(event: Any) -> Optional[dict[str, Any]]:
    """Reduce a scoreboard event to {name, date}; the rest of the payload is unused."""
    if not isinstance(event, dict):
        return None
    name = event.get("name") or event.get("shortName") or ""
    date = event.get("date")
    if not date:
        comps = event.get("competitions") or [{}]
        date = comps[0].get("date") if isinstance(comps[0], dict) else None
    if not name and not date:
        return None
    return {"name": str(name), "date": date}


async def fetch_live_events(
    client: ScoreboardHTTPClient,
    breaker: Optional[CircuitBreaker] = None,
    urls: Optional[dict[str, str]] = None,
) -> dict[str, list[dict[str, Any]]]:
    """
    Fetch every scoreboard. Returns {sport_category: [{name, date}, ...]}.
    A failing sport is logged and left out; nothing is raised.
    """
    breaker = breaker or CircuitBreaker()
    live_events: dict[str, list[dict[str, Any]]] = {}

    for sport, url in (urls or ESPN_SCOREBOARD_URLS).items():
        if not breaker.allow_request(url):
            logger.warning("live_score_circuit_open", sport=sport, domain=breaker.domain(url))
            continue
        try:
            data = await client.get_json(url, sport=sport)
        except (httpx.HTTPError, ValueError) as e:
            breaker.record_failure(url)
            logger.warning("live_score_fetch_failed", sport=sport, url=url, error=str(e))
            continue

        breaker.record_success(url)
        events = data.get("events") if isinstance(data, dict) else None
        if not isinstance(events, list):
            logger.debug("live_score_no_events", sport=sport)
            continue
        live_events[sport] = [e for e in (_normalize_event(ev) for ev in events) if e]
        logger.debug("live_score_fetched", sport=sport, events=len(live_events[sport]))

    return live_events
