"""
Lightweight metrics collection for the schedule verifier.
Wraps prometheus_client; exposition is opt-in via settings.
"""
from __future__ import annotations

from prometheus_client import Counter, Histogram, Info, start_http_server

from shared.config import get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
VERIFIER_RESULTS = Counter(
    "sv_verifier_results_total",
    "Verifier invocations by source and outcome",
    ["source", "verified"],
)
EVENT_STATUS = Counter(
    "sv_event_status_total",
    "Aggregate event verdicts by status",
    ["status"],
)
CORRECTIONS_PROPOSED = Counter(
    "sv_corrections_proposed_total",
    "Group-level corrections eligible for automatic application",
    ["source"],
)
CORRECTIONS_APPLIED = Counter(
    "sv_corrections_applied_total",
    "Corrections written back to curated group files",
)
WEB_SEARCHES = Counter(
    "sv_web_searches_total",
    "Web-search verifier outcomes",
    ["outcome"],
)
LIVE_SCORE_REQUESTS = Counter(
    "sv_live_score_requests_total",
    "Live-score scoreboard HTTP requests",
    ["sport", "status"],
)
GROUPS_FLAGGED = Counter(
    "sv_groups_flagged_total",
    "Groups flagged needsResearch",
)

# ── Histograms ──────────────────────────────────────────────────────────
LIVE_SCORE_LATENCY = Histogram(
    "sv_live_score_latency_seconds",
    "Live-score request latency in seconds",
    ["sport"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
RUN_DURATION = Histogram(
    "sv_run_duration_seconds",
    "Wall-clock duration of a full verification run",
    buckets=(0.5, 1, 2.5, 5, 10, 20, 30, 60),
)

# ── Info ────────────────────────────────────────────────────────────────
SERVICE_INFO = Info("sv_service", "Service build information")


def start_metrics_server(port: int | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
