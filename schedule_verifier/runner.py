"""
Full verification run: load evidence, verify every curated group, write results back.

Order matters for crash safety: group files are reconciled first, then history is
saved, then the health report merged. Each write replaces its file atomically, so an
interrupted run leaves every file either untouched or fully updated.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.models.domain import (
    ConfigVerificationResult,
    HealthIssue,
    VerificationHints,
    VerificationHistory,
    VerificationRun,
)
from shared.utils.dates import utc_now
from shared.utils.http_client import ScoreboardHTTPClient
from shared.utils.logging import get_logger
from shared.utils.metrics import RUN_DURATION

from schedule_verifier.circuit_breaker import CircuitBreaker
from schedule_verifier.config import VerifierSettings, get_verifier_settings
from schedule_verifier.engine import ScheduleVerificationEngine
from schedule_verifier.evidence import load_curated_groups, load_rss_digest, load_sport_data
from schedule_verifier.health import check_group_dates, merge_health_report, mismatch_issues
from schedule_verifier.hints import build_verification_hints
from schedule_verifier.history import append_run, build_run_record, load_history, save_history
from schedule_verifier.reconciliation import ReconcileOutcome, reconcile_group_file
from schedule_verifier.sources.base import EvidenceBundle
from schedule_verifier.sources.espn import fetch_live_events
from schedule_verifier.sources.web_search import SearchCallback

logger = get_logger(__name__)


@dataclass
class RunOutcome:
    run: VerificationRun
    history: VerificationHistory
    results: list[ConfigVerificationResult]
    issues: list[HealthIssue] = field(default_factory=list)
    hints: VerificationHints = field(default_factory=VerificationHints)
    reconciled: list[ReconcileOutcome] = field(default_factory=list)


async def load_live_events(settings: Settings, verifier_settings: VerifierSettings) -> dict[str, list[dict[str, Any]]]:
    async with ScoreboardHTTPClient(
        timeout_s=settings.request_timeout_s,
        max_retries=verifier_settings.retry_max_attempts,
        retry_base_delay_s=verifier_settings.retry_base_delay_s,
    ) as client:
        return await fetch_live_events(client, CircuitBreaker(verifier_settings))


async def run_verification(
    settings: Optional[Settings] = None,
    verifier_settings: Optional[VerifierSettings] = None,
    search: Optional[SearchCallback] = None,
    dry_run: bool = False,
    offline: bool = False,
    live_events: Optional[dict[str, list[dict[str, Any]]]] = None,
    now: Optional[datetime] = None,
) -> RunOutcome:
    """
    Verify all curated groups once.

    live_events bypasses the scoreboard fetch when given; offline skips it entirely.
    With dry_run nothing is written to disk.
    """
    settings = settings or get_settings()
    verifier_settings = verifier_settings or get_verifier_settings()
    started = time.perf_counter()

    config_dir = Path(settings.config_dir)
    groups = load_curated_groups(config_dir)
    if live_events is None:
        if offline or not settings.live_scores_enabled:
            live_events = {}
        else:
            live_events = await load_live_events(settings, verifier_settings)

    evidence = EvidenceBundle(
        live_events=live_events,
        rss_digest=load_rss_digest(settings.data_dir),
        sport_data=load_sport_data(settings.data_dir),
        now=now or utc_now(),
    )
    history = load_history(settings.history_path)
    logger.info(
        "verification_run_started",
        groups=len(groups),
        live_sports=len(evidence.live_events),
        sport_data=len(evidence.sport_data),
        rss=evidence.rss_digest is not None,
        history_runs=len(history.runs),
        dry_run=dry_run,
        web_search=search is not None,
    )

    engine = ScheduleVerificationEngine(evidence, search=search, settings=verifier_settings)
    results: list[ConfigVerificationResult] = []
    issues: list[HealthIssue] = []
    for group in groups:
        result = await engine.verify_group(group, allow_web_search=search is not None)
        results.append(result)
        issues.extend(check_group_dates(group))
        issues.extend(mismatch_issues(result))

    reconciled: list[ReconcileOutcome] = []
    if not dry_run:
        for result in results:
            reconciled.append(reconcile_group_file(
                config_dir / result.file,
                result,
                verifier_settings.needs_research_threshold,
            ))

    run = build_run_record(results)
    history = append_run(history, run, verifier_settings.max_history_runs)
    if not dry_run:
        save_history(settings.history_path, history)
        merge_health_report(settings.health_report_path, run, issues)

    hints = build_verification_hints(history)
    elapsed = time.perf_counter() - started
    RUN_DURATION.observe(elapsed)
    logger.info(
        "verification_run_complete",
        configs=run.configs_checked,
        events=run.events_checked,
        verified=sum(r.verified for r in results),
        plausible=sum(r.plausible for r in results),
        unverified=sum(r.unverified for r in results),
        corrections=sum(len(r.corrections) for r in results),
        issues=len(issues),
        web_searches=engine.web_search_budget.used,
        hints=len(hints.hints),
        elapsed_s=round(elapsed, 3),
    )
    return RunOutcome(
        run=run,
        history=history,
        results=results,
        issues=issues,
        hints=hints,
        reconciled=reconciled,
    )
