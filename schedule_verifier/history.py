"""
Verification history: a capped, append-only log of run summaries.
The history is passed in and returned as a value; only load/save touch disk.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from shared.models.domain import (
    ConfigVerificationResult,
    RunResultSummary,
    VerificationHistory,
    VerificationRun,
)
from shared.utils.dates import utc_now_iso
from shared.utils.logging import get_logger
from shared.utils.storage import read_json_if_exists, write_json_atomic

logger = get_logger(__name__)

DEFAULT_MAX_RUNS = 50


def load_history(path: Path) -> VerificationHistory:
    """
    Read history from disk. Missing, unreadable or malformed files give an empty history.
    Runs are validated one by one; a malformed run is dropped and the rest kept.
    """
    raw = read_json_if_exists(path)
    if raw is None:
        return VerificationHistory()
    if not isinstance(raw, dict) or not isinstance(raw.get("runs", []), list):
        logger.warning("history_load_failed", path=str(path), error="unexpected document shape")
        return VerificationHistory()

    runs: list[VerificationRun] = []
    for index, entry in enumerate(raw.get("runs", [])):
        try:
            runs.append(VerificationRun.model_validate(entry))
        except ValidationError as e:
            logger.warning("history_run_invalid", path=str(path), index=index, error=str(e))
    version = raw.get("version")
    if isinstance(version, int) and not isinstance(version, bool):
        return VerificationHistory(version=version, runs=runs)
    return VerificationHistory(runs=runs)


def append_run(
    history: VerificationHistory,
    run: VerificationRun,
    max_runs: int = DEFAULT_MAX_RUNS,
) -> VerificationHistory:
    runs = [*history.runs, run]
    if max_runs > 0 and len(runs) > max_runs:
        runs = runs[-max_runs:]
    return history.model_copy(update={"runs": runs})


def save_history(path: Path, history: VerificationHistory) -> None:
    write_json_atomic(path, history.to_json_dict())
    logger.debug("history_saved", path=str(path), runs=len(history.runs))


def build_run_record(
    results: Sequence[ConfigVerificationResult],
    timestamp: Optional[str] = None,
) -> VerificationRun:
    """Summarize one run's group results for the history log."""
    return VerificationRun(
        timestamp=timestamp or utc_now_iso(),
        configs_checked=len(results),
        events_checked=sum(r.events_checked for r in results),
        results=[
            RunResultSummary(
                file=r.file,
                sport=r.sport,
                events_checked=r.events_checked,
                verified=r.verified,
                plausible=r.plausible,
                unverified=r.unverified,
                overall_confidence=r.overall_confidence,
                corrections=[c.to_json_dict() for c in r.corrections],
            )
            for r in results
        ],
    )
