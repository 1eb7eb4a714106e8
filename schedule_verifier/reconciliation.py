"""
Reconciliation: write a group's verification outcome back onto its curated file.
Applies high-confidence time corrections, stamps the verificationSummary and flags
groups that need re-research. Files are edited as raw JSON so unknown keys survive.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from shared.models.domain import ConfigVerificationResult, EventCorrection
from shared.utils.logging import get_logger
from shared.utils.metrics import CORRECTIONS_APPLIED, GROUPS_FLAGGED
from shared.utils.storage import read_json_if_exists, write_json_atomic

logger = get_logger(__name__)

DEFAULT_RESEARCH_THRESHOLD = 0.5


@dataclass
class ReconcileOutcome:
    file: str
    corrections_applied: int = 0
    flagged: bool = False
    written: bool = False


def apply_correction(group_doc: dict[str, Any], correction: EventCorrection) -> bool:
    """
    Replace the time of every event matching the correction's title and old value.
    Returns True if anything changed; applying the same correction twice is a no-op.
    """
    events = group_doc.get("events")
    if not isinstance(events, list):
        return False
    changed = False
    for event in events:
        if not isinstance(event, dict):
            continue
        if event.get("title") == correction.event and event.get("time") == correction.old_value:
            event["time"] = correction.new_value
            changed = True
    return changed


def needs_research(result: ConfigVerificationResult, threshold: float = DEFAULT_RESEARCH_THRESHOLD) -> bool:
    if result.events_checked <= 0:
        return False
    return result.unverified / result.events_checked > threshold


def reconcile_group_file(
    path: Path,
    result: ConfigVerificationResult,
    threshold: float = DEFAULT_RESEARCH_THRESHOLD,
) -> ReconcileOutcome:
    """Apply corrections, summary and research flag to one group file."""
    outcome = ReconcileOutcome(file=result.file)
    doc: Optional[Any] = read_json_if_exists(path)
    if not isinstance(doc, dict):
        logger.warning("group_file_unreadable", path=str(path))
        return outcome

    for correction in result.corrections:
        if apply_correction(doc, correction):
            outcome.corrections_applied += 1
            CORRECTIONS_APPLIED.inc()
            logger.info(
                "correction_applied",
                file=result.file,
                event=correction.event,
                old_value=correction.old_value,
                new_value=correction.new_value,
                confidence=correction.confidence,
            )

    if needs_research(result, threshold) and not doc.get("needsResearch"):
        doc["needsResearch"] = True
        outcome.flagged = True
        GROUPS_FLAGGED.inc()
        logger.info(
            "group_flagged_for_research",
            file=result.file,
            unverified=result.unverified,
            events_checked=result.events_checked,
        )

    doc["verificationSummary"] = result.verification_summary.to_json_dict()
    write_json_atomic(path, doc)
    outcome.written = True
    return outcome
