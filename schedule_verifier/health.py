"""Schedule health checks and the health-report merge."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from shared.models.domain import (
    ConfigVerificationResult,
    EventGroup,
    HealthIssue,
    VerificationRun,
)
from shared.models.enums import IssueCode, VerifierSource
from shared.utils.dates import parse_range_end, parse_timestamp
from shared.utils.logging import get_logger
from shared.utils.storage import read_json_if_exists, write_json_atomic

from schedule_verifier.sources.static import duplicate_siblings

logger = get_logger(__name__)

_SCHEDULE_SOURCES = (VerifierSource.LIVE_API, VerifierSource.SPORT_DATA)


def check_group_dates(group: EventGroup) -> list[HealthIssue]:
    """Structural date issues in one curated group. No evidence needed."""
    issues: list[HealthIssue] = []
    start = parse_timestamp(group.start_date) if group.start_date else None
    end = parse_range_end(group.end_date) if group.end_date else None

    if group.start_date and group.end_date:
        start_day = parse_timestamp(group.start_date)
        end_day = parse_timestamp(group.end_date)
        if start_day and end_day and end_day < start_day:
            issues.append(HealthIssue(
                code=IssueCode.CONFIG_DATE_ORDER,
                config=group.file,
                message=f"endDate ({group.end_date}) is before startDate ({group.start_date})",
            ))

    for event in group.events:
        if not event.time:
            issues.append(HealthIssue(
                code=IssueCode.MISSING_EVENT_TIME,
                config=group.file,
                event=event.title,
                message=f'Event "{event.title}" has no time field',
            ))
            continue

        when = parse_timestamp(event.time)
        if when is None:
            issues.append(HealthIssue(
                code=IssueCode.INVALID_EVENT_TIME,
                config=group.file,
                event=event.title,
                message=f'Event "{event.title}" has invalid time: {event.time}',
            ))
            continue

        if start and end and (when < start or when > end):
            issues.append(HealthIssue(
                code=IssueCode.EVENT_OUTSIDE_RANGE,
                config=group.file,
                event=event.title,
                message=(
                    f'Event "{event.title}" at {event.time} is outside config range '
                    f"{group.start_date} to {group.end_date}"
                ),
            ))

        dupes = duplicate_siblings(event, group.events)
        if dupes:
            issues.append(HealthIssue(
                code=IssueCode.DUPLICATE_EVENT_TIME,
                config=group.file,
                event=event.title,
                message=f'Event "{event.title}" shares time and venue with {len(dupes)} other event(s)',
            ))

    return issues


def mismatch_issues(result: ConfigVerificationResult) -> list[HealthIssue]:
    """One warning per event whose schedule sources disagreed with the curated time."""
    issues: list[HealthIssue] = []
    for er in result.event_results:
        for vr in er.verifier_results:
            if vr.source not in _SCHEDULE_SOURCES or vr.correction is None:
                continue
            issues.append(HealthIssue(
                code=IssueCode.SCHEDULE_MISMATCH,
                config=result.file,
                event=er.title,
                message=(
                    f'"{er.title}" time mismatch: config={er.time}, '
                    f"{vr.source.value}={vr.correction.new_value} "
                    f"(confidence={vr.correction.confidence:.2f})"
                ),
            ))
            break
    return issues


def merge_health_report(path: Path, run: VerificationRun, issues: Sequence[HealthIssue]) -> bool:
    """
    Merge a scheduleVerification block into an existing health report.
    Returns False when no report exists yet; the report is owned by the health step.
    """
    report: Any = read_json_if_exists(path)
    if not isinstance(report, dict):
        logger.info("health_report_absent", path=str(path))
        return False

    report["scheduleVerification"] = {
        "lastChecked": run.timestamp,
        "configsChecked": run.configs_checked,
        "eventsChecked": run.events_checked,
        "verified": sum(r.verified for r in run.results),
        "plausible": sum(r.plausible for r in run.results),
        "unverified": sum(r.unverified for r in run.results),
        "correctionsApplied": sum(len(r.corrections) for r in run.results),
        "issues": [i.to_json_dict() for i in issues],
    }
    write_json_atomic(path, report)
    logger.info("health_report_merged", path=str(path), issues=len(issues))
    return True
