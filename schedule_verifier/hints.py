"""
Adaptive hints for the upstream discovery step.

Recent verification accuracy is turned into short corrective instructions that are
fed back into the next discovery prompt. Overall figures use the last three runs;
per-sport accuracy uses the last five so that sparse sports still accumulate enough
events to judge.
"""
from __future__ import annotations

from typing import Optional

from shared.models.domain import HintMetrics, VerificationHints, VerificationHistory

from schedule_verifier.config import (
    HINT_ACCURACY_WINDOW,
    HINT_HIGH_UNVERIFIED_RATIO,
    HINT_LOW_ACCURACY,
    HINT_LOW_SPORT_ACCURACY,
    HINT_MIN_SPORT_EVENTS,
    HINT_SPORT_WINDOW,
)
from schedule_verifier.confidence import round_confidence

LOW_ACCURACY_HINT = (
    "CORRECTION: Recent discoveries had low accuracy. Double-check dates/times against official sources."
)
SPORT_ACCURACY_HINT = (
    "CORRECTION: {sport} schedules have been inaccurate. Verify each time against the official event website."
)
CORRECTIONS_HINT = (
    "CORRECTION: Previous times were wrong. Always include timezone offsets and verify against official schedules."
)
UNVERIFIED_HINT = (
    "CORRECTION: Many events couldn't be verified. Use official schedules, not secondary sources."
)


def build_verification_hints(history: Optional[VerificationHistory]) -> VerificationHints:
    if history is None or not history.runs:
        return VerificationHints()

    recent = history.runs[-HINT_SPORT_WINDOW:]
    last_runs = recent[-HINT_ACCURACY_WINDOW:]

    checked = verified = unverified = corrections = 0
    for run in last_runs:
        for r in run.results:
            checked += r.events_checked
            verified += r.verified
            unverified += r.unverified
            corrections += len(r.corrections)

    accuracy = verified / checked if checked else 1.0
    unverified_ratio = unverified / checked if checked else 0.0

    sport_stats: dict[str, list[int]] = {}
    for run in recent:
        for r in run.results:
            stats = sport_stats.setdefault(r.sport or "unknown", [0, 0])
            stats[0] += r.events_checked
            stats[1] += r.verified

    hints: list[str] = []
    if accuracy < HINT_LOW_ACCURACY:
        hints.append(LOW_ACCURACY_HINT)

    sport_accuracy: Optional[float] = None
    for sport, (sport_checked, sport_verified) in sport_stats.items():
        if sport_checked < HINT_MIN_SPORT_EVENTS:
            continue
        ratio = sport_verified / sport_checked
        if ratio < HINT_LOW_SPORT_ACCURACY:
            sport_accuracy = round_confidence(ratio)
            hints.append(SPORT_ACCURACY_HINT.format(sport=sport))

    if corrections > 0:
        hints.append(CORRECTIONS_HINT)
    if unverified_ratio > HINT_HIGH_UNVERIFIED_RATIO:
        hints.append(UNVERIFIED_HINT)

    return VerificationHints(
        hints=hints,
        metrics=HintMetrics(
            overall_accuracy=round_confidence(accuracy),
            unverified_ratio=round_confidence(unverified_ratio),
            corrections_applied=corrections,
            sport_accuracy=sport_accuracy,
            runs_analyzed=len(recent),
        ),
    )
