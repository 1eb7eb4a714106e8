"""
Tests for writing verification outcomes back onto curated group files.

Run: pytest tests/test_reconciliation.py -v
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from shared.models.domain import ConfigVerificationResult, EventCorrection, VerificationSummary
from schedule_verifier.reconciliation import apply_correction, needs_research, reconcile_group_file

RELAY_FIX = EventCorrection(
    event="Mixed Relay",
    old_value="2026-02-15T10:00:00Z",
    new_value="2026-02-15T15:00:00Z",
    confidence=0.8,
)


def _doc() -> dict[str, Any]:
    return {
        "name": "Biathlon World Cup",
        "events": [
            {"title": "Mixed Relay", "time": "2026-02-15T10:00:00Z", "venue": "Oslo"},
            {"title": "Sprint", "time": "2026-02-15T10:00:00Z", "venue": "Oslo"},
        ],
    }


def _result(checked: int, unverified: int, corrections: list[EventCorrection] | None = None) -> ConfigVerificationResult:
    summary = VerificationSummary(
        last_run="2026-02-12T12:00:00Z",
        events_checked=checked,
        verified=checked - unverified,
        unverified=unverified,
        overall_confidence=0.5,
    )
    return ConfigVerificationResult(
        file="biathlon.json",
        events_checked=checked,
        verified=checked - unverified,
        unverified=unverified,
        overall_confidence=0.5,
        corrections=corrections or [],
        verification_summary=summary,
    )


# ── apply_correction ────────────────────────────────────────────────────

class TestApplyCorrection:

    def test_applies_to_matching_title_and_old_value(self) -> None:
        doc = _doc()
        assert apply_correction(doc, RELAY_FIX) is True
        assert doc["events"][0]["time"] == "2026-02-15T15:00:00Z"
        assert doc["events"][1]["time"] == "2026-02-15T10:00:00Z"

    def test_reapplying_is_noop(self) -> None:
        doc = _doc()
        apply_correction(doc, RELAY_FIX)
        assert apply_correction(doc, RELAY_FIX) is False
        assert doc["events"][0]["time"] == "2026-02-15T15:00:00Z"

    def test_stale_old_value_is_ignored(self) -> None:
        doc = _doc()
        doc["events"][0]["time"] = "2026-02-15T12:00:00Z"
        assert apply_correction(doc, RELAY_FIX) is False

    def test_no_events(self) -> None:
        assert apply_correction({"name": "x"}, RELAY_FIX) is False


# ── needs_research ──────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "checked,unverified,expected",
    [(5, 3, True), (2, 1, False), (4, 4, True), (0, 0, False), (3, 0, False)],
)
def test_needs_research(checked: int, unverified: int, expected: bool) -> None:
    assert needs_research(_result(checked, unverified)) is expected


# ── reconcile_group_file ────────────────────────────────────────────────

class TestReconcileGroupFile:

    def test_writes_summary_and_corrections(self, tmp_path: Path) -> None:
        path = tmp_path / "biathlon.json"
        path.write_text(json.dumps(_doc()), encoding="utf-8")
        outcome = reconcile_group_file(path, _result(2, 0, [RELAY_FIX]))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert outcome.corrections_applied == 1
        assert outcome.written is True
        assert outcome.flagged is False
        assert data["name"] == "Biathlon World Cup"
        assert data["events"][0]["venue"] == "Oslo"
        assert data["events"][0]["time"] == "2026-02-15T15:00:00Z"
        assert data["verificationSummary"]["eventsChecked"] == 2
        assert data["verificationSummary"]["lastRun"] == "2026-02-12T12:00:00Z"
        assert "needsResearch" not in data

    def test_flags_mostly_unverified(self, tmp_path: Path) -> None:
        path = tmp_path / "biathlon.json"
        path.write_text(json.dumps(_doc()), encoding="utf-8")
        outcome = reconcile_group_file(path, _result(2, 2))
        assert outcome.flagged is True
        assert json.loads(path.read_text(encoding="utf-8"))["needsResearch"] is True

    def test_already_flagged_not_reflagged(self, tmp_path: Path) -> None:
        path = tmp_path / "biathlon.json"
        path.write_text(json.dumps({**_doc(), "needsResearch": True}), encoding="utf-8")
        outcome = reconcile_group_file(path, _result(2, 2))
        assert outcome.flagged is False
        assert json.loads(path.read_text(encoding="utf-8"))["needsResearch"] is True

    def test_missing_file_skipped(self, tmp_path: Path) -> None:
        outcome = reconcile_group_file(tmp_path / "gone.json", _result(2, 0, [RELAY_FIX]))
        assert outcome.written is False
        assert not (tmp_path / "gone.json").exists()
