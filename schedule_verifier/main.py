"""
Schedule verifier entrypoint.
Runs one verification pass under a wall-clock safety deadline; the pipeline step that
invokes it is killed hard at 60s, so on timeout we exit cleanly with whatever was written.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from shared.config import get_settings
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import SERVICE_INFO, start_metrics_server

from schedule_verifier import __version__
from schedule_verifier.config import get_verifier_settings
from schedule_verifier.runner import RunOutcome, run_verification
from schedule_verifier.sources.search_command import search_from_settings

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="schedule_verifier",
        description="Verify curated event schedules against live scores, sport data and RSS.",
    )
    parser.add_argument("--dry-run", action="store_true", help="verify and report without writing any file")
    parser.add_argument("--offline", action="store_true", help="skip live-score fetching")
    parser.add_argument("--no-web-search", action="store_true", help="never escalate to the web-search command")
    parser.add_argument("--data-dir", type=Path, default=None, help="override SV_DATA_DIR")
    parser.add_argument("--config-dir", type=Path, default=None, help="override SV_CONFIG_DIR")
    return parser.parse_args(argv)


def summarize(outcome: RunOutcome) -> dict:
    results = outcome.results
    return {
        "timestamp": outcome.run.timestamp,
        "configsChecked": outcome.run.configs_checked,
        "eventsChecked": outcome.run.events_checked,
        "verified": sum(r.verified for r in results),
        "plausible": sum(r.plausible for r in results),
        "unverified": sum(r.unverified for r in results),
        "corrections": sum(len(r.corrections) for r in results),
        "issues": len(outcome.issues),
        "hints": outcome.hints.hints,
    }


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("schedule-verifier")
    settings = get_settings()
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.config_dir is not None:
        overrides["config_dir"] = args.config_dir
    if overrides:
        settings = settings.model_copy(update=overrides)
    verifier_settings = get_verifier_settings()
    search = None if args.no_web_search else search_from_settings(verifier_settings)

    SERVICE_INFO.info({"version": __version__, "environment": settings.environment.value})
    start_metrics_server(settings.metrics_port)

    try:
        outcome = await asyncio.wait_for(
            run_verification(
                settings=settings,
                verifier_settings=verifier_settings,
                search=search,
                dry_run=args.dry_run,
                offline=args.offline,
            ),
            timeout=verifier_settings.safety_timeout_s,
        )
    except asyncio.TimeoutError:
        logger.warning("safety_timeout_reached", timeout_s=verifier_settings.safety_timeout_s)
        return 0

    for r in outcome.results:
        logger.info(
            "group_summary",
            file=r.file,
            verified=r.verified,
            plausible=r.plausible,
            unverified=r.unverified,
            overall_confidence=r.overall_confidence,
        )
    print(json.dumps(summarize(outcome), indent=2))
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
