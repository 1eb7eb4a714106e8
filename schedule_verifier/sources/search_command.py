"""
Command-backed web search callback.

Pipes a fact-checking prompt to an external search agent (SV_VERIFIER_WEB_SEARCH_COMMAND)
and maps its JSON answer onto the payload WebSearchVerifier expects.
"""
from __future__ import annotations

import asyncio
import json
import re
import shlex
from typing import Any, Optional

from shared.models.domain import Event
from shared.utils.logging import get_logger

from schedule_verifier.config import VerifierSettings
from schedule_verifier.sources.web_search import SearchCallback

logger = get_logger(__name__)

PARSE_FAILURE_CONFIDENCE = 0.2
DEFAULT_ANSWER_CONFIDENCE = 0.5

_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_BRACES = re.compile(r"\{[\s\S]*\}")

PROMPT_TEMPLATE = """You are a sports schedule fact-checker. Verify the exact start time for this event.

EVENT: {title}
LISTED TIME: {time}
VENUE: {venue}

INSTRUCTIONS:
1. Search for the official schedule for this event
2. Find the exact start time from an authoritative source (official event website, broadcaster schedule, or major sports news)
3. Compare against the listed time above
4. If the time is correct (within 15 minutes), mark as verified
5. If the time is wrong, provide the correct time in ISO 8601 format with timezone offset

Return ONLY valid JSON, no markdown fences:
{{
  "verified": true/false,
  "confidence": 0.0-1.0,
  "correctTime": "ISO 8601 time if different, or null",
  "source": "where you found the time",
  "details": "brief explanation"
}}"""


def build_prompt(event: Event) -> str:
    return PROMPT_TEMPLATE.format(title=event.title, time=event.time or "unknown", venue=event.venue or "unknown")


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except ValueError:
        return None


def extract_answer(output: str) -> Optional[dict[str, Any]]:
    """
    Pull the answer object out of the command's stdout. Accepts a bare JSON answer,
    a CLI envelope whose "result" holds the answer text, or prose wrapping a fenced
    or inline JSON object.
    """
    text = output.strip()
    doc = _loads(text)
    if isinstance(doc, dict) and isinstance(doc.get("result"), str):
        text = doc["result"].strip()
        doc = _loads(text)
    if isinstance(doc, dict):
        return doc

    fenced = _FENCED.search(text)
    if fenced:
        doc = _loads(fenced.group(1).strip())
    else:
        inline = _BRACES.search(text)
        doc = _loads(inline.group(0)) if inline else None
    return doc if isinstance(doc, dict) else None


def answer_to_payload(answer: dict[str, Any], event: Event) -> dict[str, Any]:
    confidence = answer.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = DEFAULT_ANSWER_CONFIDENCE
    verified = bool(answer.get("verified"))
    payload: dict[str, Any] = {
        "verified": verified,
        "confidence": confidence,
        "details": answer.get("details") or answer.get("source") or "Web search completed",
    }
    correct_time = answer.get("correctTime")
    if not verified and correct_time and event.time:
        payload["correction"] = {
            "field": "time",
            "oldValue": event.time,
            "newValue": str(correct_time),
            "confidence": confidence,
        }
    return payload


def make_command_search(command: str, timeout_s: float = 30.0) -> SearchCallback:
    """Build a search callback that runs `command` once per event, prompt on stdin."""
    argv = shlex.split(command)
    if not argv:
        raise ValueError("web search command is empty")

    async def search(event: Event) -> Optional[dict[str, Any]]:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(build_prompt(event).encode("utf-8")),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise RuntimeError(f"search command timed out after {timeout_s:g}s")

        if proc.returncode != 0:
            raise RuntimeError(
                f"search command exited {proc.returncode}: {stderr.decode('utf-8', 'replace').strip()[:200]}"
            )

        answer = extract_answer(stdout.decode("utf-8", "replace"))
        if answer is None:
            logger.warning("web_search_unparseable", event=event.title)
            return {
                "verified": False,
                "confidence": PARSE_FAILURE_CONFIDENCE,
                "details": "Could not parse web search result",
            }
        return answer_to_payload(answer, event)

    return search


def search_from_settings(settings: VerifierSettings) -> Optional[SearchCallback]:
    """The configured search callback, or None when no command is set."""
    if not settings.web_search_command or not settings.web_search_command.strip():
        return None
    return make_command_search(settings.web_search_command, settings.web_search_timeout_s)
