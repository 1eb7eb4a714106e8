"""
Multi-source schedule verification for curated sports event groups.
Cross-checks each event against static rules, live scores, RSS headlines, local sport
data and (optionally) web search, then scores, corrects and flags the groups.
"""
__version__ = "0.1.0"

from schedule_verifier.confidence import aggregate_confidence
from schedule_verifier.engine import ScheduleVerificationEngine
from schedule_verifier.hints import build_verification_hints

__all__ = [
    "ScheduleVerificationEngine",
    "aggregate_confidence",
    "build_verification_hints",
]
