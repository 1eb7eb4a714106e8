"""Domain enumerations for the schedule verifier."""
from __future__ import annotations

from enum import Enum


class VerifierSource(str, Enum):
    STATIC = "static"
    LIVE_API = "live-api"
    RSS_CROSS_REF = "rss-cross-ref"
    SPORT_DATA = "sport-data"
    WEB_SEARCH = "web-search"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    PLAUSIBLE = "plausible"
    UNVERIFIED = "unverified"


class SportCategory(str, Enum):
    """Live-service sport categories an event title can be mapped to."""
    CROSS_COUNTRY = "cross-country"
    BIATHLON = "biathlon"
    SKI_JUMPING = "ski-jumping"
    ALPINE_SKIING = "alpine-skiing"
    NORDIC_COMBINED = "nordic-combined"
    FOOTBALL = "football"
    GOLF = "golf"
    TENNIS = "tennis"
    F1 = "f1"


class IssueSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class IssueCode(str, Enum):
    SCHEDULE_MISMATCH = "schedule_mismatch"
    MISSING_EVENT_TIME = "missing_event_time"
    INVALID_EVENT_TIME = "invalid_event_time"
    EVENT_OUTSIDE_RANGE = "event_outside_range"
    DUPLICATE_EVENT_TIME = "duplicate_event_time"
    CONFIG_DATE_ORDER = "config_date_order"
