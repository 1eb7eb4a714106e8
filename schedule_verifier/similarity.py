"""Title normalization, Dice-coefficient similarity and sport detection."""
from __future__ import annotations

import re
from typing import Optional

from shared.models.enums import SportCategory

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")

# First match wins.
_SPORT_KEYWORDS: list[tuple[tuple[str, ...], SportCategory]] = [
    (("cross-country",), SportCategory.CROSS_COUNTRY),
    (("biathlon",), SportCategory.BIATHLON),
    (("ski jumping",), SportCategory.SKI_JUMPING),
    (("alpine",), SportCategory.ALPINE_SKIING),
    (("nordic combined",), SportCategory.NORDIC_COMBINED),
    (("football", "soccer"), SportCategory.FOOTBALL),
    (("golf",), SportCategory.GOLF),
    (("tennis",), SportCategory.TENNIS),
    (("formula", "f1", "grand prix"), SportCategory.F1),
]


def normalize_words(text: str) -> list[str]:
    """Lower-case, drop everything but letters/digits/whitespace, split."""
    return _NON_ALNUM_RE.sub("", (text or "").lower()).split()


def title_similarity(a: str, b: str) -> float:
    """Dice coefficient over the two titles' word sets (0 when either is empty)."""
    words_a = set(normalize_words(a))
    words_b = set(normalize_words(b))
    if not words_a or not words_b:
        return 0.0
    overlap = len(words_a & words_b)
    return 2 * overlap / (len(words_a) + len(words_b))


def detect_sport_from_title(title: str) -> Optional[str]:
    """Map an event title to a live-service sport category, or None."""
    lower = (title or "").lower()
    for keywords, sport in _SPORT_KEYWORDS:
        if any(k in lower for k in keywords):
            return sport.value
    return None
