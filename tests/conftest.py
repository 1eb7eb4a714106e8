from __future__ import annotations

from datetime import datetime

import pytest

from helpers import NOW
from shared.models.domain import Event


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sprint() -> Event:
    return Event(title="Biathlon Sprint", time="2026-02-15T10:00:00Z", venue="Anterselva")
