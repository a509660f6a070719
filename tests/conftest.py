"""Shared pytest fixtures for the pollenTracker test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.exposure_provider import IExposureProvider
from src.models.analysis import FeedbackEntry
from src.models.feedback import ExposureReading
from src.providers.feedback.memory_feedback_store import MemoryFeedbackStore

FIXED_NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(feedback: float, **levels: float | None) -> FeedbackEntry:
    """Build a FeedbackEntry with one reading per keyword argument."""
    return FeedbackEntry(
        feedback=feedback,
        readings=[ExposureReading(category=c, exposure_level=v) for c, v in levels.items()],
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixed_clock():
    """Clock callable returning a fixed UTC timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store() -> MemoryFeedbackStore:
    return MemoryFeedbackStore()


@pytest.fixture
def oak_readings() -> list[ExposureReading]:
    return [
        ExposureReading(category="oak", exposure_level=3),
        ExposureReading(category="grass", exposure_level=1),
    ]


@pytest.fixture
def mock_exposure_provider(oak_readings) -> MagicMock:
    """Exposure provider mock that returns ``oak_readings`` for every lookup."""
    provider = MagicMock(spec=IExposureProvider)
    provider.lookup = AsyncMock(return_value=oak_readings)
    provider.get_provider_name.return_value = "mock_exposure"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def linear_entries() -> list[FeedbackEntry]:
    """Five entries where feedback rises exactly with the oak level."""
    return [make_entry(float(i), oak=float(i)) for i in range(1, 6)]
