"""Feedback submission orchestrator: validate, look up exposure, persist.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: IFeedbackStore, IExposureProvider.
#
#   1. AUTH: an owner id must be present (resolved by the API layer).
#   2. VALIDATION: feedback present; location has numeric (or numeric
#      string) lat/lng.  Fails before any side effect.
#   3. EXPOSURE LOOKUP: best effort.  Any lookup failure is logged and
#      the record is stored with no readings.
#   4. PERSISTENCE: one append to the store.  Store errors surface to the
#      caller as PersistenceError and are not retried.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import structlog

from src.interfaces.exposure_provider import IExposureProvider
from src.interfaces.feedback_store import IFeedbackStore
from src.models.feedback import (
    ExposureReading,
    FeedbackRecord,
    FeedbackSubmission,
    Location,
    SubmissionResult,
)
from src.utils.errors import AuthenticationError, InputValidationError
from src.utils.numbers import to_finite_float

logger = structlog.get_logger(logger_name=__name__)


def _normalize_feedback(value: Any) -> float | str:
    if isinstance(value, bool):
        raise InputValidationError("Field 'feedback' must be a number or a string")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InputValidationError("Missing required field: 'feedback'")
        return text
    raise InputValidationError("Field 'feedback' must be a number or a string")


def validate_submission(payload: Any) -> FeedbackSubmission:
    """Check a raw submission payload and coerce its coordinates.

    Raises:
        InputValidationError: With a message naming the first problem found.
    """
    if payload is None:
        raise InputValidationError("Missing data payload")
    if not isinstance(payload, Mapping):
        raise InputValidationError("Submission payload must be an object")

    if payload.get("feedback") is None:
        raise InputValidationError("Missing required field: 'feedback'")
    location = payload.get("location")
    if location is None:
        raise InputValidationError("Missing required field: 'location'")
    if not isinstance(location, Mapping) or location.get("lat") is None or location.get("lng") is None:
        raise InputValidationError("Location must include 'lat' and 'lng'")

    lat = to_finite_float(location["lat"])
    lng = to_finite_float(location["lng"])
    if lat is None or lng is None:
        raise InputValidationError("Location coordinates must be valid numbers")

    return FeedbackSubmission(
        feedback=_normalize_feedback(payload["feedback"]),
        location=Location(lat=lat, lng=lng),
    )


class FeedbackService:
    """Accepts feedback submissions and stores them with exposure readings.

    All dependencies are constructor-injected; the exposure provider is
    optional and its absence simply means records carry no readings.
    """

    def __init__(
        self,
        store: IFeedbackStore,
        exposure_provider: IExposureProvider | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._exposure_provider = exposure_provider
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    async def submit_feedback(self, owner_id: str | None, payload: Any) -> SubmissionResult:
        """Validate, enrich and persist one feedback submission."""
        if not owner_id:
            raise AuthenticationError()

        submission = validate_submission(payload)
        readings = await self._lookup_readings(submission.location)

        record = FeedbackRecord(
            record_id=uuid4().hex,
            owner_id=owner_id,
            feedback=submission.feedback,
            location=submission.location,
            readings=readings,
            created_at=self._clock(),
        )
        record_id = await self._store.append_record(record)

        logger.info(
            "feedback_stored",
            record_id=record_id,
            readings=len(readings),
            store=self._store.get_provider_name(),
        )
        return SubmissionResult(success=True, record_id=record_id, readings=readings)

    async def _lookup_readings(self, location: Location) -> list[ExposureReading]:
        if self._exposure_provider is None:
            return []
        try:
            return await self._exposure_provider.lookup(location.lat, location.lng)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "exposure_lookup_failed",
                provider=self._exposure_provider.get_provider_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return []
