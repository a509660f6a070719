"""Feedback domain models: symptom reports paired with pollen exposure.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph, no imports from upper layers).
#
# A FeedbackRecord is written once at submission time and never changed:
# all models use ``frozen=True``.  The raw ``feedback`` value is kept as
# submitted (number or text) and only coerced to a float when an analysis
# runs, so categorical answers stay in the history without breaking the
# numeric correlation.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class Location(BaseModel):
    """Geographic point the feedback was submitted from."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(description="Latitude in decimal degrees.")
    lng: float = Field(description="Longitude in decimal degrees.")


# ─── ExposureReading ─────────────────────────────────────────────────
# One (category, level) pair from the environmental lookup.  Category
# labels are lower-cased so they can be compared across records.
class ExposureReading(BaseModel):
    """Exposure level for a single pollen or plant category."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(description="Lower-cased category label, e.g. 'oak' or 'grass'.")
    exposure_level: float | None = Field(
        default=None,
        description="Numeric exposure index.  None when the upstream omitted it; 0 is a real value.",
    )


class FeedbackRecord(BaseModel):
    """A single symptom report with the exposure readings at that moment."""

    model_config = ConfigDict(frozen=True)

    record_id: str = Field(description="Hex UUID assigned at submission.")
    owner_id: str = Field(description="Identity of the user the record belongs to.")
    feedback: float | str = Field(description="Feedback score as submitted (number or text).")
    location: Location
    readings: list[ExposureReading] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)


class FeedbackSubmission(BaseModel):
    """A submission payload after validation and coordinate coercion."""

    model_config = ConfigDict(frozen=True)

    feedback: float | str
    location: Location


class SubmissionResult(BaseModel):
    """What the caller gets back after a successful submission."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    record_id: str
    readings: list[ExposureReading] = Field(default_factory=list)
