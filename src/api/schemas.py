"""Pydantic v2 response schemas for the pollenTracker REST API.

These are separate from the domain models in ``src/models/``: domain models
use snake_case attributes, while the HTTP contract uses the camelCase field
names mobile clients already read (``recordId``, ``dataPoints``,
``analyzedAt``, ``exposureLevel``).  Schemas are constructed with the
snake_case names and serialised by alias.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


class ReadingResponse(BaseModel):
    """One exposure reading as returned to the client."""

    model_config = _WIRE_CONFIG

    category: str
    exposure_level: float | None = Field(default=None, alias="exposureLevel")


class SubmitFeedbackResponse(BaseModel):
    """Response after a feedback submission is stored."""

    model_config = _WIRE_CONFIG

    success: bool = True
    record_id: str = Field(alias="recordId", description="Identifier of the stored record.")
    readings: list[ReadingResponse] = Field(
        default_factory=list,
        description="Exposure readings resolved for the submitted location.",
    )


class CategoryStatResponse(BaseModel):
    """Correlation statistics for one category."""

    model_config = _WIRE_CONFIG

    correlation: float
    significance: float
    significant: bool
    error: str | None = None


class AnalysisResponse(BaseModel):
    """Per-owner correlation analysis."""

    model_config = _WIRE_CONFIG

    owner_id: str = Field(alias="ownerId")
    data_points: int = Field(alias="dataPoints")
    correlations: dict[str, CategoryStatResponse] = Field(default_factory=dict)
    analyzed_at: datetime = Field(alias="analyzedAt")


class HealthResponse(BaseModel):
    """Health-check response."""

    status: str = "ok"
    version: str
    store: str
    exposure: str | None = None
    exposure_available: bool = False


class ErrorResponse(BaseModel):
    """Standard error response body.

    ``error`` is the fault kind: ``invalid-argument``, ``unauthenticated``
    or ``internal``.
    """

    error: str
    detail: str | None = None
