"""Correlation analysis models: engine input and per-owner results.

``FeedbackEntry`` is the only shape the correlation engine accepts: a
numeric feedback value plus the readings recorded alongside it.  The
analysis service builds entries from stored FeedbackRecords after dropping
anything whose feedback cannot be read as a number.

``CorrelationResult`` is stored one-per-owner; a new analysis replaces the
previous one.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.feedback import ExposureReading


class FeedbackEntry(BaseModel):
    """Engine input row: one numeric feedback value and its readings."""

    model_config = ConfigDict(frozen=True)

    feedback: float
    readings: list[ExposureReading] = Field(default_factory=list)


# ─── CategoryStat ────────────────────────────────────────────────────
# ``significance`` is the output of the simplified heuristic
# p = 2 * (1 - min(1, |t| / 10)), not a calibrated p-value.  It can exceed
# 1 for weak correlations.
class CategoryStat(BaseModel):
    """Correlation statistics for one category."""

    model_config = ConfigDict(frozen=True)

    correlation: float = Field(description="Pearson r between exposure level and feedback.")
    significance: float = Field(description="Heuristic significance estimate (lower is stronger).")
    significant: bool = Field(default=False, description="True when significance < 0.05.")
    error: str | None = Field(default=None, description="Set when the statistic could not be computed.")


class CorrelationResult(BaseModel):
    """Per-owner analysis output."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    data_points: int = Field(ge=0, description="Number of entries considered, across all categories.")
    correlations: dict[str, CategoryStat] = Field(default_factory=dict)
    analyzed_at: datetime
