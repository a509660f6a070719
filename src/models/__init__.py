"""pollenTracker domain models: re-exports all public model classes.

    - feedback.py  : Submitted records (FeedbackRecord, ExposureReading, Location)
    - analysis.py  : Engine input and results (FeedbackEntry, CategoryStat,
                      CorrelationResult)
"""

from __future__ import annotations

from src.models.analysis import CategoryStat, CorrelationResult, FeedbackEntry
from src.models.feedback import (
    ExposureReading,
    FeedbackRecord,
    FeedbackSubmission,
    Location,
    SubmissionResult,
)

__all__ = [
    "CategoryStat",
    "CorrelationResult",
    "ExposureReading",
    "FeedbackEntry",
    "FeedbackRecord",
    "FeedbackSubmission",
    "Location",
    "SubmissionResult",
]
