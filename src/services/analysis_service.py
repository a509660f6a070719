"""Analysis orchestrator: fetch an owner's history, correlate, persist.

Feedback values are filtered here, before the engine sees them: entries
whose feedback cannot be read as a finite number (categorical answers,
blanks) are dropped silently rather than failing the analysis.  Zero is a
valid score and is kept.

Each run recomputes from the full history and replaces the owner's stored
result; there is no incremental update.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from src.interfaces.feedback_store import IFeedbackStore
from src.models.analysis import CorrelationResult, FeedbackEntry
from src.models.feedback import FeedbackRecord
from src.services.correlation_engine import CorrelationEngine
from src.utils.errors import AuthenticationError
from src.utils.numbers import to_finite_float

logger = structlog.get_logger(logger_name=__name__)


def coerce_feedback(value: Any) -> float | None:
    """Return the feedback score as a float, or None to skip the record."""
    return to_finite_float(value)


def project_entries(records: Sequence[FeedbackRecord]) -> list[FeedbackEntry]:
    """Map stored records to engine entries, dropping non-numeric feedback."""
    entries: list[FeedbackEntry] = []
    for record in records:
        feedback = coerce_feedback(record.feedback)
        if feedback is None:
            logger.debug("feedback_skipped", record_id=record.record_id)
            continue
        entries.append(FeedbackEntry(feedback=feedback, readings=list(record.readings)))
    return entries


class AnalysisService:
    """Runs and stores the per-owner correlation analysis."""

    def __init__(
        self,
        store: IFeedbackStore,
        engine: CorrelationEngine | None = None,
    ) -> None:
        self._store = store
        self._engine = engine or CorrelationEngine()

    async def run_analysis(self, owner_id: str | None) -> CorrelationResult:
        """Recompute the owner's correlations from every stored record.

        Store failures propagate as PersistenceError.  An owner with little
        or no data gets a result with an empty ``correlations`` mapping.
        """
        if not owner_id:
            raise AuthenticationError()

        records = await self._store.list_records(owner_id)
        entries = project_entries(records)
        result = self._engine.analyze(owner_id, entries)
        await self._store.save_result(result)

        logger.info(
            "analysis_completed",
            records=len(records),
            data_points=result.data_points,
            skipped=len(records) - len(entries),
            categories=len(result.correlations),
        )
        return result

    async def get_latest(self, owner_id: str | None) -> CorrelationResult | None:
        """Return the last stored result without recomputing."""
        if not owner_id:
            raise AuthenticationError()
        return await self._store.get_result(owner_id)
