"""In-memory feedback record store.

Simple dict-backed store suitable for tests, the CLI and single-process
development runs.  Nothing survives a restart; use SQLiteFeedbackStore for
anything persistent.
"""

from __future__ import annotations

import structlog

from src.interfaces.feedback_store import IFeedbackStore
from src.models.analysis import CorrelationResult
from src.models.feedback import FeedbackRecord

logger = structlog.get_logger(logger_name=__name__)


class MemoryFeedbackStore(IFeedbackStore):
    """Feedback records in a per-owner list, results in a per-owner slot."""

    def __init__(self) -> None:
        self._records: dict[str, list[FeedbackRecord]] = {}
        self._results: dict[str, CorrelationResult] = {}

    async def initialize(self) -> None:
        logger.debug("memory_feedback_store_ready")

    def get_provider_name(self) -> str:
        return "memory_feedback"

    async def append_record(self, record: FeedbackRecord) -> str:
        self._records.setdefault(record.owner_id, []).append(record)
        return record.record_id

    async def list_records(self, owner_id: str) -> list[FeedbackRecord]:
        return list(self._records.get(owner_id, []))

    async def save_result(self, result: CorrelationResult) -> None:
        self._results[result.owner_id] = result

    async def get_result(self, owner_id: str) -> CorrelationResult | None:
        return self._results.get(owner_id)
