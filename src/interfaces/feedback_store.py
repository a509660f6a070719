"""Abstract base class for feedback record persistence.

# ─── ADAPTER PATTERN ─────────────────────────────────────────────────
#
# The concrete implementations are SQLiteFeedbackStore and
# MemoryFeedbackStore (src/providers/feedback/).  Services only ever talk to
# this interface, so the backend can be swapped without touching the
# submission or analysis logic.
#
# The store holds two kinds of data:
#   - FeedbackRecords: append-only, queried by owner.
#   - CorrelationResults: a single slot per owner, overwritten on save.
#
# All operations are async to support network-backed stores.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.analysis import CorrelationResult
from src.models.feedback import FeedbackRecord


class IFeedbackStore(ABC):
    """Contract for feedback record and analysis result persistence.

    Implementations raise :class:`~src.utils.errors.PersistenceError` on
    any backend failure.
    """

    # ── Lifecycle ──────────────────────────────────────────────────────

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Safe to call twice."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    # ── Records ────────────────────────────────────────────────────────

    @abstractmethod
    async def append_record(self, record: FeedbackRecord) -> str:
        """Persist a new feedback record.

        Returns
        -------
        str
            The stored record's ``record_id``.
        """

    @abstractmethod
    async def list_records(self, owner_id: str) -> list[FeedbackRecord]:
        """Return every record for *owner_id*, oldest first."""

    # ── Results ────────────────────────────────────────────────────────

    @abstractmethod
    async def save_result(self, result: CorrelationResult) -> None:
        """Store *result* under its owner, replacing any previous result."""

    @abstractmethod
    async def get_result(self, owner_id: str) -> CorrelationResult | None:
        """Return the stored result for *owner_id*, or None."""
