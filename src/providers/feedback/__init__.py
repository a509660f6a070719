"""Feedback record stores.

SQLiteFeedbackStore keeps submissions and per-owner analysis results in
data/feedback.db.  MemoryFeedbackStore is a dict-based stand-in for tests
and throwaway runs.  Both implement IFeedbackStore.
"""

from src.providers.feedback.memory_feedback_store import MemoryFeedbackStore
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore

__all__ = ["MemoryFeedbackStore", "SQLiteFeedbackStore"]
