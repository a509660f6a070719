"""Public interface definitions for all external collaborators.

Every external service is accessed exclusively through the abstract base
classes defined in this package.  Concrete adapters implement these
interfaces and are injected at runtime by ``src/main.py``, so unit tests
can inject a mock or in-memory implementation without real I/O.

CONCRETE PROVIDER MAP:
    Interface            →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IFeedbackStore       →  SQLiteFeedbackStore, MemoryFeedbackStore
    IExposureProvider    →  GooglePollenProvider
"""

from src.interfaces.exposure_provider import IExposureProvider
from src.interfaces.feedback_store import IFeedbackStore

__all__ = [
    "IExposureProvider",
    "IFeedbackStore",
]
