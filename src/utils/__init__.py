"""Utility modules for pollenTracker.

- **errors** -- Domain-specific exception hierarchy rooted at
  PollenTrackerError; each failure mode (bad input, missing identity,
  store fault, lookup outage) has its own subclass so the API layer can
  map it to the right fault kind.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from src.utils.errors import (
    AuthenticationError,
    ConfigurationError,
    InputValidationError,
    PersistenceError,
    PollenTrackerError,
    ProviderUnavailableError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "InputValidationError",
    "PersistenceError",
    "PollenTrackerError",
    "ProviderUnavailableError",
    "configure_logging",
    "get_logger",
]
