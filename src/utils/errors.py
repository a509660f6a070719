"""Custom exception hierarchy for pollenTracker.

All application exceptions inherit from :class:`PollenTrackerError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "google_pollen", "sqlite_feedback") caused the failure.

    PollenTrackerError  (base -- catch-all for any pollenTracker error)
    +-- InputValidationError     (missing / unparseable submission fields)
    +-- AuthenticationError      (no caller identity on the request)
    +-- ProviderUnavailableError (environmental lookup down / unreachable)
    +-- PersistenceError         (record store read or write failure)
    +-- ConfigurationError       (startup / missing config)

Only input, authentication and persistence errors are reported to callers.
Lookup failures are absorbed by the submission service, and arithmetic
faults inside the correlation engine never leave it: they become an
``error`` annotation on the affected category.
"""


class PollenTrackerError(Exception):
    """Base exception for all pollenTracker errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which adapter triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite_feedback] disk I/O error``.
    """

    #: Fault kind reported to API callers for this error class.
    kind = "internal"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller-visible errors
# ---------------------------------------------------------------------------

class InputValidationError(PollenTrackerError):
    """Raised when a submission payload is missing fields or cannot be parsed.

    Raised before any side effect takes place.
    """

    kind = "invalid-argument"

    def __init__(
        self,
        message: str = "Invalid submission payload",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthenticationError(PollenTrackerError):
    """Raised when a request carries no valid caller identity."""

    kind = "unauthenticated"

    def __init__(
        self,
        message: str = "The function must be called while authenticated.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PersistenceError(PollenTrackerError):
    """Raised when the record store fails to read or write.

    Never retried by the services, to avoid duplicate writes.
    """

    def __init__(
        self,
        message: str = "Record store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Degraded-mode / configuration errors
# ---------------------------------------------------------------------------

class ProviderUnavailableError(PollenTrackerError):
    """Raised when the environmental lookup service is unreachable or
    returns something unusable.

    The submission service catches this and continues with no readings.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PollenTrackerError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
