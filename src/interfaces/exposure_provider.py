"""Abstract base class for environmental exposure lookups.

Given a coordinate, an exposure provider returns the current reading for
every pollen/plant category it knows about.  The concrete implementation
is GooglePollenProvider (src/providers/exposure/).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.feedback import ExposureReading


class IExposureProvider(ABC):
    """Contract for exposure lookup services.

    Implementations raise
    :class:`~src.utils.errors.ProviderUnavailableError` when the upstream
    cannot be reached or answers with something unusable.  Callers decide
    whether that is fatal; the submission service treats it as "no data".
    """

    @abstractmethod
    async def lookup(self, lat: float, lng: float) -> list[ExposureReading]:
        """Return the exposure readings for the given coordinate.

        Parameters
        ----------
        lat:
            Latitude in decimal degrees.
        lng:
            Longitude in decimal degrees.

        Returns
        -------
        list[ExposureReading]
            One reading per reported category; may be empty.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the provider is configured and can be queried."""
