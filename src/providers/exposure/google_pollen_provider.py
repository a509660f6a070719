"""Google Pollen API exposure provider.

Queries the ``forecast:lookup`` endpoint for a single day at the given
coordinate and flattens the first day's ``pollenTypeInfo`` (grass, tree,
weed) and ``plantInfo`` (oak, birch, ragweed, ...) entries into
ExposureReadings keyed by the lower-cased display name.

Entries without ``indexInfo`` carry no level for the day and are skipped.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.interfaces.exposure_provider import IExposureProvider
from src.models.feedback import ExposureReading
from src.utils.errors import ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_POLLEN_API_URL = "https://pollen.googleapis.com/v1/forecast:lookup"
_DEFAULT_TIMEOUT = 15.0
_DEFAULT_INFO_FIELDS = ("pollenTypeInfo", "plantInfo")


class GooglePollenProvider(IExposureProvider):
    """Exposure lookup backed by the Google Pollen API.

    Parameters
    ----------
    api_key:
        Google Maps Platform key.  With no key every lookup returns an
        empty list.
    http_client:
        Shared ``httpx.AsyncClient``; one is created (and owned) when omitted.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        api_url: str = _POLLEN_API_URL,
        days: int = 1,
        info_fields: tuple[str, ...] | list[str] = _DEFAULT_INFO_FIELDS,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._days = days
        self._info_fields = tuple(info_fields)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(_DEFAULT_TIMEOUT),
        )

    def get_provider_name(self) -> str:
        return "google_pollen"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def lookup(self, lat: float, lng: float) -> list[ExposureReading]:
        """Fetch today's pollen index values for ``(lat, lng)``."""
        if not self._api_key:
            logger.warning("pollen_api_key_missing")
            return []

        params = {
            "key": self._api_key,
            "location.latitude": lat,
            "location.longitude": lng,
            "days": self._days,
        }

        try:
            response = await self._client.get(self._api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise ProviderUnavailableError(
                message=f"Timeout querying pollen API: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                message=f"HTTP {exc.response.status_code} from pollen API",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"HTTP error querying pollen API: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise ProviderUnavailableError(
                message=f"Pollen API returned invalid JSON: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        readings = self._parse_readings(data)
        logger.info("pollen_lookup_complete", lat=lat, lng=lng, readings=len(readings))
        return readings

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parse_readings(self, data: Any) -> list[ExposureReading]:
        if not isinstance(data, dict):
            raise ProviderUnavailableError(
                message="Pollen API response is not a JSON object",
                provider_name=self.get_provider_name(),
            )

        daily_info = data.get("dailyInfo") or []
        if not daily_info:
            return []

        first_day = daily_info[0]
        readings: list[ExposureReading] = []
        for field in self._info_fields:
            for item in first_day.get(field) or []:
                index_info = item.get("indexInfo")
                if not index_info:
                    continue
                category = (item.get("displayName") or "").lower()
                if not category:
                    logger.debug("pollen_item_without_name", field=field, code=item.get("code"))
                    continue
                readings.append(
                    ExposureReading(
                        category=category,
                        exposure_level=index_info.get("value"),
                    )
                )
        return readings
