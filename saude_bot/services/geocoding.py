"""Reverse geocoding through the OpenStreetMap Nominatim API.

Only the state (UF) code matters for picking the open-data region; the
city name is kept as a fallback key when facilities lack coordinates.
Nominatim rejects requests without a descriptive ``User-Agent``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from saude_bot.config import NOMINATIM_BASE_URL, NOMINATIM_USER_AGENT
from saude_bot.services.http_client import ApiClient, ExternalAPIError

logger = logging.getLogger(__name__)

_CITY_KEYS = ("city", "town", "municipality", "village")


@dataclass(frozen=True)
class Region:
    """Where a coordinate falls: lower-case state code plus city name."""

    state_code: str
    city: str | None = None


def _state_code(address: dict) -> str | None:
    code = address.get("state_code")
    if code:
        return code.lower()
    # e.g. "BR-RO"
    iso = address.get("ISO3166-2-lvl4")
    if iso and "-" in iso:
        return iso.rsplit("-", 1)[1].lower()
    return None


class GeocodingClient(ApiClient):
    service_name = "nominatim"

    def __init__(self, base_url: str | None = None, *, user_agent: str | None = None):
        super().__init__(
            base_url or NOMINATIM_BASE_URL,
            headers={"User-Agent": user_agent or NOMINATIM_USER_AGENT},
        )

    def reverse(self, lat: float, lon: float) -> Region | None:
        """Resolve a coordinate to its :class:`Region`, or ``None``.

        Failures are logged rather than raised: an unknown region is
        reported to the user the same way as a failed lookup.
        """
        try:
            data = self._request(
                "GET", "/reverse", params={"format": "json", "lat": lat, "lon": lon},
            )
        except ExternalAPIError as exc:
            logger.error("Reverse geocoding failed for (%s, %s): %s", lat, lon, exc)
            return None

        address = (data.get("address") if isinstance(data, dict) else None) or {}
        state = _state_code(address)
        if not state:
            logger.warning("No state code found for coordinates (%s, %s)", lat, lon)
            return None

        city = next((address[k] for k in _CITY_KEYS if address.get(k)), None)
        return Region(state_code=state, city=city)
