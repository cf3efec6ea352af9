"""Nearest-facility resolution for a user's coordinates.

Pipeline::

    (lat, lon) ──reverse geocode──▶ UF ──open data (cached)──▶ records
        ──keep records with coordinates──▶ haversine ──sort──▶ first N

When no record of the state carries coordinates, the records of the
user's city are returned instead, without distances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from saude_bot.config import NEARBY_LIMIT
from saude_bot.facilities.directory import normalize_name
from saude_bot.facilities.geo import haversine_km, record_coords
from saude_bot.services.geocoding import GeocodingClient, Region
from saude_bot.services.open_data import OpenDataClient

logger = logging.getLogger(__name__)


class LookupStatus(Enum):
    FOUND = "found"
    CITY_FALLBACK = "city_fallback"
    NONE_NEARBY = "none_nearby"
    NO_DATA = "no_data"
    NO_REGION = "no_region"


@dataclass
class RankedFacility:
    record: dict[str, Any]
    distance_km: float | None = None


@dataclass
class NearbyResult:
    status: LookupStatus
    region: Region | None = None
    facilities: list[RankedFacility] = field(default_factory=list)


class FacilityLocator:
    """Find the facilities closest to a coordinate."""

    def __init__(
        self,
        geocoder: GeocodingClient | None = None,
        open_data: OpenDataClient | None = None,
        *,
        limit: int = NEARBY_LIMIT,
    ):
        self._geocoder = geocoder or GeocodingClient()
        self._open_data = open_data or OpenDataClient()
        self._limit = limit

    def nearest(self, lat: float, lon: float, limit: int | None = None) -> NearbyResult:
        """Rank the facilities of the user's state by distance.

        Raises ``ExternalAPIError`` when the open-data download fails;
        geocoding failures surface as ``NO_REGION``.
        """
        if limit is None:
            limit = self._limit
        region = self._geocoder.reverse(lat, lon)
        if region is None:
            return NearbyResult(LookupStatus.NO_REGION)

        records = self._open_data.hospitals_by_state(region.state_code)
        if not records:
            return NearbyResult(LookupStatus.NO_DATA, region)

        ranked = []
        for record in records:
            coords = record_coords(record)
            if coords is None:
                continue
            ranked.append(RankedFacility(record, haversine_km(lat, lon, *coords)))
        ranked.sort(key=lambda f: f.distance_km)

        if ranked:
            logger.info(
                "Ranked %d facilities in %s; returning %d",
                len(ranked), region.state_code.upper(), min(limit, len(ranked)),
            )
            return NearbyResult(LookupStatus.FOUND, region, ranked[:limit])

        in_city = self._records_in_city(records, region.city)
        if in_city:
            return NearbyResult(
                LookupStatus.CITY_FALLBACK,
                region,
                [RankedFacility(r) for r in in_city[:limit]],
            )
        return NearbyResult(LookupStatus.NONE_NEARBY, region)

    @staticmethod
    def _records_in_city(records: list[dict[str, Any]], city: str | None) -> list[dict[str, Any]]:
        if not city:
            return []
        wanted = normalize_name(city)
        return [r for r in records if normalize_name(str(r.get("municipio") or "")) == wanted]
