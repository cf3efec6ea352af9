"""Geospatial helpers: great-circle distance and coordinate parsing."""

from __future__ import annotations

import math
import re

EARTH_RADIUS_KM = 6371

_LAT_LON_RE = re.compile(
    r"^\s*(-?\d{1,2}(?:\.\d+)?)\s*[,;\s]\s*(-?\d{1,3}(?:\.\d+)?)\s*$"
)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two (lat, lon) points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def parse_coordinate(value: object) -> float | None:
    """Parse a latitude/longitude value; accepts ``,`` as decimal separator.

    The open-data API serves coordinates as strings like ``"-8,7612"``.
    ``nan`` and ``inf`` are rejected.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_lat_lon(text: str) -> tuple[float, float] | None:
    """Parse ``"-8.76, -63.90"`` style text into a valid (lat, lon) pair."""
    m = _LAT_LON_RE.match(text or "")
    if not m:
        return None
    lat, lon = float(m.group(1)), float(m.group(2))
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon


def record_coords(record: dict) -> tuple[float, float] | None:
    """Return (lat, lon) for an open-data facility record, if it has both."""
    lat = parse_coordinate(record.get("latitude"))
    lon = parse_coordinate(record.get("longitude"))
    if lat is None or lon is None:
        return None
    return lat, lon
