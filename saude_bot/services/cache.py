"""File-backed per-region cache for facility snapshots.

Layout
──────
One JSON file per region inside the cache folder::

    api_cache/postos_ro.json
    {"timestamp": "2026-10-19T12:00:00+00:00", "data": [...]}

A file younger than the TTL is a hit; a stale, missing or unreadable
file is a miss.  Writes go to a temporary file first and are renamed
into place, and a ``threading.Lock`` serialises writers inside the
process.

>>> cache = RegionCache("./api_cache/", ttl_hours=24)
>>> cache.put("ro", [{"nomeFantasia": "UBS Caladinho"}])
>>> cache.get("ro")
[{'nomeFantasia': 'UBS Caladinho'}]
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24.0
FILE_PREFIX = "postos_"


def _parse_timestamp(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


class RegionCache:
    """Time-to-live snapshot store keyed by region code (e.g. ``"ro"``)."""

    def __init__(self, folder: str | Path, ttl_hours: float = DEFAULT_TTL_HOURS) -> None:
        self._folder = Path(folder)
        self._ttl = timedelta(hours=ttl_hours)
        self._lock = threading.Lock()

    def path_for(self, region: str) -> Path:
        return self._folder / f"{FILE_PREFIX}{region.lower()}.json"

    # ── Core operations ──────────────────────────────────────────────

    def get(self, region: str, *, now: datetime | None = None) -> list[dict[str, Any]] | None:
        """Return the cached snapshot for *region*, or ``None`` on a miss."""
        path = self.path_for(region)
        if not path.exists():
            return None

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            written_at = _parse_timestamp(payload["timestamp"])
            data = payload["data"]
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Cache: unreadable file %s, treating as miss", path)
            return None
        if not isinstance(data, list):
            logger.warning("Cache: %s does not hold a record list, treating as miss", path)
            return None

        age = (now or datetime.now(UTC)) - written_at
        if age >= self._ttl:
            logger.debug("Cache: %s is stale (age %s)", region.upper(), age)
            return None

        logger.info("Cache: hit for region %s", region.upper())
        return data

    def put(self, region: str, data: list[dict[str, Any]], *, now: datetime | None = None) -> None:
        """Write a fresh snapshot for *region*."""
        payload = {
            "timestamp": (now or datetime.now(UTC)).isoformat(),
            "data": data,
        }
        path = self.path_for(region)
        with self._lock:
            self._folder.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._folder, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.info("Cache: stored %d records for region %s", len(data), region.upper())

    def invalidate(self, region: str) -> bool:
        """Delete the snapshot for *region*.  Returns ``True`` if it existed."""
        with self._lock:
            path = self.path_for(region)
            if path.exists():
                path.unlink()
                return True
            return False

    def clear(self) -> int:
        """Delete every snapshot.  Returns the number of files removed."""
        with self._lock:
            if not self._folder.exists():
                return 0
            removed = 0
            for path in self._folder.glob(f"{FILE_PREFIX}*.json"):
                path.unlink()
                removed += 1
            return removed
