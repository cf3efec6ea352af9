"""Client for the Ministry of Health open-data API (hospitais e leitos).

Facility lists are fetched per state and stored in the region cache, so
a state is downloaded at most once per cache TTL.
"""

from __future__ import annotations

import logging
from typing import Any

from saude_bot.config import CACHE_DURATION_HOURS, CACHE_FOLDER, OPEN_DATA_BASE_URL
from saude_bot.services.cache import RegionCache
from saude_bot.services.http_client import ApiClient, ExternalAPIError

logger = logging.getLogger(__name__)

HOSPITALS_PATH = "/assistencia-a-saude/hospitais-e-leitos"
PAGE_SIZE = 1000
MAX_PAGES = 20


class OpenDataClient(ApiClient):
    service_name = "open_data"

    def __init__(
        self,
        base_url: str | None = None,
        *,
        cache: RegionCache | None = None,
        page_size: int = PAGE_SIZE,
    ):
        super().__init__(base_url or OPEN_DATA_BASE_URL)
        self._cache = cache or RegionCache(CACHE_FOLDER, CACHE_DURATION_HOURS)
        self._page_size = page_size

    def hospitals_by_state(self, uf: str) -> list[dict[str, Any]]:
        """Return every hospital record for state *uf* (cached)."""
        uf = uf.lower()
        cached = self._cache.get(uf)
        if cached is not None:
            return cached

        logger.info("Fetching open-data facilities for state %s", uf.upper())
        records: list[dict[str, Any]] = []
        for page in range(MAX_PAGES):
            data = self._request(
                "GET",
                HOSPITALS_PATH,
                params={"uf": uf, "limit": self._page_size, "offset": page * self._page_size},
            )
            batch = _page_records(data)
            records.extend(batch)
            if len(batch) < self._page_size:
                break
        else:
            logger.warning(
                "Stopped paging state %s after %d pages", uf.upper(), MAX_PAGES,
            )

        try:
            self._cache.put(uf, records)
        except OSError:
            logger.warning("Could not cache facilities for state %s", uf.upper(), exc_info=True)
        return records


def _page_records(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        raise ExternalAPIError(
            f"Unexpected open-data payload: expected an object, got {type(data).__name__}"
        )
    batch = data.get("hospitais_leitos") or []
    if not isinstance(batch, list) or not all(isinstance(item, dict) for item in batch):
        raise ExternalAPIError("Unexpected open-data payload: hospitais_leitos is not a list of objects")
    return batch
