"""Client for the local mock facilities API (``GET /postos-saude``)."""

from __future__ import annotations

from pydantic import ValidationError

from saude_bot.config import FACILITIES_API_URL
from saude_bot.facilities.directory import HealthUnit
from saude_bot.services.http_client import ApiClient, ExternalAPIError

FACILITIES_PATH = "/postos-saude"


class FacilitiesApiClient(ApiClient):
    service_name = "facilities_api"

    def __init__(self, base_url: str | None = None):
        super().__init__(base_url or FACILITIES_API_URL)

    def list_by_neighborhood(self, neighborhood: str | None = None) -> list[HealthUnit]:
        """Return the units in *neighborhood*, or every unit when it is empty."""
        params = {"bairro": neighborhood} if neighborhood else None
        data = self._request("GET", FACILITIES_PATH, params=params)
        try:
            return [HealthUnit.model_validate(item) for item in data]
        except (TypeError, ValidationError) as exc:
            raise ExternalAPIError(f"Unexpected facilities payload: {exc}") from exc
