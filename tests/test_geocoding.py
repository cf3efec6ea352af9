"""Tests for the Nominatim reverse-geocoding client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from saude_bot.services.geocoding import GeocodingClient, Region
from saude_bot.services.http_client import ExternalAPIError


def _mock_response(data, status_code: int = 200) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = data
    mock.text = str(data)
    return mock


class TestReverse:
    def test_reads_state_code(self):
        client = GeocodingClient()
        data = {"address": {"state_code": "RO", "city": "Porto Velho"}}
        with patch.object(client._client, "request", return_value=_mock_response(data)):
            assert client.reverse(-8.76, -63.90) == Region("ro", "Porto Velho")

    def test_falls_back_to_iso_subdivision(self):
        client = GeocodingClient()
        data = {"address": {"ISO3166-2-lvl4": "BR-AC", "town": "Xapuri"}}
        with patch.object(client._client, "request", return_value=_mock_response(data)):
            region = client.reverse(-10.65, -68.50)
        assert region.state_code == "ac"
        assert region.city == "Xapuri"

    def test_returns_none_without_state(self):
        client = GeocodingClient()
        data = {"address": {"country": "Brasil"}}
        with patch.object(client._client, "request", return_value=_mock_response(data)):
            assert client.reverse(0.0, 0.0) is None

    def test_returns_none_for_error_payload(self):
        client = GeocodingClient()
        with patch.object(
            client._client, "request",
            return_value=_mock_response({"error": "Unable to geocode"}),
        ):
            assert client.reverse(0.0, -30.0) is None

    def test_returns_none_when_api_fails(self):
        client = GeocodingClient()
        with patch.object(client, "_request", side_effect=ExternalAPIError("down")):
            assert client.reverse(-8.76, -63.90) is None

    def test_sends_coordinates_and_format(self):
        client = GeocodingClient()
        data = {"address": {"state_code": "RO"}}
        with patch.object(
            client._client, "request", return_value=_mock_response(data),
        ) as mock_req:
            client.reverse(-8.76, -63.90)
            args, kwargs = mock_req.call_args
            assert args == ("GET", "/reverse")
            assert kwargs["params"] == {"format": "json", "lat": -8.76, "lon": -63.90}

    def test_sets_user_agent(self):
        client = GeocodingClient(user_agent="TestAgent/2.0")
        assert client._client.headers["User-Agent"] == "TestAgent/2.0"
