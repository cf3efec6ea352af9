"""Tests for the Ministry of Health open-data client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from saude_bot.services.cache import RegionCache
from saude_bot.services.http_client import ExternalAPIError
from saude_bot.services.open_data import HOSPITALS_PATH, MAX_PAGES, OpenDataClient


def _mock_response(data, status_code: int = 200) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = data
    mock.text = str(data)
    return mock


def _records(n: int, prefix: str = "Hospital") -> list[dict]:
    return [{"nomeFantasia": f"{prefix} {i}"} for i in range(n)]


class TestHospitalsByState:
    def test_fetches_and_caches(self, tmp_path):
        cache = RegionCache(tmp_path)
        client = OpenDataClient(cache=cache)
        payload = {"hospitais_leitos": _records(3)}

        with patch.object(
            client._client, "request", return_value=_mock_response(payload),
        ) as mock_req:
            result = client.hospitals_by_state("RO")
            args, kwargs = mock_req.call_args
            assert args == ("GET", HOSPITALS_PATH)
            assert kwargs["params"]["uf"] == "ro"

        assert result == payload["hospitais_leitos"]
        assert cache.get("ro") == result

    def test_uses_cache_on_second_call(self, tmp_path):
        client = OpenDataClient(cache=RegionCache(tmp_path))
        payload = {"hospitais_leitos": _records(2)}

        with patch.object(
            client._client, "request", return_value=_mock_response(payload),
        ) as mock_req:
            client.hospitals_by_state("ro")
            client.hospitals_by_state("ro")
            assert mock_req.call_count == 1

    def test_fresh_cache_skips_network(self, tmp_path):
        cache = RegionCache(tmp_path)
        cache.put("ro", _records(1, "Cached"))
        client = OpenDataClient(cache=cache)

        with patch.object(client._client, "request") as mock_req:
            assert client.hospitals_by_state("ro") == _records(1, "Cached")
            mock_req.assert_not_called()

    def test_missing_key_yields_empty_list(self, tmp_path):
        client = OpenDataClient(cache=RegionCache(tmp_path))
        with patch.object(client._client, "request", return_value=_mock_response({})):
            assert client.hospitals_by_state("ro") == []

    def test_api_failure_propagates_and_is_not_cached(self, tmp_path):
        cache = RegionCache(tmp_path)
        client = OpenDataClient(cache=cache)
        with patch.object(client, "_request", side_effect=ExternalAPIError("down")):
            with pytest.raises(ExternalAPIError):
                client.hospitals_by_state("ro")
        assert cache.get("ro") is None


class TestPagination:
    def test_follows_full_pages(self, tmp_path):
        client = OpenDataClient(cache=RegionCache(tmp_path), page_size=2)
        pages = [
            _mock_response({"hospitais_leitos": _records(2, "A")}),
            _mock_response({"hospitais_leitos": _records(2, "B")}),
            _mock_response({"hospitais_leitos": _records(1, "C")}),
        ]
        with patch.object(client._client, "request", side_effect=pages) as mock_req:
            result = client.hospitals_by_state("ro")
            offsets = [c.kwargs["params"]["offset"] for c in mock_req.call_args_list]

        assert len(result) == 5
        assert offsets == [0, 2, 4]

    def test_stops_after_max_pages(self, tmp_path):
        client = OpenDataClient(cache=RegionCache(tmp_path), page_size=1)
        with patch.object(
            client._client, "request",
            return_value=_mock_response({"hospitais_leitos": _records(1)}),
        ) as mock_req:
            result = client.hospitals_by_state("ro")
            assert mock_req.call_count == MAX_PAGES
        assert len(result) == MAX_PAGES


class TestPayloadShape:
    @pytest.mark.parametrize(
        "payload",
        [
            ["not", "a", "dict"],
            "Service Unavailable",
            {"hospitais_leitos": "sem dados"},
            {"hospitais_leitos": [{"nomeFantasia": "UBS A"}, "UBS B"]},
        ],
    )
    def test_unexpected_payload_raises_api_error(self, tmp_path, payload):
        cache = RegionCache(tmp_path)
        client = OpenDataClient(cache=cache)
        with patch.object(client._client, "request", return_value=_mock_response(payload)):
            with pytest.raises(ExternalAPIError, match="Unexpected open-data payload"):
                client.hospitals_by_state("ro")
        assert cache.get("ro") is None


class TestCacheFailures:
    def test_unwritable_cache_still_returns_records(self, tmp_path):
        blocker = tmp_path / "not-a-folder"
        blocker.write_text("occupied")
        client = OpenDataClient(cache=RegionCache(blocker / "cache"))
        payload = {"hospitais_leitos": _records(1)}

        with patch.object(client._client, "request", return_value=_mock_response(payload)):
            assert client.hospitals_by_state("ro") == _records(1)

    def test_cache_file_without_record_list_is_a_miss(self, tmp_path):
        cache = RegionCache(tmp_path)
        cache.path_for("ro").write_text(
            '{"timestamp": "2099-01-01T00:00:00+00:00", "data": {"oops": 1}}', encoding="utf-8",
        )
        client = OpenDataClient(cache=cache)
        payload = {"hospitais_leitos": _records(2)}

        with patch.object(
            client._client, "request", return_value=_mock_response(payload),
        ) as mock_req:
            assert client.hospitals_by_state("ro") == _records(2)
            mock_req.assert_called_once()
