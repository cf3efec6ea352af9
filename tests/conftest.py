"""Shared test fixtures for the Saúde Bot test suite."""

from __future__ import annotations

import os
import tempfile
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so config.py picks these values up.
    """
    os.environ.setdefault("VERIFY_TOKEN", "test-verify-token")
    os.environ.setdefault("WHATSAPP_TOKEN", "test-whatsapp-token")
    os.environ.setdefault("PHONE_NUMBER_ID", "1234567890")
    os.environ.setdefault("CACHE_FOLDER", tempfile.mkdtemp(prefix="saude-bot-cache-"))
    os.environ.setdefault("METRICS_ENABLED", "false")


def make_response(data, status_code: int = 200) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = data
    mock.text = str(data)
    return mock


@pytest.fixture
def mock_response():
    """Factory fixture for mock ``httpx.Response`` objects."""
    return make_response


@pytest.fixture
def porto_velho_records() -> list[dict]:
    """Open-data records around Porto Velho (coordinates use comma decimals)."""
    return [
        {
            "nomeFantasia": "Hospital de Base Ary Pinheiro",
            "logradouro": "Av. Jorge Teixeira",
            "numero": "3766",
            "bairro": "Industrial",
            "municipio": "Porto Velho",
            "latitude": "-8,7439",
            "longitude": "-63,8834",
        },
        {
            "nomeFantasia": "Hospital João Paulo II",
            "logradouro": "Av. Campos Sales",
            "numero": "4295",
            "bairro": "Aponiã",
            "municipio": "Porto Velho",
            "latitude": "-8.7301",
            "longitude": "-63.8718",
        },
        {
            "nomeFantasia": "Hospital Regional de Ariquemes",
            "logradouro": "Av. Jamari",
            "numero": "",
            "bairro": "",
            "municipio": "Ariquemes",
            "latitude": "-9,9133",
            "longitude": "-63,0408",
        },
        {
            "nomeFantasia": "Unidade Sem Coordenadas",
            "municipio": "Porto Velho",
            "latitude": None,
            "longitude": "",
        },
    ]
