"""Tests for the static service-point table."""

from __future__ import annotations

import pytest

from saude_bot.facilities.directory import (
    GENERAL_CALL_CENTER,
    find_service_point,
    has_neighborhoods,
    lookup_service_point,
    normalize_name,
    units_in_neighborhood,
)


class TestNormalizeName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Porto Velho", "porto velho"),
            ("  São   Paulo ", "sao paulo"),
            ("ESCOLA DE POLÍCIA", "escola de policia"),
            ("", ""),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_name(raw) == expected


class TestLookupServicePoint:
    def test_city_without_neighborhoods(self):
        assert lookup_service_point("Rio de Janeiro").startswith("Posto Copacabana RJ")

    def test_city_with_accents_matches(self):
        assert lookup_service_point("São Paulo").startswith("Posto Central SP")

    def test_known_neighborhood(self):
        assert lookup_service_point("porto velho", "Areal").startswith("Posto Areal PVH")

    def test_unknown_neighborhood_uses_default(self):
        point = lookup_service_point("Porto Velho", "Embratel")
        assert point.startswith("Central de Atendimento PVH")

    def test_unknown_city(self):
        assert lookup_service_point("Manaus") is None

    def test_has_neighborhoods(self):
        assert has_neighborhoods("PORTO VELHO") is True
        assert has_neighborhoods("Belo Horizonte") is False
        assert has_neighborhoods("Curitiba") is False


class TestFindServicePoint:
    def test_found_message(self):
        text = find_service_point("porto velho", "centro")
        assert text.startswith("Encontrei! O melhor local para você é:")
        assert "📍 Posto Central PVH" in text
        assert "aguardando seu contato" in text

    def test_not_found_points_to_call_center(self):
        text = find_service_point("Manaus")
        assert '"Manaus"' in text
        assert GENERAL_CALL_CENTER in text


class TestUnitsInNeighborhood:
    def test_empty_filter_returns_everything(self):
        assert len(units_in_neighborhood(None)) == 12
        assert len(units_in_neighborhood("")) == 12

    def test_returns_copy(self):
        units = units_in_neighborhood(None)
        units.clear()
        assert len(units_in_neighborhood(None)) == 12
