"""Tests for facility message formatting."""

from __future__ import annotations

from saude_bot.facilities.directory import HealthUnit
from saude_bot.facilities.formatting import (
    MAPS_SEARCH_URL,
    format_facility,
    format_neighborhood_units,
    maps_url,
)


class TestMapsUrl:
    def test_encodes_like_encode_uri_component(self):
        url = maps_url("UBS São Sebastião, R. Goiás, 213 (fundos)")
        assert url.startswith(MAPS_SEARCH_URL)
        query = url[len(MAPS_SEARCH_URL):]
        assert " " not in query
        assert "%2C" in query        # commas are escaped
        assert "(fundos)" in query   # parentheses are left alone
        assert "S%C3%A3o" in query   # UTF-8 percent-encoding


class TestFormatFacility:
    def test_full_record_with_distance(self):
        record = {
            "nomeFantasia": "Hospital de Base",
            "logradouro": "Av. Jorge Teixeira",
            "numero": "3766",
            "bairro": "Industrial",
            "municipio": "Porto Velho",
        }
        text = format_facility(record, 2.345)
        lines = text.split("\n")
        assert lines[0] == "📍 *Hospital de Base* (~2.3 km)"
        assert lines[1] == "   Endereço: Av. Jorge Teixeira, 3766, Industrial"
        assert lines[2] == (
            "   🗺️ Ver no mapa: " + maps_url(
                "Hospital de Base, Av. Jorge Teixeira, 3766, Industrial, Porto Velho"
            )
        )

    def test_missing_fields_use_placeholders(self):
        text = format_facility({}, 0.04)
        assert "📍 *Nome não informado* (~0.0 km)" in text
        assert "Endereço: Endereço não informado." in text
        assert maps_url("Nome não informado, Cidade não informada") in text

    def test_skips_blank_address_parts(self):
        text = format_facility({"nomeFantasia": "UPA", "logradouro": "Rua A", "numero": " ",
                                "bairro": None, "municipio": "Ariquemes"})
        assert "Endereço: Rua A\n" in text

    def test_without_distance(self):
        text = format_facility({"nomeFantasia": "UPA Sul", "municipio": "Porto Velho"})
        assert text.split("\n")[0] == "📍 *UPA Sul*"


class TestFormatNeighborhoodUnits:
    def test_lists_units(self):
        units = [
            HealthUnit(id=5, nome="UBS Maurício Bustani", endereco="Av. Campos Sales, 2697", bairro="centro"),
            HealthUnit(id=6, nome="Policlínica Ana Adelaide", endereco="Av. Campos Sales, 1850", bairro="centro"),
        ]
        text = format_neighborhood_units(units, "Centro")
        assert text.startswith("Encontrei 2 posto(s) para você no bairro Centro:\n")
        assert "\n📍 *UBS Maurício Bustani*\n   Endereço: Av. Campos Sales, 2697" in text
        assert "*Policlínica Ana Adelaide*" in text
        assert text.endswith("Seu atendimento será agilizado.")

    def test_empty_list(self):
        text = format_neighborhood_units([], "Copacabana")
        assert text.startswith('Não encontrei um posto de atendimento no bairro "Copacabana".')
        assert "central da prefeitura" in text
