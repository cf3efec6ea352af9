"""Render facility records as WhatsApp-flavoured text."""

from __future__ import annotations

from urllib.parse import quote

from saude_bot.facilities.directory import HealthUnit

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

# Characters JavaScript's encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def maps_url(query: str) -> str:
    return MAPS_SEARCH_URL + quote(query, safe=_URI_COMPONENT_SAFE)


def format_facility(record: dict, distance_km: float | None = None) -> str:
    """Format one open-data facility record, optionally with its distance."""
    name = record.get("nomeFantasia") or "Nome não informado"
    city = record.get("municipio") or "Cidade não informada"
    parts = [record.get(k) for k in ("logradouro", "numero", "bairro")]
    address = ", ".join(str(p).strip() for p in parts if p and str(p).strip())

    query = f"{name}, {address}, {city}" if address else f"{name}, {city}"
    header = f"📍 *{name}*"
    if distance_km is not None:
        header += f" (~{distance_km:.1f} km)"

    return (
        f"{header}\n"
        f"   Endereço: {address or 'Endereço não informado.'}\n"
        f"   🗺️ Ver no mapa: {maps_url(query)}"
    )


def format_neighborhood_units(units: list[HealthUnit], neighborhood: str) -> str:
    """Reply for a neighborhood lookup against the facilities API."""
    if not units:
        return (
            f'Não encontrei um posto de atendimento no bairro "{neighborhood}". '
            "Recomendo procurar a unidade de saúde mais próxima ou entrar em "
            "contato com a central da prefeitura."
        )

    text = f"Encontrei {len(units)} posto(s) para você no bairro {neighborhood}:\n"
    for unit in units:
        text += f"\n📍 *{unit.nome}*\n   Endereço: {unit.endereco}"
    return (
        text
        + "\n\nPor favor, dirija-se ao local mais conveniente. "
        "Seu atendimento será agilizado."
    )
