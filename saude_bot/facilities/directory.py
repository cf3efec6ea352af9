"""Static facility data: the terminal service-point table and the seed list
served by the mock facilities API.
"""

from __future__ import annotations

import unicodedata

from pydantic import BaseModel

GENERAL_CALL_CENTER = "(11) 4002-8922"
DEFAULT_KEY = "default"


def normalize_name(value: str) -> str:
    """Lower-case, trim, collapse whitespace and strip accents.

    >>> normalize_name("  São   Sebastião ")
    'sao sebastiao'
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


# ── Service points by city (and neighborhood) ───────────────────────
# A city maps either to a single service point or to a neighborhood
# table with a ``default`` entry.

SERVICE_POINTS: dict[str, str | dict[str, str]] = {
    "sao paulo": "Posto Central SP - Av. Paulista, 1234. Tel: (11) 9999-0001",
    "rio de janeiro": "Posto Copacabana RJ - Av. Atlântica, 5678. Tel: (21) 9999-0002",
    "belo horizonte": "Posto Savassi BH - Rua Fernandes Tourinho, 90. Tel: (31) 9999-0003",
    "porto velho": {
        "caiari": "Posto Caiari PVH - Av. Carlos Gomes, 100. Tel: (69) 9999-0004",
        "centro": "Posto Central PVH - Av. Sete de Setembro, 500. Tel: (69) 9999-0005",
        "areal": "Posto Areal PVH - Rua Jaci Paraná, 2000. Tel: (69) 9999-0006",
        "olaria": "Posto Olaria PVH - Av. Pinheiro Machado, 800. Tel: (69) 9999-0007",
        DEFAULT_KEY: (
            "Central de Atendimento PVH - Não encontramos um posto no seu bairro. "
            "Contato geral: (69) 3222-1234"
        ),
    },
}


def has_neighborhoods(city: str) -> bool:
    """True when *city* needs a neighborhood to pick its service point."""
    return isinstance(SERVICE_POINTS.get(normalize_name(city)), dict)


def lookup_service_point(city: str, neighborhood: str | None = None) -> str | None:
    """Return the service point line for *city*/*neighborhood*, if any."""
    entry = SERVICE_POINTS.get(normalize_name(city))
    if isinstance(entry, dict):
        key = normalize_name(neighborhood or "")
        return entry.get(key) or entry[DEFAULT_KEY]
    return entry


def find_service_point(city: str, neighborhood: str | None = None) -> str:
    """Build the user-facing message naming the best service point."""
    point = lookup_service_point(city, neighborhood)
    if point:
        return (
            "Encontrei! O melhor local para você é:\n"
            f"📍 {point}\n"
            "Eles já foram notificados e estão aguardando seu contato."
        )
    return (
        f'Não encontrei um posto de atendimento em "{city}".\n'
        "Você será direcionado para nossa central de atendimento geral "
        f"no número: {GENERAL_CALL_CENTER}."
    )


# ── Porto Velho basic health units (mock API seed) ──────────────────


class HealthUnit(BaseModel):
    """A health unit as served by ``GET /postos-saude``."""

    id: int
    nome: str
    endereco: str
    bairro: str


HEALTH_UNITS: list[HealthUnit] = [
    HealthUnit(id=1, nome="UBS Aponiã", endereco="R. Andréia, 4851", bairro="aponiã"),
    HealthUnit(id=2, nome="UBS Agenor de Carvalho", endereco="R. Anari, 2220", bairro="agenor de carvalho"),
    HealthUnit(id=3, nome="UBS Hamilton Gondim", endereco="R. Veleiros, 3144", bairro="socialista"),
    HealthUnit(id=4, nome="UBS Castanheiras", endereco="Av. Mamoré, 4000", bairro="castanheiras"),
    HealthUnit(id=5, nome="UBS Maurício Bustani", endereco="Av. Campos Sales, 2697", bairro="centro"),
    HealthUnit(id=6, nome="Policlínica Ana Adelaide", endereco="Av. Campos Sales, 1850", bairro="centro"),
    HealthUnit(id=7, nome="UBS Ernandes Índio", endereco="Av. Amazonas, 5328", bairro="escola de polícia"),
    HealthUnit(id=8, nome="UBS Pedacinho de Chão", endereco="R. Petrolina, 500", bairro="embratel"),
    HealthUnit(id=9, nome="UBS Caladinho", endereco="R. Tancredo Neves, 4587", bairro="caladinho"),
    HealthUnit(id=10, nome="UBS Nova Floresta", endereco="R. João Paulo I, s/n", bairro="nova floresta"),
    HealthUnit(id=11, nome="UBS São Sebastião", endereco="R. Goiás, 213", bairro="são sebastião"),
    HealthUnit(id=12, nome="UBS Mariana", endereco="R. Piraíba, s/n", bairro="mariana"),
]


def units_in_neighborhood(neighborhood: str | None) -> list[HealthUnit]:
    """Filter :data:`HEALTH_UNITS` by neighborhood; all units when empty."""
    if not neighborhood:
        return list(HEALTH_UNITS)
    wanted = normalize_name(neighborhood)
    return [unit for unit in HEALTH_UNITS if normalize_name(unit.bairro) == wanted]
