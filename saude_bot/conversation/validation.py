"""Input validators for questionnaire answers.

Each validator returns ``None`` when the answer is acceptable, or the
retry prompt to send back to the user.
"""

from __future__ import annotations

import re

PHONE_RE = re.compile(r"^[0-9()\-\s]+$")
MIN_PHONE_LENGTH = 10
MIN_AGE = 1
MAX_AGE = 120


def _require_text(value: str, retry_prompt: str) -> str | None:
    if not value or not value.strip():
        return retry_prompt
    return None


def validate_name(value: str) -> str | None:
    return _require_text(value, "Por favor, digite um nome válido.")


def validate_city(value: str) -> str | None:
    return _require_text(value, "Por favor, digite uma cidade válida.")


def validate_neighborhood(value: str) -> str | None:
    return _require_text(value, "Por favor, digite um bairro válido.")


def validate_phone(value: str) -> str | None:
    """Digits, parentheses, hyphens and spaces only, with area code."""
    value = (value or "").strip()
    if not PHONE_RE.match(value) or len(value) < MIN_PHONE_LENGTH:
        return (
            "Parece que este não é um telefone válido. "
            "Por favor, tente novamente com o DDD."
        )
    return None


def validate_age(value: str) -> str | None:
    value = (value or "").strip()
    if not value.isascii() or not value.isdigit() or not MIN_AGE <= int(value) <= MAX_AGE:
        return "Por favor, insira uma idade válida."
    return None


VALIDATORS = {
    "name": validate_name,
    "city": validate_city,
    "neighborhood": validate_neighborhood,
    "phone": validate_phone,
    "age": validate_age,
}
