"""Centralized configuration for the Porto Velho health service chatbot.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/saude-bot/<VARIABLE_NAME>``.

WhatsApp credentials are optional at import time so that the terminal
chat and the mock facilities API run without them.  Components that
need a secret call :func:`require_setting`.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415: lazy import keeps boto3 out of test runs

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/saude-bot/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _get_secret(name: str) -> str | None:
    """Return a secret from env-var or SSM, or ``None`` when unset."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value

    if _ON_AWS:
        return _get_ssm_parameter(name)
    return None


def require_setting(name: str, value: str | None) -> str:
    """Return *value* or raise a clear error naming the missing setting."""
    if value:
        return value
    raise OSError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store /saude-bot/{name} (AWS)."
    )


# ── WhatsApp Cloud API ──────────────────────────────────────────────
WHATSAPP_TOKEN: str | None = _get_secret("WHATSAPP_TOKEN")
VERIFY_TOKEN: str | None = _get_secret("VERIFY_TOKEN")
PHONE_NUMBER_ID: str | None = _get_secret("PHONE_NUMBER_ID")
WHATSAPP_API_BASE_URL: str = os.getenv(
    "WHATSAPP_API_BASE_URL", "https://graph.facebook.com/v18.0",
)

# ── Facility data sources ───────────────────────────────────────────
FACILITIES_API_URL: str = os.getenv(
    "FACILITIES_API_URL", "http://localhost:8080",
)
OPEN_DATA_BASE_URL: str = os.getenv(
    "OPEN_DATA_BASE_URL", "https://apidadosabertos.saude.gov.br",
)
NOMINATIM_BASE_URL: str = os.getenv(
    "NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org",
)
NOMINATIM_USER_AGENT: str = os.getenv("NOMINATIM_USER_AGENT", "ChatbotSaude/1.0")
NEARBY_LIMIT: int = int(os.getenv("NEARBY_LIMIT", "5"))

# ── Region cache ────────────────────────────────────────────────────
CACHE_FOLDER: str = os.getenv("CACHE_FOLDER", "./api_cache/")
CACHE_DURATION_HOURS: float = float(os.getenv("CACHE_DURATION_HOURS", "24"))

# ── Conversation ────────────────────────────────────────────────────
CONVERSATION_FLOW: str = os.getenv("CONVERSATION_FLOW", "neighborhood")
SESSION_IDLE_MINUTES: float = float(os.getenv("SESSION_IDLE_MINUTES", "60"))

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8080"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
