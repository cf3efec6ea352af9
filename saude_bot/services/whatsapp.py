"""Outbound messages through the WhatsApp Cloud (Graph) API."""

from __future__ import annotations

import logging
import threading
from typing import Any

from saude_bot.config import (
    PHONE_NUMBER_ID,
    WHATSAPP_API_BASE_URL,
    WHATSAPP_TOKEN,
    require_setting,
)
from saude_bot.services.http_client import ApiClient

logger = logging.getLogger(__name__)


class WhatsAppClient(ApiClient):
    service_name = "whatsapp"

    def __init__(
        self,
        token: str | None = None,
        phone_number_id: str | None = None,
        base_url: str | None = None,
    ):
        self._phone_number_id = require_setting(
            "PHONE_NUMBER_ID", phone_number_id or PHONE_NUMBER_ID,
        )
        token = require_setting("WHATSAPP_TOKEN", token or WHATSAPP_TOKEN)
        super().__init__(
            base_url or WHATSAPP_API_BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )

    def send_text(self, to: str, text: str) -> dict[str, Any]:
        """Send a plain text message to the WhatsApp user *to*."""
        result = self._request(
            "POST",
            f"/{self._phone_number_id}/messages",
            json_body={
                "messaging_product": "whatsapp",
                "to": to,
                "text": {"body": text},
            },
        )
        logger.info("Reply sent to %s (%d chars)", to, len(text))
        return result


# ── Module-level singleton (thread-safe) ────────────────────────────
_client: WhatsAppClient | None = None
_client_lock = threading.Lock()


def get_whatsapp_client() -> WhatsAppClient:
    """Return the shared WhatsAppClient, creating it on first use."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = WhatsAppClient()
    return _client
