"""WhatsApp Cloud API webhook.

``GET /webhook`` answers Meta's verify-token handshake.  ``POST /webhook``
acknowledges every notification with 200 right away and runs the
conversation turns in a background task, sending replies through the
Graph API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from saude_bot import config
from saude_bot.api.schemas import IncomingMessage, WebhookNotification
from saude_bot.conversation.engine import ConversationEngine, Reply
from saude_bot.services.http_client import ExternalAPIError
from saude_bot.services.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)

router = APIRouter()

WHATSAPP_OBJECT = "whatsapp_business_account"


@router.get("/webhook", response_class=PlainTextResponse)
async def verify_webhook(
    mode: str | None = Query(None, alias="hub.mode"),
    token: str | None = Query(None, alias="hub.verify_token"),
    challenge: str | None = Query(None, alias="hub.challenge"),
):
    """Echo ``hub.challenge`` when Meta presents our verify token."""
    if not mode or not token:
        raise HTTPException(status_code=400, detail="Missing verification parameters.")

    if mode == "subscribe" and config.VERIFY_TOKEN and token == config.VERIFY_TOKEN:
        logger.info("Webhook verified successfully")
        return challenge or ""

    logger.warning("Webhook verification failed (mode=%s)", mode)
    raise HTTPException(status_code=403, detail="Verification token mismatch")


@router.post("/webhook")
async def receive_webhook(request: Request, background_tasks: BackgroundTasks):
    """Acknowledge every delivery with 200 so Meta does not redeliver it."""
    try:
        notification = WebhookNotification.model_validate(await request.json())
    except (ValueError, ValidationError):
        logger.warning("Ignoring malformed webhook payload", exc_info=True)
        return {"status": "ignored"}

    if notification.object != WHATSAPP_OBJECT:
        logger.debug("Ignoring webhook for object %s", notification.object)
        return {"status": "ignored"}

    messages = notification.messages()
    if not messages:
        return {"status": "ok", "received": 0}

    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        logger.error("Engine not ready; dropping %d webhook messages", len(messages))
        return {"status": "unavailable", "received": len(messages)}

    sender = getattr(request.app.state, "whatsapp", None)
    background_tasks.add_task(process_messages, engine, sender, messages)
    return {"status": "ok", "received": len(messages)}


# ── Background processing ───────────────────────────────────────────


def process_messages(
    engine: ConversationEngine,
    sender: WhatsAppClient | None,
    messages: list[IncomingMessage],
) -> None:
    for message in messages:
        user_id = f"whatsapp:{message.sender}"
        try:
            if message.type == "text" and message.text is not None:
                logger.info('Message from %s: "%s"', message.sender, message.text.body)
                reply = engine.handle_text(user_id, message.text.body)
            elif message.type == "location" and message.location is not None:
                loc = message.location
                reply = engine.handle_location(user_id, loc.latitude, loc.longitude)
            else:
                logger.debug("Ignoring %s message from %s", message.type, message.sender)
                continue
        except Exception:
            logger.exception("Error handling message from %s", message.sender)
            continue

        _deliver(sender, message.sender, reply)


def _deliver(sender: WhatsAppClient | None, to: str, reply: Reply) -> None:
    if not reply.messages:
        return
    if sender is None:
        logger.error("WhatsApp client not configured; dropping %d replies to %s",
                     len(reply.messages), to)
        return
    for text in reply.messages:
        try:
            sender.send_text(to, text)
        except ExternalAPIError:
            logger.exception("Error sending message to %s", to)
