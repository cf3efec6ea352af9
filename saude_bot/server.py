"""FastAPI server: WhatsApp webhook, chat API and mock facilities API.

Run with:
    uvicorn saude_bot.server:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from saude_bot.api import facilities, routes, webhook
from saude_bot.config import CONVERSATION_FLOW, CORS_ORIGINS, SERVER_HOST, SERVER_PORT
from saude_bot.conversation.engine import ConversationEngine
from saude_bot.services.whatsapp import get_whatsapp_client

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create the conversation engine and WhatsApp client once per process."""
    application.state.engine = ConversationEngine(CONVERSATION_FLOW)
    logger.info("Conversation engine ready (flow=%s)", CONVERSATION_FLOW)
    try:
        application.state.whatsapp = get_whatsapp_client()
    except OSError as exc:
        application.state.whatsapp = None
        logger.warning("WhatsApp replies disabled: %s", exc)
    yield


app = FastAPI(
    title="Saúde Bot",
    description=(
        "Health service assistant: collects the user's basic data and "
        "points them to the nearest health units."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Tag every request with an ``X-Request-ID`` for log correlation."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info(
        "[%s] %s %s", request_id, request.method, request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── Register routes ──────────────────────────────────────────────────
app.include_router(routes.router, prefix="/api")
app.include_router(webhook.router)
app.include_router(facilities.router)


@app.get("/")
async def root():
    return {
        "service": "Saúde Bot",
        "status": "Servidor do Chatbot para WhatsApp está no ar!",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    logger.info("Starting webhook server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "saude_bot.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
