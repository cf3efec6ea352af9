"""FastAPI route definitions for the chat API."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from saude_bot.api.schemas import ChatRequest, ChatResponse, HealthResponse
from saude_bot.conversation.engine import ConversationEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def get_engine(request: Request) -> ConversationEngine:
    """Retrieve the conversation engine created by the app lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(
            status_code=503,
            detail="The assistant is still starting up. Please try again in a moment.",
        )
    return engine


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    return HealthResponse(flow=get_engine(request).flow.value)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """Feed one message into the questionnaire for ``session_id``.

    Facility lookups block on outbound HTTP, so the turn runs in the
    default thread pool via ``asyncio.to_thread``.
    """
    engine = get_engine(http_request)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        reply = await asyncio.to_thread(
            engine.handle_text, f"chat:{request.session_id}", request.message,
        )
    except Exception as e:
        logger.exception("[%s] Error processing chat request", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e

    return ChatResponse(
        reply=reply.text,
        session_id=request.session_id,
        completed=reply.completed,
    )
