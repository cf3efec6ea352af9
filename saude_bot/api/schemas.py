"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Incoming chat message from a web client."""

    message: str = Field(..., min_length=1, max_length=2000, description="The user's message")
    session_id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Unique session identifier for conversation continuity",
    )


class ChatResponse(BaseModel):
    """The bot's reply to one chat message."""

    reply: str = Field(..., description="All reply messages joined by blank lines")
    session_id: str = Field(..., description="The session ID for this conversation")
    completed: bool = Field(False, description="True once the facility lookup has run")


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "saude-bot"
    flow: str


# ── WhatsApp Cloud API webhook payload ──────────────────────────────
# Only the fields the bot reads are modelled; the rest is ignored.


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextBody(_Lenient):
    body: str = ""


class SharedLocation(_Lenient):
    latitude: float
    longitude: float
    name: str | None = None
    address: str | None = None


class IncomingMessage(_Lenient):
    sender: str | None = Field(None, alias="from")
    id: str | None = None
    type: str = "text"
    text: TextBody | None = None
    location: SharedLocation | None = None


class ChangeValue(_Lenient):
    messages: list[IncomingMessage] = Field(default_factory=list)


class Change(_Lenient):
    field: str | None = None
    value: ChangeValue | None = None


class Entry(_Lenient):
    id: str | None = None
    changes: list[Change] = Field(default_factory=list)


class WebhookNotification(_Lenient):
    object: str | None = None
    entry: list[Entry] = Field(default_factory=list)

    def messages(self) -> list[IncomingMessage]:
        """Every message with a sender carried by the notification, in order."""
        return [
            message
            for entry in self.entry
            for change in entry.changes
            if change.value is not None
            for message in change.value.messages
            if message.sender
        ]
