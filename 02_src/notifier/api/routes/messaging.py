"""Messaging API routes."""

import secrets
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, Header, HTTPException

from ...app import Application
from ...logging_config import get_logger
from ...transport import OutboxTransport

logger = get_logger(__name__)


class MessageRequest(BaseModel):
    """Request model for an inbound message."""

    recipient_id: str
    text: str | None = None


class MessageResponse(BaseModel):
    """Replies produced for the message."""

    replies: list[str]


class OutboxResponse(BaseModel):
    """Messages queued for a recipient."""

    recipient_id: str
    messages: list[str]


def create_messaging_router(
    app: Application, webhook_secret: str | None = None
) -> APIRouter:
    """Create messaging router.

    With ``webhook_secret`` set, Telegram updates must carry it in the
    X-Telegram-Bot-Api-Secret-Token header.
    """
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Send a message to the dialogue engine."""
        try:
            replies = await app.dialogue_engine.handle_message(
                recipient_id=request.recipient_id, text=request.text
            )
            return {"replies": replies}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/telegram/webhook")
    async def telegram_webhook(
        update: dict[str, Any],
        secret_token: str | None = Header(
            default=None, alias="X-Telegram-Bot-Api-Secret-Token"
        ),
    ) -> dict:
        """Accept a Telegram update and feed its message to the dialogue engine."""
        if webhook_secret and not secrets.compare_digest(
            secret_token or "", webhook_secret
        ):
            logger.warning("Rejected webhook update with a wrong secret token")
            raise HTTPException(status_code=403, detail="Invalid secret token")

        message = update.get("message") or update.get("edited_message")
        if not message or "chat" not in message:
            return {"ok": True}

        recipient_id = str(message["chat"]["id"])
        try:
            await app.dialogue_engine.handle_message(
                recipient_id=recipient_id, text=message.get("text")
            )
        except Exception as e:
            # Telegram retries non-2xx updates forever; log and acknowledge
            logger.error("Webhook update for %s failed: %s", recipient_id, e, exc_info=True)
        return {"ok": True}

    @router.get("/outbox/{recipient_id}", response_model=OutboxResponse)
    async def drain_outbox(recipient_id: str) -> dict:
        """Return and remove messages queued for a recipient."""
        transport = app.transport
        if not isinstance(transport, OutboxTransport):
            raise HTTPException(status_code=404, detail="Outbox transport not configured")
        return {"recipient_id": recipient_id, "messages": transport.drain(recipient_id)}

    return router
