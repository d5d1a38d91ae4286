"""Outbound message transports."""

from collections import defaultdict
from typing import Protocol

import httpx

from ..config import TELEGRAM_API_ROOT
from ..errors import TransportError
from ..logging_config import get_logger

logger = get_logger(__name__)


class ITransport(Protocol):
    """Delivery of plain-text messages to a recipient."""

    async def send(self, recipient_id: str, text: str) -> None:
        """Send ``text`` to ``recipient_id``. Raises TransportError."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...


class OutboxTransport:
    """Keeps outbound messages in memory until a client drains them."""

    def __init__(self):
        self._outbox: dict[str, list[str]] = defaultdict(list)

    async def send(self, recipient_id: str, text: str) -> None:
        """Append ``text`` to the recipient's outbox."""
        self._outbox[recipient_id].append(text)
        logger.debug("Queued message for %s (%s chars)", recipient_id, len(text))

    def peek(self, recipient_id: str) -> list[str]:
        """Get queued messages without removing them."""
        return list(self._outbox.get(recipient_id, []))

    def drain(self, recipient_id: str) -> list[str]:
        """Get and remove queued messages for a recipient."""
        return self._outbox.pop(recipient_id, [])

    def clear(self) -> None:
        """Drop every queued message."""
        self._outbox.clear()

    async def close(self) -> None:
        """Nothing to release."""
        return


class TelegramTransport:
    """Sends messages through the Telegram Bot API."""

    def __init__(
        self,
        token: str,
        api_root: str = TELEGRAM_API_ROOT,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        if not token:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable not set")
        self._url = f"{api_root.rstrip('/')}/bot{token}/sendMessage"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, recipient_id: str, text: str) -> None:
        """Send ``text`` to the chat ``recipient_id``."""
        try:
            response = await self._client.post(
                self._url,
                json={
                    "chat_id": recipient_id,
                    "text": text,
                    "disable_web_page_preview": True,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Telegram send to {recipient_id} failed: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
