"""Transport module."""

from .transport import ITransport, OutboxTransport, TelegramTransport

__all__ = ["ITransport", "OutboxTransport", "TelegramTransport"]
