"""Afisha Notifier: event digests for subscribed chat users."""

from .app import Application, IApplication
from .catalog import CatalogClient, ICatalogClient
from .dialogue import DialogueEngine, IDialogueEngine
from .dispatcher import INotificationDispatcher, NotificationDispatcher, TickReport
from .errors import (
    CatalogUnavailable,
    DuplicateRecipient,
    NotifierError,
    ProfileNotFound,
    TransportError,
    UnknownCategory,
    ValidationError,
)
from .models import (
    CATEGORIES,
    DialogueStateName,
    Item,
    Profile,
    ProfileUpdate,
    Session,
)
from .storage import IProfileRepository, Storage
from .transport import ITransport, OutboxTransport, TelegramTransport

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "CATEGORIES",
    "Profile",
    "ProfileUpdate",
    "DialogueStateName",
    "Session",
    "Item",
    # Errors
    "NotifierError",
    "ValidationError",
    "UnknownCategory",
    "ProfileNotFound",
    "DuplicateRecipient",
    "CatalogUnavailable",
    "TransportError",
    # Components
    "IProfileRepository",
    "Storage",
    "ICatalogClient",
    "CatalogClient",
    "ITransport",
    "OutboxTransport",
    "TelegramTransport",
    "IDialogueEngine",
    "DialogueEngine",
    "INotificationDispatcher",
    "NotificationDispatcher",
    "TickReport",
]
