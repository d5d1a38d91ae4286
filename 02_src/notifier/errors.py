"""
Exception hierarchy for Afisha Notifier.

All exceptions inherit from NotifierError so callers at the process edges
(tick loop, API routes) can contain library-specific failures in one place.
"""


class NotifierError(Exception):
    """Base exception for notifier errors."""

    pass


class ValidationError(NotifierError):
    """Raised when user input or a profile fails validation.

    Examples:
        - Category token outside the fixed vocabulary
        - Notification time not in HH:MM form or out of range
        - Non-numeric or non-positive events interval
    """

    pass


class ProfileNotFound(NotifierError):
    """Raised when no profile exists for a recipient."""

    def __init__(self, recipient_id: str):
        super().__init__(f"No profile for recipient {recipient_id}")
        self.recipient_id = recipient_id


class DuplicateRecipient(NotifierError):
    """Raised when creating a profile for a recipient that already has one."""

    def __init__(self, recipient_id: str):
        super().__init__(f"Profile already exists for recipient {recipient_id}")
        self.recipient_id = recipient_id


class CatalogUnavailable(NotifierError):
    """Raised when the event catalog cannot be read.

    Examples:
        - Connection errors and timeouts
        - Non-2xx responses on any page
        - Payload missing ``paging.total`` or ``data``
    """

    pass


class TransportError(NotifierError):
    """Raised when an outbound message cannot be delivered."""

    pass


class UnknownCategory(ValidationError):
    """Raised when a category token is not in the vocabulary."""

    def __init__(self, token: str):
        super().__init__(f"{token!r} is not a category")
        self.token = token
