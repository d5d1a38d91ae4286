"""Profile-related data models."""

from dataclasses import dataclass
from datetime import time

from ..errors import ValidationError

CATEGORIES: tuple[str, ...] = (
    "cinema",
    "concert",
    "theatre",
    "art",
    "standup",
    "show",
    "quest",
)

# Largest value an SQLite INTEGER column holds
MAX_EVENTS_INTERVAL = 2**63 - 1


@dataclass(frozen=True)
class Profile:
    """A persisted subscription of one recipient."""

    recipient_id: str
    city: str
    categories: list[str]
    notification_time: time
    events_interval: int  # days ahead to include
    id: int | None = None


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile update. ``None`` keeps the stored value."""

    city: str | None = None
    categories: list[str] | None = None
    notification_time: time | None = None
    events_interval: int | None = None

    def is_empty(self) -> bool:
        """True when no field is set."""
        return all(
            value is None
            for value in (
                self.city,
                self.categories,
                self.notification_time,
                self.events_interval,
            )
        )

    def apply(self, profile: Profile) -> Profile:
        """Merge this update over ``profile`` field by field."""
        return Profile(
            id=profile.id,
            recipient_id=profile.recipient_id,
            city=self.city if self.city is not None else profile.city,
            categories=(
                list(self.categories)
                if self.categories is not None
                else list(profile.categories)
            ),
            notification_time=(
                self.notification_time
                if self.notification_time is not None
                else profile.notification_time
            ),
            events_interval=(
                self.events_interval
                if self.events_interval is not None
                else profile.events_interval
            ),
        )


def validate_profile(profile: Profile) -> None:
    """Raise ValidationError if ``profile`` breaks a Profile invariant."""
    if not profile.recipient_id:
        raise ValidationError("recipient_id must not be empty")
    if not profile.city or not profile.city.strip():
        raise ValidationError("city must not be empty")
    if not profile.categories:
        raise ValidationError("categories must not be empty")
    for category in profile.categories:
        if category not in CATEGORIES:
            raise ValidationError(f"unknown category: {category!r}")
    if isinstance(profile.events_interval, bool) or profile.events_interval <= 0:
        raise ValidationError("events_interval must be a positive integer")
    if profile.events_interval > MAX_EVENTS_INTERVAL:
        raise ValidationError("events_interval is too large")
