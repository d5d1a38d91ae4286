"""Validation of free-form dialogue input."""

import re
from datetime import time

from ..errors import UnknownCategory, ValidationError
from ..models import CATEGORIES, MAX_EVENTS_INTERVAL

_TIME_RE = re.compile(r"([0-9]{1,2}):([0-9]{1,2})")
_INTERVAL_RE = re.compile(r"[0-9]+")


def parse_categories(text: str) -> list[str]:
    """Split on commas and check every trimmed token against the vocabulary.

    Returns the tokens in input order with repeats removed. Raises
    UnknownCategory for the first token outside the vocabulary.
    """
    categories: list[str] = []
    for part in text.split(","):
        token = part.strip()
        if token not in CATEGORIES:
            raise UnknownCategory(token)
        if token not in categories:
            categories.append(token)
    return categories


def parse_notification_time(text: str) -> time:
    """Parse ``HH:MM`` into a time of day with zero seconds."""
    match = _TIME_RE.fullmatch(text.strip())
    if not match:
        raise ValidationError(f"expected HH:MM, got {text!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(f"time out of range: {text!r}")
    return time(hour, minute, 0)


def parse_events_interval(text: str) -> int:
    """Parse a positive number of days."""
    value = text.strip()
    if not _INTERVAL_RE.fullmatch(value):
        raise ValidationError(f"expected a positive integer, got {text!r}")

    days = int(value)
    if days <= 0:
        raise ValidationError("events interval must be positive")
    if days > MAX_EVENTS_INTERVAL:
        raise ValidationError(f"events interval too large: {text!r}")
    return days
