"""Dialogue-related data models."""

from dataclasses import dataclass
from datetime import time
from enum import Enum


class DialogueStateName(str, Enum):
    """States of the registration / edit conversation."""

    START = "start"
    AWAIT_CITY = "await_city"
    AWAIT_CATEGORIES = "await_categories"
    AWAIT_NOTIFICATION_TIME = "await_notification_time"
    AWAIT_EVENTS_INTERVAL = "await_events_interval"
    AWAIT_EDIT_CITY = "await_edit_city"
    AWAIT_EDIT_CATEGORIES = "await_edit_categories"
    AWAIT_EDIT_NOTIFICATION_TIME = "await_edit_notification_time"
    AWAIT_EDIT_EVENTS_INTERVAL = "await_edit_events_interval"


EDIT_STATES: dict[str, DialogueStateName] = {
    "city": DialogueStateName.AWAIT_EDIT_CITY,
    "categories": DialogueStateName.AWAIT_EDIT_CATEGORIES,
    "notification_time": DialogueStateName.AWAIT_EDIT_NOTIFICATION_TIME,
    "events_interval": DialogueStateName.AWAIT_EDIT_EVENTS_INTERVAL,
}


@dataclass
class Session:
    """In-memory conversation state of one recipient."""

    recipient_id: str
    state: DialogueStateName = DialogueStateName.START
    city: str | None = None
    categories: list[str] | None = None
    notification_time: time | None = None
