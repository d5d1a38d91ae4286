"""Dialogue module."""

from .engine import DialogueEngine, IDialogueEngine, parse_command
from .parsing import parse_categories, parse_events_interval, parse_notification_time

__all__ = [
    "DialogueEngine",
    "IDialogueEngine",
    "parse_command",
    "parse_categories",
    "parse_events_interval",
    "parse_notification_time",
]
