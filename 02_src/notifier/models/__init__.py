"""Core data models for Afisha Notifier."""

from .catalog import Item
from .dialogue import EDIT_STATES, DialogueStateName, Session
from .profile import CATEGORIES, MAX_EVENTS_INTERVAL, Profile, ProfileUpdate, validate_profile

__all__ = [
    # Profiles
    "CATEGORIES",
    "MAX_EVENTS_INTERVAL",
    "Profile",
    "ProfileUpdate",
    "validate_profile",
    # Dialogue
    "DialogueStateName",
    "EDIT_STATES",
    "Session",
    # Catalog
    "Item",
]
