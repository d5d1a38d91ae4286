"""Storage module."""

from .storage import IProfileRepository, Storage

__all__ = ["IProfileRepository", "Storage"]
