"""Catalog module."""

from .client import CatalogClient, ICatalogClient

__all__ = ["CatalogClient", "ICatalogClient"]
