"""Catalog-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Item:
    """A single catalog event, valid for one dispatch evaluation."""

    id: str
    url: str
    title: str
