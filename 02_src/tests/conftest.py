"""Pytest configuration and fixtures."""

from datetime import time

import pytest
import pytest_asyncio

from notifier.errors import CatalogUnavailable
from notifier.models import Item, Profile


class FakeCatalog:
    """In-memory catalog returning canned items per (city, category)."""

    def __init__(self, items: dict[tuple[str, str], list[Item]] | None = None):
        self.items = items or {}
        self.calls: list[tuple[str, str, int]] = []
        self.unavailable: set[str] = set()
        self.closed = False

    async def fetch_items(self, city: str, category: str, lookahead_days: int) -> list[Item]:
        self.calls.append((city, category, lookahead_days))
        if city in self.unavailable:
            raise CatalogUnavailable(f"catalog down for {city}")
        return list(self.items.get((city, category), []))

    async def close(self) -> None:
        self.closed = True


def make_items(count: int, prefix: str = "event") -> list[Item]:
    """Build ``count`` items with predictable ids."""
    return [
        Item(id=f"{prefix}-{i}", url=f"moscow/cinema/{prefix}-{i}", title=f"Title {i}")
        for i in range(1, count + 1)
    ]


def make_profile(recipient_id: str = "100", **overrides) -> Profile:
    """Build a valid profile."""
    fields = {
        "recipient_id": recipient_id,
        "city": "Moscow",
        "categories": ["cinema", "concert"],
        "notification_time": time(19, 0),
        "events_interval": 3,
    }
    fields.update(overrides)
    return Profile(**fields)


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from notifier.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def outbox():
    """Create in-memory outbound transport."""
    from notifier.transport import OutboxTransport

    return OutboxTransport()


@pytest.fixture
def catalog():
    """Create fake catalog."""
    return FakeCatalog()


@pytest_asyncio.fixture
async def dialogue_engine(storage, outbox):
    """Create DialogueEngine for testing."""
    from notifier.dialogue import DialogueEngine

    engine = DialogueEngine(repository=storage, transport=outbox)
    await engine.start()
    yield engine
    await engine.stop()


@pytest.fixture
def dispatcher(storage, catalog, outbox):
    """Create NotificationDispatcher without starting its loop."""
    from notifier.dispatcher import NotificationDispatcher

    return NotificationDispatcher(
        repository=storage,
        catalog=catalog,
        transport=outbox,
        site_root="https://afisha.yandex.ru/",
    )
