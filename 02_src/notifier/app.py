"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .catalog import CatalogClient, ICatalogClient
from .config import (
    DEFAULT_CATALOG_API_ROOT,
    DEFAULT_CATALOG_PAGE_SIZE,
    DEFAULT_CATALOG_SITE_ROOT,
    DEFAULT_DISPATCH_INTERVAL_SECONDS,
    env_float,
    env_int,
    resolve_db_path,
)
from .dialogue import DialogueEngine
from .dispatcher import NotificationDispatcher
from .logging_config import get_logger
from .storage import IProfileRepository, Storage
from .transport import ITransport, OutboxTransport, TelegramTransport

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...


def create_transport() -> ITransport:
    """Build the transport selected by the TRANSPORT env var."""
    kind = os.getenv("TRANSPORT", "outbox").lower()
    if kind == "telegram":
        return TelegramTransport(token=os.getenv("TELEGRAM_BOT_TOKEN", ""))
    if kind == "outbox":
        return OutboxTransport()
    raise ValueError(f"Unknown TRANSPORT: {kind}")


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        transport: ITransport | None = None,
        catalog: ICatalogClient | None = None,
        dispatch_interval: float | None = None,
        run_dispatcher: bool = True,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._site_root = os.getenv("CATALOG_SITE_ROOT", DEFAULT_CATALOG_SITE_ROOT)
        self._dispatch_interval = (
            dispatch_interval
            if dispatch_interval is not None
            else env_float(
                os.getenv("DISPATCH_INTERVAL_SECONDS"),
                DEFAULT_DISPATCH_INTERVAL_SECONDS,
            )
        )
        self._run_dispatcher = run_dispatcher

        # Injected collaborators win over env configuration
        self._transport: ITransport | None = transport
        self._catalog: ICatalogClient | None = catalog

        # Components (will be initialized in start())
        self._storage: IProfileRepository | None = None
        self._dialogue_engine: DialogueEngine | None = None
        self._dispatcher: NotificationDispatcher | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Transport and catalog (external collaborators)
        if self._transport is None:
            self._transport = create_transport()
        if self._catalog is None:
            self._catalog = CatalogClient(
                api_root=os.getenv("CATALOG_API_ROOT", DEFAULT_CATALOG_API_ROOT),
                page_size=env_int(
                    os.getenv("CATALOG_PAGE_SIZE"), DEFAULT_CATALOG_PAGE_SIZE
                ),
            )
        logger.info("Transport %s ready", type(self._transport).__name__)

        # 3. DialogueEngine (depends on Storage, Transport)
        self._dialogue_engine = DialogueEngine(
            repository=self._storage,
            transport=self._transport,
        )
        await self._dialogue_engine.start()

        # 4. NotificationDispatcher (depends on Storage, Catalog, Transport)
        self._dispatcher = NotificationDispatcher(
            repository=self._storage,
            catalog=self._catalog,
            transport=self._transport,
            interval_seconds=self._dispatch_interval,
            site_root=self._site_root,
        )
        if self._run_dispatcher:
            await self._dispatcher.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._dispatcher:
            await self._dispatcher.stop()
        if self._dialogue_engine:
            await self._dialogue_engine.stop()
        if self._catalog:
            await self._catalog.close()
        if self._transport:
            await self._transport.close()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._dialogue_engine:
            self._dialogue_engine.reset()
        if self._dispatcher:
            self._dispatcher.reset()
        if isinstance(self._transport, OutboxTransport):
            self._transport.clear()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")
        logger.info("Reset complete")

    @property
    def storage(self) -> IProfileRepository:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def dialogue_engine(self) -> DialogueEngine:
        """Get dialogue engine instance."""
        if not self._dialogue_engine:
            raise RuntimeError("Application not started")
        return self._dialogue_engine

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Get dispatcher instance."""
        if not self._dispatcher:
            raise RuntimeError("Application not started")
        return self._dispatcher

    @property
    def transport(self) -> ITransport:
        """Get transport instance."""
        if not self._transport:
            raise RuntimeError("Application not started")
        return self._transport
