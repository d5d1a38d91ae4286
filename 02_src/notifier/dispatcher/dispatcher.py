"""NotificationDispatcher implementation."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Protocol
from urllib.parse import urljoin

from ..catalog import ICatalogClient
from ..config import BATCH_SIZE, DEFAULT_CATALOG_SITE_ROOT, DEFAULT_DISPATCH_INTERVAL_SECONDS
from ..errors import CatalogUnavailable, TransportError
from ..logging_config import get_logger
from ..models import Item, Profile
from ..storage import IProfileRepository
from ..transport import ITransport

logger = get_logger(__name__)


@dataclass
class TickReport:
    """Outcome of one dispatch tick."""

    started_at: datetime
    profiles: int = 0
    eligible: int = 0
    notified: int = 0
    messages_sent: int = 0
    failed_sends: int = 0
    catalog_failures: int = 0
    skipped_busy: int = 0


def is_eligible(notification_time: time, now: datetime) -> bool:
    """True when ``now`` falls in the minute of ``notification_time``."""
    return (now.hour, now.minute) == (notification_time.hour, notification_time.minute)


def build_batches(items: list[Item], size: int = BATCH_SIZE) -> list[list[Item]]:
    """Split ``items`` into consecutive chunks of at most ``size``."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [items[i : i + size] for i in range(0, len(items), size)]


def item_url(item: Item, site_root: str = DEFAULT_CATALOG_SITE_ROOT) -> str:
    """Absolute link to an item; catalog URLs are usually site-relative."""
    if item.url.startswith(("http://", "https://")):
        return item.url
    return urljoin(site_root, item.url.lstrip("/"))


def format_batch(items: list[Item], site_root: str = DEFAULT_CATALOG_SITE_ROOT) -> str:
    """Render one outbound message: title line, then link line, per item."""
    return "\n\n".join(f"{item.title}\n{item_url(item, site_root)}" for item in items)


class INotificationDispatcher(Protocol):
    """Periodic digest delivery."""

    async def start(self) -> None:
        """Start the tick loop."""
        ...

    async def stop(self) -> None:
        """Stop the tick loop and wait for in-flight ticks."""
        ...

    async def run_tick(self, now: datetime | None = None) -> TickReport:
        """Evaluate every profile once."""
        ...


class NotificationDispatcher:
    """Fixed-period loop sending catalog digests to eligible profiles."""

    def __init__(
        self,
        repository: IProfileRepository,
        catalog: ICatalogClient,
        transport: ITransport,
        interval_seconds: float = DEFAULT_DISPATCH_INTERVAL_SECONDS,
        batch_size: int = BATCH_SIZE,
        site_root: str = DEFAULT_CATALOG_SITE_ROOT,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._repository = repository
        self._catalog = catalog
        self._transport = transport
        self._interval = interval_seconds
        self._batch_size = batch_size
        self._site_root = site_root
        self._clock = clock

        self._last_fired: dict[str, date] = {}
        self._in_flight: set[str] = set()
        self._ticks: set[asyncio.Task] = set()
        self._loop_task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the tick loop."""
        if self._running:
            return
        logger.info("Starting NotificationDispatcher (every %ss)", self._interval)
        self._running = True
        self._loop_task = asyncio.create_task(self._tick_loop())

    async def stop(self) -> None:
        """Stop the tick loop and abandon in-flight ticks."""
        logger.info("Stopping NotificationDispatcher")
        self._running = False

        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

        ticks = list(self._ticks)
        for task in ticks:
            task.cancel()
        if ticks:
            await asyncio.gather(*ticks, return_exceptions=True)

    def reset(self) -> None:
        """Forget which profiles already fired today."""
        self._last_fired.clear()

    async def _tick_loop(self) -> None:
        """Spawn a tick every interval without waiting for the previous one."""
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while self._running:
            try:
                task = asyncio.create_task(self._safe_tick())
                self._ticks.add(task)
                task.add_done_callback(self._ticks.discard)

                next_at += self._interval
                await asyncio.sleep(max(0.0, next_at - loop.time()))
            except asyncio.CancelledError:
                break

    async def _safe_tick(self) -> None:
        try:
            await self.run_tick()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Dispatch tick failed: %s", e, exc_info=True)

    async def run_tick(self, now: datetime | None = None) -> TickReport:
        """Evaluate every profile once and notify the eligible ones."""
        now = now or self._clock()
        report = TickReport(started_at=now)

        profiles = await self._repository.list_all()
        report.profiles = len(profiles)

        eligible = [
            profile
            for profile in profiles
            if is_eligible(profile.notification_time, now)
            and self._last_fired.get(profile.recipient_id) != now.date()
        ]
        report.eligible = len(eligible)
        if not eligible:
            return report

        results = await asyncio.gather(
            *[self._notify(profile, now, report) for profile in eligible],
            return_exceptions=True,
        )
        for profile, result in zip(eligible, results):
            if isinstance(result, Exception):
                logger.error(
                    "Notification for %s failed: %s", profile.recipient_id, result
                )

        logger.info(
            "Tick %s: %s eligible of %s, %s messages sent",
            now.strftime("%H:%M"),
            report.eligible,
            report.profiles,
            report.messages_sent,
            extra={
                "failed_sends": report.failed_sends,
                "catalog_failures": report.catalog_failures,
            },
        )
        return report

    async def _notify(self, profile: Profile, now: datetime, report: TickReport) -> None:
        """Fetch and send one profile's digest, guarded per recipient."""
        recipient_id = profile.recipient_id
        if recipient_id in self._in_flight:
            report.skipped_busy += 1
            logger.warning(
                "Recipient %s still being processed, skipping",
                recipient_id,
                extra={"recipient_id": recipient_id},
            )
            return
        # A concurrent tick may have finished this recipient since list_all
        if self._last_fired.get(recipient_id) == now.date():
            return

        self._in_flight.add(recipient_id)
        self._last_fired[recipient_id] = now.date()
        try:
            try:
                items = await self._catalog.fetch_items(
                    profile.city, profile.categories[0], profile.events_interval
                )
            except CatalogUnavailable as e:
                report.catalog_failures += 1
                # Allow another tick within the same minute to retry
                self._last_fired.pop(recipient_id, None)
                logger.warning(
                    "Catalog unavailable for %s: %s",
                    recipient_id,
                    e,
                    extra={"recipient_id": recipient_id},
                )
                return

            report.notified += 1
            for batch in build_batches(items, self._batch_size):
                try:
                    await self._transport.send(
                        recipient_id, format_batch(batch, self._site_root)
                    )
                    report.messages_sent += 1
                except TransportError as e:
                    report.failed_sends += 1
                    logger.error(
                        "Batch to %s not delivered: %s",
                        recipient_id,
                        e,
                        extra={"recipient_id": recipient_id},
                    )
        finally:
            self._in_flight.discard(recipient_id)
