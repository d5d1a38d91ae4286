"""Event catalog client (Yandex Afisha style API)."""

from datetime import date
from typing import Callable, Protocol

import httpx

from ..config import (
    DEFAULT_CATALOG_API_ROOT,
    DEFAULT_CATALOG_PAGE_SIZE,
    DEFAULT_CATALOG_TIMEOUT,
)
from ..errors import CatalogUnavailable
from ..logging_config import get_logger
from ..models import Item

logger = get_logger(__name__)


class ICatalogClient(Protocol):
    """Access to the external event listing."""

    async def fetch_items(
        self, city: str, category: str, lookahead_days: int
    ) -> list[Item]:
        """Fetch every item for one category, draining all pages."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class CatalogClient:
    """Paginating HTTP client for ``events/actual``."""

    def __init__(
        self,
        api_root: str = DEFAULT_CATALOG_API_ROOT,
        page_size: int = DEFAULT_CATALOG_PAGE_SIZE,
        timeout: float = DEFAULT_CATALOG_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        today: Callable[[], date] = date.today,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._api_root = api_root if api_root.endswith("/") else api_root + "/"
        self._page_size = page_size
        self._today = today
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_items(
        self, city: str, category: str, lookahead_days: int
    ) -> list[Item]:
        """Fetch every item for one category, draining all pages.

        The first page reports ``paging.total``; follow-up pages advance
        ``offset`` by the number of items received so far until the total
        is reached. Any failed page aborts the whole fetch.
        """
        params = {
            "city": city,
            "tag": category,
            "period": lookahead_days,
            "date": self._today().isoformat(),
            "limit": self._page_size,
        }

        total, items = await self._fetch_page(params, offset=0)

        while len(items) < total:
            _, page = await self._fetch_page(params, offset=len(items))
            if not page:
                logger.warning(
                    "Catalog returned an empty page at offset %s of %s for %s/%s",
                    len(items),
                    total,
                    city,
                    category,
                )
                break
            items.extend(page)

        logger.debug(
            "Fetched %s items (total %s) for %s/%s", len(items), total, city, category
        )
        return items

    async def _fetch_page(self, params: dict, offset: int) -> tuple[int, list[Item]]:
        """Request one page, return (reported total, items)."""
        url = f"{self._api_root}events/actual"
        try:
            response = await self._client.get(url, params={**params, "offset": offset})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise CatalogUnavailable(f"Catalog request failed: {e}") from e
        except ValueError as e:
            raise CatalogUnavailable(f"Catalog returned invalid JSON: {e}") from e

        try:
            total = int(payload["paging"]["total"])
            items = [
                Item(
                    id=str(entry["event"]["id"]),
                    url=entry["event"]["url"],
                    title=entry["event"]["title"],
                )
                for entry in payload["data"]
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogUnavailable(f"Unexpected catalog payload: {e}") from e

        return total, items
