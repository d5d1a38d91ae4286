"""SIM implementation - scripted onboarding conversations."""

import asyncio
import random
from typing import Protocol

import httpx

from notifier.logging_config import get_logger

logger = get_logger(__name__)


# Each virtual user answers the onboarding prompts in order
SCENARIO: list[dict] = [
    {
        "recipient_id": "sim_001",
        "messages": ["/start", "Moscow", "cinema, concert", "19:00", "3"],
    },
    {
        "recipient_id": "sim_002",
        "messages": ["/start", "Saint Petersburg", "theatre, opera", "theatre", "8:30", "7"],
    },
    {
        "recipient_id": "sim_003",
        "messages": ["/start", "Kazan", "standup", "25:00", "21:15", "0", "2", "/info"],
    },
]


class ISim(Protocol):
    """Generate test traffic against the HTTP API."""

    async def start(self) -> None:
        """Start scripted scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """SIM with a scripted onboarding scenario for manual testing."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        scenario: list[dict] | None = None,
        min_delay: float = 0.5,
        max_delay: float = 1.5,
    ):
        self._api_url = api_url
        self._scenario = scenario if scenario is not None else SCENARIO
        self._min_delay = min_delay
        self._max_delay = max_delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Start scripted scenario."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient()

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client:
            await self._client.aclose()
            self._client = None

    async def _run_scenario(self) -> None:
        """Run every virtual user's conversation concurrently."""
        try:
            await asyncio.gather(
                *[self._run_user(user) for user in self._scenario]
            )
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False
            logger.info("SIM: scenario finished for %s users", len(self._scenario))

    async def _run_user(self, user: dict) -> None:
        for text in user["messages"]:
            if not self._running:
                return
            await self._send_message(user["recipient_id"], text)
            await asyncio.sleep(random.uniform(self._min_delay, self._max_delay))

    async def _send_message(self, recipient_id: str, text: str) -> None:
        """Send a message via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}/api/messages",
                json={"recipient_id": recipient_id, "text": text},
                timeout=10.0,
            )

            if response.status_code == 200:
                data = response.json()
                logger.info("SIM: %s -> %s", recipient_id, text)
                for reply in data.get("replies", []):
                    logger.info("SIM: %s <- %s", recipient_id, reply)
            else:
                logger.error(
                    "SIM: Error sending message: %s",
                    response.status_code,
                )

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send message: %s", e)
