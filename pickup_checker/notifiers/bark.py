import asyncio
import logging
from collections.abc import Sequence
from urllib.parse import quote

import httpx

from pickup_checker.notifiers.base import DeliveryFailed, Message

logger = logging.getLogger(__name__)

DEFAULT_SOUND = "minuet"
TIMEOUT = 5.0
MAX_CONCURRENCY = 4
# Characters a path segment may carry unescaped.
PATH_SAFE = ":@&=+$"


def build_notify_url(endpoint: str, message: Message, sound: str = DEFAULT_SOUND) -> str:
    title = quote(message.title, safe=PATH_SAFE)
    content = quote(message.content, safe=PATH_SAFE)
    return f"{endpoint.rstrip('/')}/{title}/{content}?sound={quote(sound, safe='')}"


class BarkNotifier:
    """Pushes every message to every endpoint through a Bark-style GET relay.

    All message/endpoint pairs are attempted; a failed send is logged and
    never stops the rest.
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        sound: str = DEFAULT_SOUND,
        timeout: float = TIMEOUT,
        max_concurrency: int = MAX_CONCURRENCY,
        proxy_url: str | None = None,
    ) -> None:
        self.endpoints = list(endpoints)
        self.sound = sound
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self.proxy_url = proxy_url

    async def notify(self, messages: Sequence[Message]) -> None:
        urls = [
            build_notify_url(endpoint, message, self.sound)
            for message in messages
            for endpoint in self.endpoints
        ]
        if not urls:
            return

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with httpx.AsyncClient(timeout=self.timeout, proxy=self.proxy_url) as client:
            results = await asyncio.gather(
                *(self._send(client, semaphore, url) for url in urls),
                return_exceptions=True,
            )

        failed = 0
        for result in results:
            if isinstance(result, DeliveryFailed):
                failed += 1
                logger.error("Notification failed: %s", result)
            elif isinstance(result, BaseException):
                failed += 1
                logger.error("Notification failed unexpectedly: %r", result)

        logger.info("Sent %d/%d notification(s)", len(urls) - failed, len(urls))

    async def _send(self, client: httpx.AsyncClient, semaphore: asyncio.Semaphore, url: str) -> None:
        async with semaphore:
            logger.debug("Notification URL: %s", url)
            try:
                resp = await client.get(url)
            except httpx.HTTPError as exc:
                raise DeliveryFailed(url, exc) from exc
        logger.debug("Notification relay answered HTTP %d", resp.status_code)
