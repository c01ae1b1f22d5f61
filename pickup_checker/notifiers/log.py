import logging
from collections.abc import Sequence

from pickup_checker.notifiers.base import Message

logger = logging.getLogger(__name__)


class LogNotifier:
    async def notify(self, messages: Sequence[Message]) -> None:
        for message in messages:
            logger.warning("IN STOCK: %s (%s)", message.title, message.content)
