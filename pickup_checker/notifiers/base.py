from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Message:
    title: str
    content: str


class DeliveryFailed(Exception):
    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"delivery to {url} failed: {cause!r}")


class Notifier(Protocol):
    async def notify(self, messages: Sequence[Message]) -> None: ...
