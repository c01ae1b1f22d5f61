import asyncio
import logging
import signal
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum

from curl_cffi.requests import AsyncSession

from pickup_checker.checkers.apple import AppleChecker
from pickup_checker.checkers.classifier import is_in_stock
from pickup_checker.checkers.errors import DecodeError, NetworkError
from pickup_checker.checkers.models import SearchResponse
from pickup_checker.checkers.parser import parse_response
from pickup_checker.config import Config
from pickup_checker.notifiers.bark import BarkNotifier
from pickup_checker.notifiers.base import Message, Notifier
from pickup_checker.notifiers.log import LogNotifier
from pickup_checker.statuspage import (
    CycleOutcome,
    CycleReport,
    RecordStatus,
    StatusBoard,
    start_status_server,
)

logger = logging.getLogger(__name__)


class CycleState(Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    PARSING = "PARSING"
    CLASSIFYING = "CLASSIFYING"
    NOTIFYING = "NOTIFYING"
    SLEEPING = "SLEEPING"


def format_content(pickup_quote: str, store_name: str) -> str:
    return f"取货时间:{pickup_quote} 地点:{store_name}"


def classify(response: SearchResponse) -> tuple[list[Message], list[RecordStatus]]:
    messages: list[Message] = []
    records: list[RecordStatus] = []
    for store in response.stores:
        for part in store.parts_availability:
            in_stock = is_in_stock(part.pickup_quote)
            records.append(
                RecordStatus(
                    store_name=store.store_name,
                    product_title=part.product_title,
                    pickup_quote=part.pickup_quote,
                    in_stock=in_stock,
                )
            )
            if not in_stock:
                logger.info(
                    "Not in stock: model=%s store=%s quote=%s",
                    part.product_title,
                    store.store_name,
                    part.pickup_quote,
                )
                continue

            logger.info(
                "In stock: model=%s store=%s quote=%s",
                part.product_title,
                store.store_name,
                part.pickup_quote,
            )
            messages.append(
                Message(
                    title=part.product_title,
                    content=format_content(part.pickup_quote, store.store_name),
                )
            )
    return messages, records


def collect_messages(response: SearchResponse) -> list[Message]:
    messages, _ = classify(response)
    return messages


def create_notifiers(config: Config) -> list[Notifier]:
    notifiers: list[Notifier] = [LogNotifier()]
    if config.notify_endpoints:
        notifiers.append(
            BarkNotifier(
                endpoints=config.notify_endpoints,
                sound=config.notification.sound,
                timeout=config.notification.timeout_seconds,
                max_concurrency=config.notification.max_concurrency,
                proxy_url=config.proxy_url,
            )
        )
    return notifiers


class PollLoop:
    """Runs fetch -> parse -> classify -> notify, then sleeps, forever.

    Cycles never overlap and keep no state between them. A network or decode
    failure ends the current cycle early; the next tick is the only retry.
    """

    def __init__(
        self,
        checker: AppleChecker,
        notifiers: Sequence[Notifier],
        interval_seconds: float,
        board: StatusBoard | None = None,
    ) -> None:
        self.checker = checker
        self.notifiers = list(notifiers)
        self.interval_seconds = interval_seconds
        self.board = board
        self.state = CycleState.IDLE

    async def run_cycle(self) -> CycleReport:
        report = CycleReport(started_at=datetime.now(timezone.utc))
        try:
            await self._run_cycle(report)
        finally:
            if self.board is not None:
                self.board.publish(report)
        return report

    async def _run_cycle(self, report: CycleReport) -> None:
        self.state = CycleState.FETCHING
        try:
            body = await self.checker.fetch()
        except NetworkError as exc:
            logger.error("Search request failed, skipping cycle: %s", exc)
            report.outcome = CycleOutcome.NETWORK_ERROR
            report.error = str(exc)
            return

        self.state = CycleState.PARSING
        try:
            response = parse_response(body)
        except DecodeError as exc:
            logger.error("Search response could not be decoded, skipping cycle: %s", exc)
            report.outcome = CycleOutcome.DECODE_ERROR
            report.error = str(exc)
            return

        self.state = CycleState.CLASSIFYING
        messages, report.records = classify(response)
        logger.info(
            "Search returned %d store(s), %d in-stock record(s)",
            len(response.stores),
            len(messages),
        )
        if not messages:
            return

        self.state = CycleState.NOTIFYING
        for notifier in self.notifiers:
            try:
                await notifier.notify(messages)
            except Exception:
                logger.exception("Notifier %s failed", type(notifier).__name__)
        report.message_count = len(messages)

    async def run(self, once: bool = False) -> None:
        while True:
            await self.run_cycle()
            if once:
                self.state = CycleState.IDLE
                return

            self.state = CycleState.SLEEPING
            logger.info("Next search in %ss", self.interval_seconds)
            await asyncio.sleep(self.interval_seconds)
            self.state = CycleState.IDLE


async def run(config: Config) -> None:
    notifiers = create_notifiers(config)

    proxies = {"https": config.proxy_url} if config.proxy_url else None
    session = AsyncSession(impersonate="chrome", proxies=proxies)

    checker = AppleChecker(config, session=session)
    board = StatusBoard()
    loop_runner = PollLoop(
        checker,
        notifiers,
        interval_seconds=config.search_interval_seconds,
        board=board,
    )

    runner = None
    if config.status_page.enabled:
        runner = await start_status_server(
            board,
            host=config.status_page.host,
            port=config.status_page.port,
        )
        logger.info(
            "Status page running at http://%s:%d",
            config.status_page.host,
            config.status_page.port,
        )

    task = asyncio.create_task(loop_runner.run(once=config.once), name="poll-loop")

    loop = asyncio.get_running_loop()

    def _signal_handler() -> None:
        logger.info("Received shutdown signal, cancelling poll loop...")
        task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    try:
        await task
    except asyncio.CancelledError:
        pass
    finally:
        if runner is not None:
            await runner.cleanup()
        await session.close()
        logger.info("Shut down cleanly")
