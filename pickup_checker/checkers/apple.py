import asyncio
import logging
from urllib.parse import urlencode

from curl_cffi.requests.errors import RequestsError

from pickup_checker.checkers.errors import NetworkError
from pickup_checker.config import Config

logger = logging.getLogger(__name__)

# US education store
SEARCH_URL = "https://www.apple.com/us-hed/shop/fulfillment-messages"
FETCH_TIMEOUT = 5.0


def build_url(config: Config, search_url: str = SEARCH_URL) -> str:
    params = [
        ("mt", "regular"),
        ("pl", "true"),
        ("location", config.location),
    ]
    params.extend((f"parts.{i}", model) for i, model in enumerate(config.models))
    return f"{search_url}?{urlencode(params)}"


class AppleChecker:
    def __init__(self, config: Config, session, timeout: float = FETCH_TIMEOUT) -> None:
        self.location = config.location
        self.url = build_url(config, config.search_url or SEARCH_URL)
        self._session = session
        self._timeout = timeout

    async def fetch(self) -> bytes:
        logger.info("Querying pickup availability at location=%s", self.location)
        logger.debug("Search URL: %s", self.url)

        try:
            resp = await asyncio.wait_for(
                self._session.get(self.url, timeout=self._timeout),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise NetworkError(self.url, exc) from exc
        except RequestsError as exc:
            raise NetworkError(self.url, exc) from exc
        except Exception as exc:
            logger.debug("Unexpected transport failure for %s", self.url, exc_info=True)
            raise NetworkError(self.url, exc) from exc

        if not 200 <= resp.status_code < 300:
            logger.warning("Search returned HTTP %d for location=%s", resp.status_code, self.location)
        return resp.content
