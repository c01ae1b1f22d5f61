import asyncio

import pytest

from pickup_checker.checkers.apple import FETCH_TIMEOUT, AppleChecker, build_url
from pickup_checker.checkers.errors import NetworkError

from .conftest import encode_payload, build_search_payload, make_config, make_mock_response, network_error


# ---------------------------------------------------------------------------
# TestAppleCheckerRequest — Verify correct HTTP request
# ---------------------------------------------------------------------------


class TestAppleCheckerRequest:
    async def test_requests_built_url_with_timeout(self, mock_session, checker, config):
        mock_session.get.return_value = make_mock_response(200, encode_payload(build_search_payload()))

        await checker.fetch()

        mock_session.get.assert_awaited_once_with(build_url(config), timeout=FETCH_TIMEOUT)

    async def test_uses_configured_search_url(self, mock_session):
        config = make_config(search_url="https://example.test/fulfillment")
        checker = AppleChecker(config, session=mock_session)
        mock_session.get.return_value = make_mock_response(200, b"{}")

        await checker.fetch()

        url = mock_session.get.call_args.args[0]
        assert url.startswith("https://example.test/fulfillment?")


# ---------------------------------------------------------------------------
# TestAppleCheckerResponse — Body handling
# ---------------------------------------------------------------------------


class TestAppleCheckerResponse:
    async def test_returns_raw_body(self, mock_session, checker):
        body = encode_payload(build_search_payload())
        mock_session.get.return_value = make_mock_response(200, body)

        assert await checker.fetch() == body

    @pytest.mark.parametrize("status_code", [403, 500, 503])
    async def test_non_2xx_body_is_returned_unchecked(self, mock_session, checker, status_code):
        mock_session.get.return_value = make_mock_response(status_code, b"<html>denied</html>")

        assert await checker.fetch() == b"<html>denied</html>"


# ---------------------------------------------------------------------------
# TestAppleCheckerErrors — Transport failures become NetworkError
# ---------------------------------------------------------------------------


class TestAppleCheckerErrors:
    async def test_requests_error_raises_network_error(self, mock_session, checker):
        mock_session.get.side_effect = network_error("Failed to resolve host")

        with pytest.raises(NetworkError) as exc_info:
            await checker.fetch()

        assert exc_info.value.url == checker.url

    async def test_unexpected_exception_raises_network_error(self, mock_session, checker):
        mock_session.get.side_effect = RuntimeError("boom")

        with pytest.raises(NetworkError):
            await checker.fetch()

    async def test_deadline_cancels_slow_request(self, mock_session, config):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def slow_get(url, timeout):
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        mock_session.get.side_effect = slow_get
        checker = AppleChecker(config, session=mock_session, timeout=0.05)

        with pytest.raises(NetworkError):
            await checker.fetch()

        assert started.is_set()
        assert cancelled.is_set()
