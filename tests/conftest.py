import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from curl_cffi.requests.errors import RequestsError
from pickup_checker.checkers.apple import AppleChecker
from pickup_checker.config import Config

# ---------------------------------------------------------------------------
# Mock response helper
# ---------------------------------------------------------------------------


def make_mock_response(status_code: int = 200, content: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    return resp


# ---------------------------------------------------------------------------
# Shared session fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_session():
    return AsyncMock()


# ---------------------------------------------------------------------------
# Config / checker fixtures
# ---------------------------------------------------------------------------

DEFAULT_LOCATION = "10001"
DEFAULT_MODELS = ("MTUW3LL/A", "MTUX3LL/A")
NOTIFY_ENDPOINT = "http://n.example/push"


def make_config(**overrides) -> Config:
    values = {
        "location": DEFAULT_LOCATION,
        "models": DEFAULT_MODELS,
        "search_interval_seconds": 10,
        "notify_endpoints": (NOTIFY_ENDPOINT,),
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def checker(config, mock_session) -> AppleChecker:
    return AppleChecker(config, session=mock_session)


# ---------------------------------------------------------------------------
# Search response builders
# ---------------------------------------------------------------------------


def build_part(title: str = "iPhone 15", quote: str = "Available, pick up today") -> dict:
    return {
        "storePickupProductTitle": title,
        "pickupSearchQuote": quote,
        "pickupDisplay": "available",
    }


def build_store(name: str = "Store5", parts: list[dict] | None = None) -> dict:
    if parts is None:
        parts = [build_part()]
    return {
        "storeName": name,
        "storeNumber": "R001",
        "partsAvailability": {f"PART{i}": part for i, part in enumerate(parts)},
    }


def build_search_payload(stores: list[dict] | None = None) -> dict:
    if stores is None:
        stores = [build_store()]
    return {
        "head": {"status": "200"},
        "body": {
            "content": {
                "pickupMessage": {
                    "stores": stores,
                    "pickupLocation": DEFAULT_LOCATION,
                }
            }
        },
    }


def encode_payload(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")


def network_error(message: str = "connection refused") -> RequestsError:
    return RequestsError(message)
