import json
import logging
from typing import Any

from pickup_checker.checkers.errors import DecodeError
from pickup_checker.checkers.models import PartAvailability, SearchResponse, Store

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200

PICKUP_MESSAGE_PATH = ("body", "content", "pickupMessage")


def _excerpt(data: bytes | str) -> str:
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return data[:EXCERPT_LENGTH]


def _object(value: Any, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"expected object at {where}, got {type(value).__name__}")
    return value


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected string at {where}, got {type(value).__name__}")
    return value


def _items(value: Any, where: str) -> list:
    # partsAvailability is keyed by part number upstream; plain arrays are accepted too.
    if value is None:
        return []
    if isinstance(value, dict):
        return list(value.values())
    if not isinstance(value, list):
        raise TypeError(f"expected array at {where}, got {type(value).__name__}")
    return value


def _parse_part(raw: Any, where: str) -> PartAvailability:
    raw = _object(raw, where)
    return PartAvailability(
        product_title=_string(raw.get("storePickupProductTitle"), f"{where}.storePickupProductTitle"),
        pickup_quote=_string(raw.get("pickupSearchQuote"), f"{where}.pickupSearchQuote"),
    )


def _parse_store(raw: Any, where: str) -> Store:
    raw = _object(raw, where)
    parts = _items(raw.get("partsAvailability"), f"{where}.partsAvailability")
    return Store(
        store_name=_string(raw.get("storeName"), f"{where}.storeName"),
        parts_availability=[
            _parse_part(part, f"{where}.partsAvailability[{i}]") for i, part in enumerate(parts)
        ],
    )


def _parse_stores(data: Any) -> list[Store]:
    node = data
    where = "$"
    for key in PICKUP_MESSAGE_PATH:
        node = _object(node, where).get(key)
        where = f"{where}.{key}"
    stores = _items(_object(node, where).get("stores"), f"{where}.stores")
    return [_parse_store(store, f"{where}.stores[{i}]") for i, store in enumerate(stores)]


def parse_response(data: bytes | str) -> SearchResponse:
    """Decode a fulfillment-messages payload into a SearchResponse.

    Missing objects, arrays and strings decode to empty values so an empty
    payload yields no stores. Invalid JSON or a value of the wrong type on the
    stores path raises DecodeError.
    """
    try:
        decoded = json.loads(data)
    except (ValueError, UnicodeDecodeError, RecursionError) as exc:
        raise DecodeError(_excerpt(data), exc) from exc

    try:
        stores = _parse_stores(decoded)
    except TypeError as exc:
        raise DecodeError(_excerpt(data), exc) from exc

    logger.debug("Decoded %d store(s) from search response", len(stores))
    return SearchResponse(stores=stores)
