IN_STOCK_MARKER = "vailable"
OUT_OF_STOCK_MARKER = "Currently unavailable"


def is_in_stock(quote: str) -> bool:
    """Classify a free-text pickup quote.

    "vailable" matches both "Available" and "available". The negative phrase
    is checked as well because it contains the positive marker.
    """
    return IN_STOCK_MARKER in quote and OUT_OF_STOCK_MARKER not in quote
