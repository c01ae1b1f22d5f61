import pytest

from pickup_checker.checkers.classifier import is_in_stock


class TestIsInStockPositive:
    @pytest.mark.parametrize(
        "quote",
        [
            "Available",
            "Available, pick up today",
            "Available Tomorrow at Apple Fifth Avenue",
            "Today available",
        ],
    )
    def test_available_quotes_are_in_stock(self, quote):
        assert is_in_stock(quote) is True


class TestIsInStockNegative:
    @pytest.mark.parametrize(
        "quote",
        [
            "Currently unavailable",
            "Currently unavailable at Apple SoHo",
            "Available soon. Currently unavailable",
            "Currently unavailable (available for delivery)",
        ],
    )
    def test_currently_unavailable_always_wins(self, quote):
        assert is_in_stock(quote) is False

    @pytest.mark.parametrize("quote", ["", "Out of stock", "Sold out", "Pick up Friday"])
    def test_quotes_without_markers_are_not_in_stock(self, quote):
        assert is_in_stock(quote) is False

    def test_negative_phrase_is_case_sensitive(self):
        # Only the exact phrase is rejected; other negations pass through unchanged.
        assert is_in_stock("currently unavailable") is True
        assert is_in_stock("Unavailable today") is True
