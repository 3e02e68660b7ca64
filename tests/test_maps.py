"""tests/test_maps.py

Unit tests for the browser-backed maps launcher (navchat/maps.py).
"""

from __future__ import annotations

# Standard Library
from unittest.mock import Mock

# Local Modules
from navchat.maps import BrowserMapsLauncher, direction_urls


class TestDirectionUrls:
    """Test suite for direction_urls."""

    def test_scheme_order(self) -> None:
        urls = direction_urls("Central Park")
        assert urls == [
            "google.navigation:q=Central%20Park",
            "geo:0,0?q=Central%20Park",
            "https://www.google.com/maps/search/?api=1&query=Central%20Park",
        ]

    def test_reserved_characters_encoded(self) -> None:
        urls = direction_urls("A&B / Main St?")
        assert urls[0] == "google.navigation:q=A%26B%20%2F%20Main%20St%3F"


class TestBrowserMapsLauncher:
    """Test suite for BrowserMapsLauncher."""

    def test_first_handler_wins(self) -> None:
        opener = Mock(return_value=True)
        assert BrowserMapsLauncher(opener).open_with_directions("home") is True
        opener.assert_called_once_with("google.navigation:q=home")

    def test_falls_through_to_web(self) -> None:
        opener = Mock(side_effect=[False, False, True])
        assert BrowserMapsLauncher(opener).open_with_directions("home") is True
        assert opener.call_count == 3
        assert opener.call_args.args[0].startswith("https://www.google.com/maps/")

    def test_no_handler(self) -> None:
        opener = Mock(return_value=False)
        assert BrowserMapsLauncher(opener).open_with_directions("home") is False
        assert opener.call_count == 3

    def test_opener_error_is_failure(self) -> None:
        opener = Mock(side_effect=OSError("no browser"))
        assert BrowserMapsLauncher(opener).open_with_directions("home") is False
