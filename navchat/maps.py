"""navchat/maps.py

Maps-launch collaborator.

The orchestrator only needs ``open_with_directions(destination) -> bool``.
:class:`BrowserMapsLauncher` negotiates the scheme itself: navigation deep
link first, then a generic ``geo:`` link, then the Google Maps web page.
"""

from __future__ import annotations

import logging
import urllib.parse
import webbrowser
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger("navchat.maps")


class MapsLauncher(Protocol):
    def open_with_directions(self, destination: str) -> bool: ...


def direction_urls(destination: str) -> list[str]:
    """Return the candidate URLs for *destination*, most specific first."""
    encoded = urllib.parse.quote(destination, safe="")
    return [
        f"google.navigation:q={encoded}",
        f"geo:0,0?q={encoded}",
        f"https://www.google.com/maps/search/?api=1&query={encoded}",
    ]


class BrowserMapsLauncher:
    """Open directions through the platform's registered URL handlers."""

    def __init__(self, opener: Callable[[str], bool] = webbrowser.open) -> None:
        self._opener = opener

    def open_with_directions(self, destination: str) -> bool:
        """Try each candidate URL until a handler accepts one.

        Args:
            destination: Free-text destination from the intent agent.

        Returns:
            ``True`` if some handler accepted a URL, ``False`` otherwise.
        """
        try:
            for url in direction_urls(destination):
                if self._opener(url):
                    logger.info("Opened maps with directions to %r via %s", destination, url)
                    return True
                logger.debug("No handler for %s", url)
        except Exception as exc:
            logger.error("Error opening maps app: %s", exc, exc_info=True)
            return False
        logger.error("No app found to handle maps request for %r", destination)
        return False
