"""Page abstraction — the browser surface the pipeline touches.

The pipeline only needs four things from its host page: the current
location, a way to rewrite it without reloading (history replace), a full
navigation, and opening a URL in a new browsing context.  ``TerminalPage``
implements them for the CLI, where "navigation" means printing the URL and
handing it to the system browser.
"""

from __future__ import annotations

import logging
import webbrowser
from abc import ABC, abstractmethod
from collections.abc import Callable
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)


def strip_fragment(url: str) -> str:
    """Return *url* without its ``#fragment``."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))


def path_and_query(url: str) -> str:
    """Return the path plus query of *url* (``/a/b?x=1``), defaulting to ``/``."""
    parts = urlsplit(url)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


class Page(ABC):
    """The host page seen by the contribution pipeline."""

    @property
    @abstractmethod
    def location(self) -> str:
        """The full current URL, fragment included."""

    @abstractmethod
    def replace_location(self, url: str) -> None:
        """Rewrite the visible URL without reloading."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Leave the page. In-memory state does not survive this."""

    @abstractmethod
    def open_window(self, url: str) -> None:
        """Open *url* in a new browsing context, keeping this page."""


class TerminalPage(Page):
    """Page backed by a terminal session.

    Parameters
    ----------
    location:
        The URL the user is "on" (for the CLI, the URL they pasted).
    echo:
        Called with a short human-readable line for every navigation.
    open_browser:
        When True, navigations and new windows are handed to the system
        browser via ``webbrowser``.
    """

    def __init__(
        self,
        location: str,
        *,
        echo: Callable[[str], None] | None = None,
        open_browser: bool = True,
    ) -> None:
        self._location = location
        self._echo = echo
        self._open_browser = open_browser
        self.navigated_to: str | None = None

    @property
    def location(self) -> str:
        return self._location

    def replace_location(self, url: str) -> None:
        logger.debug("Replacing page location (fragment stripped)")
        self._location = url

    def navigate(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        self.navigated_to = url
        if self._echo is not None:
            self._echo(f"Sign in to continue: {url}")
        if self._open_browser:
            webbrowser.open(url)

    def open_window(self, url: str) -> None:
        logger.info("Opening %s in a new window", url)
        if self._echo is not None:
            self._echo(f"Opened: {url}")
        if self._open_browser:
            webbrowser.open_new_tab(url)
