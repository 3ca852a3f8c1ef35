"""Durable storage of the single bearer credential.

The identity provider's callback hands the credential back as a one-time
URL fragment (``#github_token=<value>``).  ``extract_or_load`` captures it
on first sight, persists it, and strips it from the visible URL so that a
copied or bookmarked link never carries the token.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from editflow.core.page import Page, strip_fragment
from editflow.core.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_KEY = "github_token"


class CredentialStore:
    """One credential per process, durable across reloads.

    Parameters
    ----------
    store:
        Durable key/value backend.
    page:
        The host page whose location may carry the delivery fragment.
    token_key:
        Both the fragment marker and the storage key.
    """

    def __init__(
        self,
        store: KeyValueStore,
        page: Page,
        token_key: str = DEFAULT_TOKEN_KEY,
    ) -> None:
        self._store = store
        self._page = page
        self._token_key = token_key
        self._pattern = re.compile(rf"(?:^|&){re.escape(token_key)}=([^&]+)")

    @property
    def token_key(self) -> str:
        return self._token_key

    def extract_or_load(self) -> str | None:
        """Capture a freshly delivered credential, or return the stored one."""
        fragment = urlsplit(self._page.location).fragment
        match = self._pattern.search(fragment)
        if match:
            token = match.group(1)
            self._store.set(self._token_key, token)
            self._page.replace_location(strip_fragment(self._page.location))
            logger.info("Captured credential from page fragment")
            return token
        return self._store.get(self._token_key)

    def load(self) -> str | None:
        """Return the stored credential without inspecting the page."""
        return self._store.get(self._token_key)

    def clear(self) -> None:
        """Forget the stored credential. Idempotent."""
        self._store.delete(self._token_key)
        logger.info("Stored credential cleared")
