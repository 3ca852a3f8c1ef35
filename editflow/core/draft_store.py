"""Session-scoped drafts and the pending-submission marker.

Drafts are keyed by document path; at most one exists per path.  The
pending-submission marker is global and read-once: ``consume_pending``
deletes it so that an unrelated later reload cannot re-trigger a
submission.

Storage failures (quota, disabled storage, a locked database) never reach
the editor.  They are logged and the store degrades to keeping drafts in
process memory only.
"""

from __future__ import annotations

import logging

from editflow.core.storage import KeyValueStore, StorageError
from editflow.models.drafts import Draft

logger = logging.getLogger(__name__)

PREFIX = "editflow:"
DRAFT_PREFIX = PREFIX + "draft:"
PENDING_KEY = PREFIX + "pending_submit"


class DraftStore:
    """Drafts, dirty flags, and the resume-after-login marker.

    Parameters
    ----------
    store:
        Session-scoped key/value backend.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._dirty: dict[str, bool] = {}
        # Newest text per path, or None once cleared.  Takes precedence over
        # the backend, which may hold stale values after a refused write.
        self._fallback: dict[str, str | None] = {}

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def restore(self, path: str, original_text: str) -> str:
        """Return the saved draft for *path* if it differs from the original.

        Marks the path dirty when a differing draft is returned, clean
        otherwise.  Call once when an editing session starts.
        """
        saved = self._current(path)
        if saved is not None and saved != original_text:
            self._dirty[path] = True
            logger.debug("Restored draft for %s (%d chars)", path, len(saved))
            return saved
        self._dirty[path] = False
        return original_text

    def save(self, path: str, text: str) -> None:
        """Persist *text* as the draft for *path* and mark it dirty.

        Unconditional: dirtiness is sticky once any edit event fires, even
        if *text* equals the original.
        """
        self._dirty[path] = True
        self._fallback[path] = text
        self._write(DRAFT_PREFIX + path, text)

    def clear(self, path: str) -> None:
        """Delete the draft for *path* and mark it clean."""
        self._dirty[path] = False
        if self._remove(DRAFT_PREFIX + path):
            self._fallback.pop(path, None)
        else:
            self._fallback[path] = None

    def get(self, path: str) -> Draft | None:
        """Return the stored draft for *path*, or None."""
        text = self._current(path)
        if text is None:
            return None
        return Draft(path=path, text=text, dirty=self._dirty.get(path, True))

    def is_dirty(self, path: str) -> bool:
        return self._dirty.get(path, False)

    def paths(self) -> list[str]:
        """Document paths that currently have a draft."""
        try:
            stored = {k[len(DRAFT_PREFIX):] for k in self._store.keys(DRAFT_PREFIX)}
        except StorageError as exc:
            logger.warning("Draft storage unavailable: %s", exc)
            stored = set()
        for path, text in self._fallback.items():
            if text is None:
                stored.discard(path)
            else:
                stored.add(path)
        return sorted(stored)

    # ------------------------------------------------------------------
    # Pending submission marker
    # ------------------------------------------------------------------

    def mark_pending(self, path: str) -> None:
        """Record that a submission of *path* awaits authentication."""
        self._write(PENDING_KEY, path)
        logger.debug("Pending submission marked for %s", path)

    def consume_pending(self) -> str | None:
        """Return and delete the pending marker (read-once)."""
        value = self._read(PENDING_KEY)
        self._remove(PENDING_KEY)
        return value

    def peek_pending(self) -> str | None:
        """Return the pending marker without consuming it."""
        return self._read(PENDING_KEY)

    # ------------------------------------------------------------------
    # Storage access with failures swallowed
    # ------------------------------------------------------------------

    def _current(self, path: str) -> str | None:
        if path in self._fallback:
            return self._fallback[path]
        return self._read(DRAFT_PREFIX + path)

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except StorageError as exc:
            logger.warning("Draft storage unavailable, read of %s skipped: %s", key, exc)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except StorageError as exc:
            logger.warning("Draft storage unavailable, write of %s skipped: %s", key, exc)

    def _remove(self, key: str) -> bool:
        try:
            self._store.delete(key)
        except StorageError as exc:
            logger.warning("Draft storage unavailable, delete of %s skipped: %s", key, exc)
            return False
        return True
