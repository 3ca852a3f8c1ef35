"""Editor collaborator — the document being edited on the current page."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from editflow.core.draft_store import DraftStore

logger = logging.getLogger(__name__)


class Editor(ABC):
    """What the submission controller needs from the editing widget."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Repository path of the loaded document."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Current editor text."""

    @abstractmethod
    def begin_editing(self) -> None:
        """Enter editing mode for the loaded document."""


class EditingSession(Editor):
    """Editing state for one document, wired to the DraftStore.

    Restores the draft when editing begins, saves on every update, and can
    reset back to the original text.
    """

    def __init__(self, drafts: DraftStore, path: str, original_text: str) -> None:
        self._drafts = drafts
        self._path = path
        self._original = original_text
        self._text = original_text
        self.is_editing = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def text(self) -> str:
        return self._text

    @property
    def original_text(self) -> str:
        return self._original

    @property
    def dirty(self) -> bool:
        return self._drafts.is_dirty(self._path)

    def begin_editing(self) -> None:
        self._text = self._drafts.restore(self._path, self._original)
        self.is_editing = True
        logger.debug("Editing %s (dirty=%s)", self._path, self.dirty)

    def update(self, text: str) -> None:
        """Record an edit event."""
        self._text = text
        self._drafts.save(self._path, text)

    def reset(self) -> str:
        """Discard the draft and return to the original text."""
        self._drafts.clear(self._path)
        self._text = self._original
        return self._text

    def end_editing(self) -> None:
        self.is_editing = False
