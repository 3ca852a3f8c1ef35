"""Core pipeline components: storage, page, stores, editing, controller."""

from editflow.core.storage import KeyValueStore, MemoryStore, SQLiteStore, StorageError
from editflow.core.page import Page, TerminalPage
from editflow.core.credential_store import CredentialStore
from editflow.core.draft_store import DraftStore
from editflow.core.editing import EditingSession, Editor
from editflow.core.controller import InvalidTransitionError, SubmissionController

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "StorageError",
    "Page",
    "TerminalPage",
    "CredentialStore",
    "DraftStore",
    "Editor",
    "EditingSession",
    "InvalidTransitionError",
    "SubmissionController",
]
