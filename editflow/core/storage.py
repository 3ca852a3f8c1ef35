"""Key/value storage backends for credentials, drafts, and markers.

Two scopes are needed:

- **durable** — survives every restart (plays the role of localStorage);
- **session** — survives re-invocation within one session but not a new
  one (plays the role of sessionStorage).

Both are served by ``SQLiteStore`` instances sharing one database file and
differing only in ``namespace``.  ``MemoryStore`` is the volatile backend
used by tests and as a fallback.

Database layout::

    kv_store(namespace TEXT, key TEXT, value TEXT, updated_at TEXT)
        PRIMARY KEY (namespace, key)
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

DURABLE_NAMESPACE = "local"

_CREATE_KV = """
CREATE TABLE IF NOT EXISTS kv_store (
    namespace   TEXT NOT NULL,
    key         TEXT NOT NULL,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (namespace, key)
);
"""


def session_namespace(session_id: str) -> str:
    """Namespace for session-scoped keys of *session_id*."""
    return f"session:{session_id}"


class StorageError(RuntimeError):
    """Raised when a storage backend cannot read or write."""


class KeyValueStore(ABC):
    """Abstract string key/value store.

    Implementations: MemoryStore (volatile), SQLiteStore (file-backed).
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for *key*, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*. Missing keys are ignored."""

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """Return stored keys starting with *prefix*, sorted."""

    def close(self) -> None:
        """Release resources (DB connections, etc.)."""


class MemoryStore(KeyValueStore):
    """Volatile dict-backed store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._data)


class SQLiteStore(KeyValueStore):
    """Namespaced key/value store backed by SQLite.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created (with parents) if it
        does not exist.
    namespace:
        Logical partition inside the database. Keys in different
        namespaces never collide.
    """

    def __init__(self, db_path: Path, namespace: str = DURABLE_NAMESPACE) -> None:
        self._db_path = Path(db_path)
        self._namespace = namespace
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.execute(_CREATE_KV)
                conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(
                f"Cannot open state database {self._db_path}: {exc}"
            ) from exc
        logger.debug(
            "SQLiteStore ready at %s (namespace=%s)", self._db_path, namespace
        )

    @property
    def namespace(self) -> str:
        return self._namespace

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def get(self, key: str) -> str | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE namespace = ? AND key = ?",
                    (self._namespace, key),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot read {key!r}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv_store (namespace, key, value, updated_at) "
                    "VALUES (?, ?, ?, datetime('now'))",
                    (self._namespace, key, value),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot write {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM kv_store WHERE namespace = ? AND key = ?",
                    (self._namespace, key),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot delete {key!r}: {exc}") from exc

    def keys(self, prefix: str = "") -> list[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT key FROM kv_store WHERE namespace = ? ORDER BY key",
                    (self._namespace,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot list keys: {exc}") from exc
        return [r[0] for r in rows if r[0].startswith(prefix)]
