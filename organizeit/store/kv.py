"""Key-value persistence layer.

Every OrganizeIT component reads and writes through a KeyValueStore that
is handed to it at construction. The contract is deliberately small:
single-key get/set/delete plus a prefix scan. No transactions, no
compare-and-swap; anything stronger is built on top (see
organizeit.state.collection).

Two implementations:
- MemoryKVStore: process-local dict, used by tests and `--store memory`.
- SQLiteKVStore: durable single-table store in ~/.organizeit/store.db,
  thread-safe via per-thread connections.
"""

from __future__ import annotations

import copy
import json
import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from typing import Any

from organizeit.errors import StoreFailure
from organizeit.log import get_home_dir, logger


class KeyValueStore(ABC):
    """Durable mapping from string key to JSON-serializable value."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Overwrite the value at key. Durable before returning."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting an absent key is not an error."""

    @abstractmethod
    def list(self, prefix: str) -> list[tuple[str, Any]]:
        """Return (key, value) pairs whose key starts with prefix, sorted by key."""

    def close(self) -> None:
        """Release resources. No-op by default."""


class MemoryKVStore(KeyValueStore):
    """In-memory store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key not in self._data:
                return None
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so the memory store rejects exactly what SQLite would
        try:
            encoded = json.loads(json.dumps(value))
        except (TypeError, ValueError) as exc:
            raise StoreFailure(f"Value for {key!r} is not JSON-serializable", detail=str(exc)) from exc
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def list(self, prefix: str) -> list[tuple[str, Any]]:
        with self._lock:
            return [
                (k, copy.deepcopy(self._data[k]))
                for k in sorted(self._data)
                if k.startswith(prefix)
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class SQLiteKVStore(KeyValueStore):
    """SQLite-backed store. One row per key, JSON-encoded value."""

    def __init__(self, db_path: str | None = None) -> None:
        if not db_path:
            db_path = str(get_home_dir() / "store.db")
        self._db_path = db_path
        self._local = threading.local()
        self._conns: list[sqlite3.Connection] = []
        self._conns_lock = threading.Lock()
        self._init_db()

    @property
    def db_path(self) -> str:
        return self._db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create a thread-local connection."""
        if not hasattr(self._local, "conn") or self._local.conn is None:
            try:
                conn = sqlite3.connect(self._db_path, timeout=10, check_same_thread=False)
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=FULL")
                conn.execute("PRAGMA busy_timeout=5000")
            except sqlite3.Error as exc:
                raise StoreFailure("Could not open key-value store", detail=str(exc)) from exc
            self._local.conn = conn
            with self._conns_lock:
                self._conns.append(conn)
        return self._local.conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                );
            """)
            conn.commit()
        except sqlite3.Error as exc:
            raise StoreFailure("Could not initialise key-value store", detail=str(exc)) from exc

    def get(self, key: str) -> Any | None:
        try:
            row = self._get_conn().execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreFailure(f"Failed to read {key!r}", detail=str(exc)) from exc
        if row is None:
            return None
        return self._decode(key, row[0])

    def set(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StoreFailure(f"Value for {key!r} is not JSON-serializable", detail=str(exc)) from exc
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                (key, encoded, time.time()),
            )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreFailure(f"Failed to write {key!r}", detail=str(exc)) from exc

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreFailure(f"Failed to delete {key!r}", detail=str(exc)) from exc

    def list(self, prefix: str) -> list[tuple[str, Any]]:
        # LIKE would need escaping for % and _, a range scan on the primary key does not
        try:
            rows = self._get_conn().execute(
                "SELECT key, value FROM kv WHERE key >= ? AND key < ? ORDER BY key",
                (prefix, prefix + "\uffff"),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreFailure(f"Failed to list prefix {prefix!r}", detail=str(exc)) from exc
        return [(k, self._decode(k, v)) for k, v in rows]

    def close(self) -> None:
        """Close every connection opened by any thread."""
        with self._conns_lock:
            conns, self._conns = self._conns, []
        for conn in conns:
            try:
                conn.close()
            except sqlite3.Error:
                logger.debug("Failed to close store connection", exc_info=True)
        self._local = threading.local()

    @staticmethod
    def _decode(key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise StoreFailure(f"Stored value for {key!r} is not valid JSON", detail=str(exc)) from exc


def create_store(backend: str = "sqlite", db_path: str | None = None) -> KeyValueStore:
    """Build a store from a backend name ('memory' or 'sqlite')."""
    backend = (backend or "sqlite").lower()
    if backend == "memory":
        return MemoryKVStore()
    if backend == "sqlite":
        return SQLiteKVStore(db_path or None)
    raise ValueError(f"Unknown store backend: {backend!r}")
