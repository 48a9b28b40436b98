"""
Ordered key-value store over SQLite.
Generic sorted map: string keys, records encoded to text by caller-supplied
callables. No business logic, only insert / get / remove / ordered scans.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

V = TypeVar("V")

DEFAULT_MAX_KEY_SIZE = 440
DEFAULT_MAX_VALUE_SIZE = 65536


class StoreError(RuntimeError):
    """Underlying storage fault."""


class StoreCapacityError(StoreError):
    """Key or encoded value exceeds the store's configured byte limit."""


class OrderedStore(Generic[V]):
    """
    Sorted map keyed by string, persisted in the ordered_store table.
    Keys enumerate in UTF-8 byte order. Each write commits on its own, so
    insert and remove are atomic per key.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        encode: Callable[[V], str],
        decode: Callable[[str], V],
        memory_id: int = 0,
        max_key_size: int = DEFAULT_MAX_KEY_SIZE,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
    ) -> None:
        self._conn = conn
        self._encode = encode
        self._decode = decode
        self._memory_id = memory_id
        self._max_key_size = max_key_size
        self._max_value_size = max_value_size

    @property
    def memory_id(self) -> int:
        return self._memory_id

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as e:
            raise StoreError(f"Store {action} failed: {e}") from e

    def _check_key(self, key: str) -> None:
        size = len(key.encode("utf-8"))
        if size > self._max_key_size:
            raise StoreCapacityError(
                f"Key is {size} bytes; max key size is {self._max_key_size}"
            )

    def _load(self, raw: str) -> V:
        try:
            return self._decode(raw)
        except (ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Corrupt record in store {self._memory_id}: {e}") from e

    def _select_value(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM ordered_store WHERE memory_id = ? AND key = ?",
            (self._memory_id, key),
        ).fetchone()
        return row[0] if row is not None else None

    # ---------- Core operations ----------

    def get(self, key: str) -> V | None:
        with self._guard("get"):
            raw = self._select_value(key)
        return self._load(raw) if raw is not None else None

    def insert(self, key: str, value: V) -> V | None:
        """Insert or replace. Returns the previous record, if any."""
        self._check_key(key)
        encoded = self._encode(value)
        size = len(encoded.encode("utf-8"))
        if size > self._max_value_size:
            raise StoreCapacityError(
                f"Value for key {key} is {size} bytes; max value size is {self._max_value_size}"
            )
        with self._guard("insert"):
            with self._conn:
                previous = self._select_value(key)
                self._conn.execute(
                    "INSERT OR REPLACE INTO ordered_store (memory_id, key, value) VALUES (?, ?, ?)",
                    (self._memory_id, key, encoded),
                )
        return self._load(previous) if previous is not None else None

    def remove(self, key: str) -> V | None:
        """Delete the entry if present. Returns the removed record, if any."""
        with self._guard("remove"):
            with self._conn:
                previous = self._select_value(key)
                if previous is None:
                    return None
                self._conn.execute(
                    "DELETE FROM ordered_store WHERE memory_id = ? AND key = ?",
                    (self._memory_id, key),
                )
        return self._load(previous)

    def values(self) -> list[V]:
        """All records in key order."""
        with self._guard("scan"):
            rows = self._conn.execute(
                "SELECT value FROM ordered_store WHERE memory_id = ? ORDER BY key",
                (self._memory_id,),
            ).fetchall()
        return [self._load(r[0]) for r in rows]

    # ---------- Read helpers ----------

    def keys(self) -> list[str]:
        with self._guard("scan"):
            rows = self._conn.execute(
                "SELECT key FROM ordered_store WHERE memory_id = ? ORDER BY key",
                (self._memory_id,),
            ).fetchall()
        return [r[0] for r in rows]

    def items(self) -> list[tuple[str, V]]:
        with self._guard("scan"):
            rows = self._conn.execute(
                "SELECT key, value FROM ordered_store WHERE memory_id = ? ORDER BY key",
                (self._memory_id,),
            ).fetchall()
        return [(r[0], self._load(r[1])) for r in rows]

    def contains_key(self, key: str) -> bool:
        with self._guard("get"):
            return self._select_value(key) is not None

    def __len__(self) -> int:
        with self._guard("count"):
            row = self._conn.execute(
                "SELECT COUNT(*) FROM ordered_store WHERE memory_id = ?",
                (self._memory_id,),
            ).fetchone()
        return int(row[0])

    def is_empty(self) -> bool:
        return len(self) == 0
