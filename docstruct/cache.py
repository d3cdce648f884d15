"""
Durable call cache for model-bound operations.
Keys are content hashes of everything that determines a call's outcome, so a
changed model, provider or prompt misses instead of returning stale data.
"""

import asyncio
import json
import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Optional, Union

from docstruct.config import config
from docstruct.core.exceptions import CacheOpenError, CacheReadError, CacheWriteError
from docstruct.logging import logger

KV_TABLE = "kv_table"


class CallCache:
    """Write-once key/value store backed by a single sqlite file.

    Every transaction runs on a small thread pool so callers on the event
    loop only await the result. A lock serializes transactions inside the
    process; no cross-process coordination is attempted.
    """

    def __init__(self, conn: sqlite3.Connection, path: Path, max_workers: Optional[int] = None):
        self.path = path
        self._conn = conn
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.CACHE_MAX_WORKERS,
            thread_name_prefix="call-cache",
        )

    @classmethod
    def open_sync(cls, path: Union[str, Path], max_workers: Optional[int] = None) -> "CallCache":
        """Open (or create) the store and make sure the table exists."""
        path = Path(path)
        conn = None
        try:
            conn = sqlite3.connect(str(path), check_same_thread=False, isolation_level=None)
            conn.execute("BEGIN")
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {KV_TABLE} "
                "(key TEXT PRIMARY KEY, value BLOB NOT NULL)"
            )
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            logger.error(f"Cannot open call cache {path}: {e}")
            raise CacheOpenError(f"Cannot open call cache {path}: {e}") from e

        logger.debug(f"Opened call cache: {path}")
        return cls(conn, path, max_workers=max_workers)

    @classmethod
    async def open(cls, path: Union[str, Path], max_workers: Optional[int] = None) -> "CallCache":
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, cls.open_sync, path, max_workers)

    def get_data_sync(self, key: str) -> Optional[Any]:
        with self._lock:
            try:
                self._conn.execute("BEGIN")
                try:
                    row = self._conn.execute(
                        f"SELECT value FROM {KV_TABLE} WHERE key = ?", (key,)
                    ).fetchone()
                finally:
                    self._conn.execute("COMMIT")
            except sqlite3.Error as e:
                raise CacheReadError(f"Cache read failed for {key}: {e}") from e

        if row is None:
            return None

        try:
            return json.loads(bytes(row[0]).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CacheReadError(f"Corrupted cache entry {key}: {e}") from e

    def put_data_sync(self, key: str, data: Any):
        try:
            value = json.dumps(data, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CacheWriteError(f"Cannot serialize cache entry {key}: {e}") from e

        with self._lock:
            try:
                self._conn.execute("BEGIN IMMEDIATE")
                try:
                    self._conn.execute(
                        f"INSERT OR IGNORE INTO {KV_TABLE} (key, value) VALUES (?, ?)",
                        (key, sqlite3.Binary(value)),
                    )
                except sqlite3.Error:
                    self._conn.execute("ROLLBACK")
                    raise
                self._conn.execute("COMMIT")
            except sqlite3.Error as e:
                raise CacheWriteError(f"Cache write failed for {key}: {e}") from e

    async def get_data(self, key: str) -> Optional[Any]:
        """Cached payload for `key`, or None on a miss"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.get_data_sync, key)

    async def put_data(self, key: str, data: Any):
        """Store a JSON-serializable payload; existing keys are left untouched"""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self.put_data_sync, key, data)

    def count(self) -> int:
        with self._lock:
            return self._conn.execute(f"SELECT COUNT(*) FROM {KV_TABLE}").fetchone()[0]

    def __len__(self) -> int:
        return self.count()

    def close(self):
        self._executor.shutdown(wait=True)
        with self._lock:
            self._conn.close()

    async def aclose(self):
        """Close without blocking the event loop on pending cache work"""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.close)

    def __enter__(self) -> "CallCache":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
