from __future__ import annotations

"""SQLite file backing the local key-value store.

Three string values live in ``kv_store`` under fixed keys (profile JSON,
access key, record list JSON). The table layout is versioned with
``PRAGMA user_version``: ``SCHEMA_STEPS[i]`` upgrades version ``i`` to
``i + 1`` and runs at most once per file.
"""

from dataclasses import dataclass
from pathlib import Path
import sqlite3
from typing import Iterable

SCHEMA_STEPS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
    )
    """,
)
SCHEMA_VERSION = len(SCHEMA_STEPS)


@dataclass(slots=True)
class DBConfig:
    path: Path
    pragmas: tuple[tuple[str, str | int], ...] = (
        ("journal_mode", "WAL"),
        ("synchronous", "NORMAL"),
    )


class DatabaseManager:
    def __init__(self, config: DBConfig):
        self.config = config
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.config.path.parent.mkdir(parents=True, exist_ok=True)
            # Sync workers read the store from a background thread
            conn = sqlite3.connect(self.config.path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            for key, value in self.config.pragmas:
                conn.execute(f"PRAGMA {key}={value}")
            self._conn = conn
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def schema_version(self) -> int:
        return self.connect().execute("PRAGMA user_version").fetchone()[0]

    def init_db(self) -> None:
        """Bring the file up to ``SCHEMA_VERSION``; safe to call repeatedly."""
        conn = self.connect()
        for version in range(self.schema_version, SCHEMA_VERSION):
            with conn:
                conn.execute(SCHEMA_STEPS[version])
                conn.execute(f"PRAGMA user_version={version + 1}")

    def execute(self, sql: str, params: Iterable | None = None) -> sqlite3.Cursor:
        conn = self.connect()
        with conn:
            return conn.execute(sql, params or [])

    def query_all(self, sql: str, params: Iterable | None = None) -> list[sqlite3.Row]:
        return self.connect().execute(sql, params or []).fetchall()

    def query_one(self, sql: str, params: Iterable | None = None) -> sqlite3.Row | None:
        return self.connect().execute(sql, params or []).fetchone()


__all__ = ["DBConfig", "DatabaseManager", "SCHEMA_VERSION"]
