from __future__ import annotations

"""Key-value helpers over the ``kv_store`` table."""

from typing import Iterable

from .database_manager import DatabaseManager


def get_value(db: DatabaseManager, key: str) -> str | None:
    row = db.query_one("SELECT value FROM kv_store WHERE key=?", (key,))
    return row["value"] if row else None


def set_value(db: DatabaseManager, key: str, value: str) -> None:
    db.execute(
        """
        INSERT INTO kv_store(key, value) VALUES(?, ?)
        ON CONFLICT(key) DO UPDATE SET
            value=excluded.value,
            updated_at=strftime('%Y-%m-%dT%H:%M:%fZ','now')
        """,
        (key, value),
    )


def remove_values(db: DatabaseManager, keys: Iterable[str]) -> None:
    keys = list(keys)
    if not keys:
        return
    placeholders = ",".join("?" for _ in keys)
    db.execute(f"DELETE FROM kv_store WHERE key IN ({placeholders})", keys)


__all__ = ["get_value", "set_value", "remove_values"]
