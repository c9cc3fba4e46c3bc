from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
import sqlite3
from typing import Any


class SyncStateStore:
    """Key-value store for sync state (lastSyncTime, recentActivity).

    Values are JSON documents; each key keeps only its latest value.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def _initialize(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS sync_state (
                    key TEXT PRIMARY KEY,
                    updated_at TEXT NOT NULL,
                    value_json TEXT NOT NULL
                )
                """
            )
            connection.commit()

    def set(self, key: str, value: Any, *, updated_at: str | None = None) -> None:
        at = updated_at or datetime.now(UTC).isoformat()
        encoded = json.dumps(value, default=str)
        with self._connect() as connection:
            connection.execute(
                """
                INSERT INTO sync_state(key, updated_at, value_json)
                VALUES(?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    updated_at = excluded.updated_at,
                    value_json = excluded.value_json
                """,
                (key, at, encoded),
            )
            connection.commit()

    def get(self, key: str) -> Any | None:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT value_json FROM sync_state WHERE key = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return json.loads(row["value_json"])
