"""SQLite implementation of ProgressStore."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from precalc.persistence.db import get_connection
from precalc.persistence.interfaces.progress_store import ProgressStore


class SqliteProgressStore(ProgressStore):

    def get_item(self, key: str) -> Optional[str]:
        conn = get_connection()
        row = conn.execute(
            "SELECT value FROM client_storage WHERE storage_key = ?", (key,)
        ).fetchone()
        conn.close()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        conn = get_connection()
        conn.execute(
            """
            INSERT INTO client_storage (storage_key, value, updated_at)
            VALUES (:key, :value, :updated_at)
            ON CONFLICT(storage_key) DO UPDATE SET
                value      = excluded.value,
                updated_at = excluded.updated_at
            """,
            {"key": key, "value": value, "updated_at": datetime.now(timezone.utc).isoformat()},
        )
        conn.commit()
        conn.close()

    def remove_item(self, key: str) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM client_storage WHERE storage_key = ?", (key,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0
