"""SQLite sync ledger.

Stores the fingerprint of each receipt or bill as of its last successful
push to the accounting system. A record whose current fingerprint matches
the stored one has not changed and does not need to be pushed again.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path


class SyncLedger:
    """Last-synced fingerprints keyed by (kind, record id)."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS synced_records (
                kind TEXT NOT NULL,
                record_id TEXT NOT NULL,
                fingerprint TEXT NOT NULL,
                synced_at TEXT NOT NULL,
                PRIMARY KEY (kind, record_id)
            )
        """)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SyncLedger":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def get_fingerprint(self, kind: str, record_id: str) -> str | None:
        """Fingerprint recorded at the last sync, or None if never synced."""
        row = self._conn.execute(
            "SELECT fingerprint FROM synced_records WHERE kind = ? AND record_id = ?",
            (kind, record_id),
        ).fetchone()
        return row[0] if row else None

    def mark_synced(self, kind: str, record_id: str, fp: str) -> None:
        if not fp:
            raise ValueError("Refusing to record an empty fingerprint")
        now = datetime.now(timezone.utc).isoformat()
        self._conn.execute(
            "INSERT OR REPLACE INTO synced_records (kind, record_id, fingerprint, synced_at) "
            "VALUES (?, ?, ?, ?)",
            (kind, record_id, fp, now),
        )
        self._conn.commit()

    def mark_batch(self, entries: list[tuple[str, str, str]]) -> int:
        """Record (kind, record_id, fingerprint) triples. Returns count of changed rows."""
        changed = 0
        for kind, record_id, fp in entries:
            if self.get_fingerprint(kind, record_id) != fp:
                self.mark_synced(kind, record_id, fp)
                changed += 1
        return changed

    def forget(self, kind: str, record_id: str) -> bool:
        """Drop a record's sync state, e.g. after it was deleted remotely."""
        cur = self._conn.execute(
            "DELETE FROM synced_records WHERE kind = ? AND record_id = ?",
            (kind, record_id),
        )
        self._conn.commit()
        return cur.rowcount > 0

    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM synced_records").fetchone()
        return row[0] if row else 0
