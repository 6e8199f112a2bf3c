"""
Archive of captured assistant responses.

Appends to a SQLite table `responses (content)`. The table is owned by the
voice assistant tooling; this module never creates, updates or deletes.
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path


INSERT_SQL = "INSERT INTO responses (content) VALUES (?)"


class ResponseStore:
    """Best-effort writer: failures are swallowed and never reach the caller."""

    def __init__(self, db_path: str, enabled: bool = True):
        self.db_path = db_path
        self.enabled = enabled

    async def store(self, content: str) -> None:
        """Append content to the archive. Blank content is ignored."""
        if not self.enabled or not content or not content.strip():
            return
        try:
            await asyncio.to_thread(self._insert, content)
        except Exception:
            # Best-effort only; capture must never disturb event handling.
            pass

    def _insert(self, content: str) -> None:
        # mode=rw: a missing archive is an error, not a fresh empty file
        uri = f"{Path(self.db_path).resolve().as_uri()}?mode=rw"
        conn = sqlite3.connect(uri, uri=True)
        try:
            with conn:
                conn.execute(INSERT_SQL, (content,))
        finally:
            conn.close()
