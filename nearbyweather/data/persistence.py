import sqlite3
import logging
from datetime import datetime, timezone
from typing import Optional
from pathlib import Path
import asyncio
import aiosqlite
from pydantic import ValidationError

from nearbyweather.core.models_shared import StoredContents

logger = logging.getLogger(__name__)

STORED_CONTENTS_KEY = "weather_information_stored_contents"

class SnapshotPersistence:
    """Durable storage for the single cached snapshot, backed by SQLite.

    Writes are serialized through one lock and committed in a transaction, so
    the last save wins and a reader never sees a partially written record.
    """

    def __init__(self, db_path: Path, record_name: str = STORED_CONTENTS_KEY):
        self.db_path = db_path
        self.record_name = record_name
        self._lock = asyncio.Lock()

    async def _ensure_schema(self, db: aiosqlite.Connection) -> None:
        # idempotent, runs on every connection
        await db.executescript("""
            CREATE TABLE IF NOT EXISTS stored_contents (
                name TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                saved_at TIMESTAMP
            );
        """)
        await db.commit()

    async def save(self, contents: StoredContents) -> bool:
        """Store the snapshot. Failures are logged and reported as ``False``."""
        async with self._lock:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                payload = contents.model_dump_json()
                async with aiosqlite.connect(self.db_path) as db:
                    await self._ensure_schema(db)
                    await db.execute(
                        "INSERT OR REPLACE INTO stored_contents (name, payload, saved_at) VALUES (?, ?, ?)",
                        (self.record_name, payload, datetime.now(timezone.utc).isoformat())
                    )
                    await db.commit()
                logger.debug(f"Stored weather contents in {self.db_path}")
                return True

            except (sqlite3.Error, OSError) as e:
                logger.error(f"Snapshot save error: {e}")
                return False

    async def load(self) -> Optional[StoredContents]:
        """Retrieve the stored snapshot, or ``None`` on first run or unreadable data."""
        if not self.db_path.exists():
            logger.info("No stored weather contents found, starting fresh")
            return None

        async with self._lock:
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await self._ensure_schema(db)
                    cursor = await db.execute(
                        "SELECT payload FROM stored_contents WHERE name = ?",
                        (self.record_name,)
                    )
                    row = await cursor.fetchone()

            except (sqlite3.Error, OSError) as e:
                logger.error(f"Snapshot load error: {e}")
                return None

        if row is None:
            return None

        try:
            return StoredContents.model_validate_json(row[0])
        except ValidationError as e:
            logger.error(f"Stored weather contents could not be decoded, discarding: {e}")
            return None

    async def clear(self) -> None:
        """Remove the stored snapshot."""
        if not self.db_path.exists():
            return
        async with self._lock:
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await self._ensure_schema(db)
                    await db.execute("DELETE FROM stored_contents WHERE name = ?", (self.record_name,))
                    await db.commit()

            except (sqlite3.Error, OSError) as e:
                logger.error(f"Snapshot clear error: {e}")
