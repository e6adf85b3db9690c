"""SQLite-based store for grid snapshots and published records."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import aiosqlite

from ..config import settings
from ..sheets.grid import grid_from_json, grid_to_json
from ..sheets.models import Grid
from .models import PublishedDataset, SnapshotInfo, _utc_now

logger = logging.getLogger(__name__)


class SheetStore:
    """Persistent storage for working-grid snapshots and published datasets."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else settings.database_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Initialize the database and create tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(str(self.db_path))

        await self._connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                name TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                row_count INTEGER,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS published (
                name TEXT PRIMARY KEY,
                records TEXT NOT NULL,
                published_at TEXT NOT NULL
            );
            """
        )
        await self._connection.commit()
        logger.info(f"SheetStore initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SheetStore is not initialized; call initialize() first")
        return self._connection

    # Snapshot operations
    async def save_snapshot(self, name: str, grid: Grid) -> SnapshotInfo:
        """Store or overwrite a named grid snapshot."""
        info = SnapshotInfo(name=name, row_count=len(grid), updated_at=_utc_now())
        await self.connection.execute(
            """
            INSERT OR REPLACE INTO snapshots (name, data, row_count, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                info.name,
                json.dumps(grid_to_json(grid), ensure_ascii=False),
                info.row_count,
                info.updated_at.isoformat(),
            ),
        )
        await self.connection.commit()
        return info

    async def load_snapshot(self, name: str) -> Optional[Grid]:
        """Load a named snapshot, or None if it does not exist."""
        async with self.connection.execute(
            "SELECT data FROM snapshots WHERE name = ?", (name,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return grid_from_json(json.loads(row[0]))

    async def list_snapshots(self) -> list[SnapshotInfo]:
        async with self.connection.execute(
            "SELECT name, row_count, updated_at FROM snapshots ORDER BY updated_at DESC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [
            SnapshotInfo(
                name=row[0],
                row_count=row[1] or 0,
                updated_at=datetime.fromisoformat(row[2]),
            )
            for row in rows
        ]

    async def delete_snapshot(self, name: str) -> bool:
        cursor = await self.connection.execute("DELETE FROM snapshots WHERE name = ?", (name,))
        await self.connection.commit()
        return cursor.rowcount > 0

    # Published records
    async def publish_records(self, name: str, records: list[dict[str, Any]]) -> PublishedDataset:
        """Store the flattened records of a sheet under ``name``."""
        dataset = PublishedDataset(name=name, records=records, published_at=_utc_now())
        await self.connection.execute(
            """
            INSERT OR REPLACE INTO published (name, records, published_at)
            VALUES (?, ?, ?)
            """,
            (
                dataset.name,
                json.dumps(dataset.records, ensure_ascii=False),
                dataset.published_at.isoformat(),
            ),
        )
        await self.connection.commit()
        logger.info(f"Published {len(records)} records as '{name}'")
        return dataset

    async def get_published(self, name: str) -> Optional[PublishedDataset]:
        async with self.connection.execute(
            "SELECT name, records, published_at FROM published WHERE name = ?", (name,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return PublishedDataset(
            name=row[0],
            records=json.loads(row[1]),
            published_at=datetime.fromisoformat(row[2]),
        )
