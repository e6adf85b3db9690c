"""Data models for the persistence layer."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class SnapshotInfo(BaseModel):
    """Metadata about a stored grid snapshot."""

    name: str
    row_count: int = 0
    updated_at: datetime = Field(default_factory=_utc_now)


class PublishedDataset(BaseModel):
    """Records published from a sheet, keyed by sanitized headers."""

    name: str
    records: list[dict[str, Any]] = Field(default_factory=list)
    published_at: datetime = Field(default_factory=_utc_now)
