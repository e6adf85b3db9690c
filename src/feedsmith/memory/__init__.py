"""Persistence layer for FeedSmith."""

from .store import SheetStore
from .models import PublishedDataset, SnapshotInfo

__all__ = ["SheetStore", "PublishedDataset", "SnapshotInfo"]
