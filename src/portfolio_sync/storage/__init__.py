"""Snapshot storage."""

from portfolio_sync.storage.json_store import JsonStorageService, StorageWriteError

__all__ = ["JsonStorageService", "StorageWriteError"]
