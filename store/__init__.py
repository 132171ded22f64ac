"""Remote record store backends."""
from __future__ import annotations

from typing import Any, Dict

from .base import Record, RecordStore
from .errors import AuthenticationError, RecordNotFoundError, RemoteStoreError
from .memory import MemoryRecordStore
from .pocketbase import PocketBaseStore


def build_store(settings: Dict[str, Any]) -> RecordStore:
    """Instantiate the backend selected by ``store.backend``."""

    backend = str((settings.get("store") or {}).get("backend") or "pocketbase").strip().lower()
    if backend == "memory":
        return MemoryRecordStore()
    if backend != "pocketbase":
        raise ValueError(f"Unknown store backend '{backend}'")
    pb = settings.get("pocketbase") or {}
    return PocketBaseStore(
        str(pb.get("url") or ""),
        timeout=float(pb.get("timeout_s") or 15),
        page_size=int(pb.get("page_size") or 500),
    )


__all__ = [
    "AuthenticationError",
    "MemoryRecordStore",
    "PocketBaseStore",
    "Record",
    "RecordNotFoundError",
    "RecordStore",
    "RemoteStoreError",
    "build_store",
]
