"""In-process record store used for local runs without a backend."""
from __future__ import annotations

import secrets
import string
import threading
from typing import Any, Dict, List, Optional, Sequence

from .base import Record
from .errors import RecordNotFoundError

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _new_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(15))


class MemoryRecordStore:
    """Dictionary-backed store with the same semantics as :class:`PocketBaseStore`."""

    def __init__(self, seed: Optional[Dict[str, List[Record]]] = None) -> None:
        self._lock = threading.Lock()
        self._collections: Dict[str, Dict[str, Record]] = {}
        for collection, records in (seed or {}).items():
            for record in records:
                self.create(collection, record)

    def _records(self, collection: str) -> Dict[str, Record]:
        return self._collections.setdefault(collection, {})

    def list_records(self, collection: str, *, fields: Optional[Sequence[str]] = None) -> List[Record]:
        with self._lock:
            rows = list(self._records(collection).values())
        if not fields:
            return [dict(row) for row in rows]
        return [{name: row.get(name) for name in fields} for row in rows]

    def get_first(self, collection: str, field: str, value: str) -> Record:
        with self._lock:
            for row in self._records(collection).values():
                if row.get(field) == value:
                    return dict(row)
        raise RecordNotFoundError(f"{collection}: no record with {field}={value!r}")

    def create(self, collection: str, payload: Dict[str, Any]) -> Record:
        record = dict(payload)
        record_id = str(record.get("id") or _new_id())
        record["id"] = record_id
        with self._lock:
            self._records(collection)[record_id] = record
        return dict(record)

    def update(self, collection: str, record_id: str, payload: Dict[str, Any]) -> Record:
        with self._lock:
            records = self._records(collection)
            if record_id not in records:
                raise RecordNotFoundError(f"{collection}: unknown record {record_id}")
            records[record_id].update({k: v for k, v in payload.items() if k != "id"})
            return dict(records[record_id])

    def delete(self, collection: str, record_id: str) -> None:
        with self._lock:
            records = self._records(collection)
            if records.pop(record_id, None) is None:
                raise RecordNotFoundError(f"{collection}: unknown record {record_id}")

    def keys(self, collection: str, field: str = "folder_name") -> set[str]:
        """Return the set of *field* values stored in *collection*."""

        with self._lock:
            return {str(row.get(field)) for row in self._records(collection).values()}


__all__ = ["MemoryRecordStore"]
