"""Typed interface shared by the remote store backends."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

Record = Dict[str, Any]


class RecordStore(Protocol):
    """Minimal document-store surface consumed by the scanner.

    ``get_first`` raises :class:`store.errors.RecordNotFoundError` when no
    record matches; every other failure surfaces as
    :class:`store.errors.RemoteStoreError`.
    """

    def list_records(self, collection: str, *, fields: Optional[Sequence[str]] = None) -> List[Record]:
        ...

    def get_first(self, collection: str, field: str, value: str) -> Record:
        ...

    def create(self, collection: str, payload: Dict[str, Any]) -> Record:
        ...

    def update(self, collection: str, record_id: str, payload: Dict[str, Any]) -> Record:
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...


__all__ = ["Record", "RecordStore"]
