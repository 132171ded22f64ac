"""Get-or-create resolution of series records, cached per scan pass."""
from __future__ import annotations

import logging
from typing import Dict

from store.base import Record, RecordStore
from store.errors import RecordNotFoundError

from .types import SeriesEntry

LOGGER = logging.getLogger("streamflex.scanner.series")


class SeriesResolver:
    """Map a series folder title to its remote record, creating it when absent.

    Titles are matched exactly. One resolver is built per scan so the cache
    never outlives a pass.
    """

    def __init__(self, store: RecordStore, collection: str, *, key_field: str = "title") -> None:
        self._store = store
        self._collection = collection
        self._key_field = key_field
        self._cache: Dict[str, Record] = {}
        self.created = 0

    def resolve(self, title: str) -> Record:
        cached = self._cache.get(title)
        if cached is not None:
            return cached
        try:
            record = self._store.get_first(self._collection, self._key_field, title)
        except RecordNotFoundError:
            LOGGER.info("[Series] CREATING: %s", title)
            record = self._store.create(self._collection, SeriesEntry(title).to_payload())
            self.created += 1
        self._cache[title] = record
        return record


__all__ = ["SeriesResolver"]
