"""Presence reconciliation between a disk inventory and a remote collection."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from store.base import Record, RecordStore

from .types import ReconcileSummary

LOGGER = logging.getLogger("streamflex.scanner.reconcile")


def _payload(item: Any) -> Dict[str, Any]:
    to_payload = getattr(item, "to_payload", None)
    if callable(to_payload):
        return to_payload()
    return dict(item)


def reconcile_collection(
    store: RecordStore,
    collection: str,
    items_on_disk: Mapping[str, Any],
    *,
    key_field: str = "folder_name",
    label: Optional[str] = None,
) -> ReconcileSummary:
    """Create records missing from *collection* and delete those no longer on disk.

    Keys present on both sides are left untouched. A failed create or delete
    is logged and counted; the remaining keys are still processed. Errors
    while listing the collection propagate to the caller.
    """

    label = label or collection
    LOGGER.info("--- Syncing %s ---", label.upper())
    summary = ReconcileSummary(collection=collection, on_disk=len(items_on_disk))

    remote: Dict[str, Record] = {}
    duplicates: List[Record] = []
    for record in store.list_records(collection, fields=("id", key_field)):
        key = record.get(key_field)
        if key in remote:
            duplicates.append(record)
            continue
        remote[key] = record
    summary.in_store = len(remote) + len(duplicates)
    LOGGER.info("Found %d %s records in the store.", summary.in_store, label)

    for key, item in items_on_disk.items():
        if key in remote:
            summary.unchanged += 1
            continue
        LOGGER.info("[%s] CREATING: %s", label, key)
        try:
            store.create(collection, _payload(item))
        except Exception as exc:
            summary.failed += 1
            summary.failures.append(f"create {key}: {exc}")
            LOGGER.error("[%s] FAILED to create %s: %s", label, key, exc)
            continue
        summary.created += 1

    orphans = [(key, record) for key, record in remote.items() if key not in items_on_disk]
    orphans.extend((record.get(key_field), record) for record in duplicates)
    for key, record in orphans:
        record_id = record.get("id")
        LOGGER.info("[%s] DELETING: %s (record %s)", label, key, record_id)
        try:
            store.delete(collection, str(record_id))
        except Exception as exc:
            summary.failed += 1
            summary.failures.append(f"delete {key}: {exc}")
            LOGGER.error("[%s] FAILED to delete %s: %s", label, key, exc)
            continue
        summary.deleted += 1

    return summary


__all__ = ["reconcile_collection"]
