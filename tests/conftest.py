from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

from scanner.types import ScanSettings
from store.memory import MemoryRecordStore

MARKER = "master.m3u8"


def make_media_dir(root: Path, *parts: str, marker: bool = True, renditions: Iterable[str] = ()) -> Path:
    folder = root.joinpath(*parts)
    folder.mkdir(parents=True, exist_ok=True)
    if marker:
        (folder / MARKER).write_text("#EXTM3U\n", encoding="utf-8")
    for name in renditions:
        (folder / name).mkdir(exist_ok=True)
    return folder


@pytest.fixture
def scan_settings(tmp_path: Path) -> ScanSettings:
    settings = ScanSettings(
        movies_root=tmp_path / "movies",
        series_root=tmp_path / "series",
        ads_root=tmp_path / "ads",
        completion_marker=MARKER,
    )
    for root in (settings.movies_root, settings.series_root, settings.ads_root):
        root.mkdir(parents=True)
    return settings


class RecordingStore(MemoryRecordStore):
    """Memory store that keeps a log of every call made against it."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[tuple[str, str]] = []

    def list_records(self, collection, *, fields=None):
        self.calls.append(("list", collection))
        return super().list_records(collection, fields=fields)

    def get_first(self, collection, field, value):
        self.calls.append(("get_first", collection))
        return super().get_first(collection, field, value)

    def create(self, collection, payload):
        self.calls.append(("create", collection))
        return super().create(collection, payload)

    def delete(self, collection, record_id):
        self.calls.append(("delete", collection))
        return super().delete(collection, record_id)

    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in {"create", "delete"}]


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()
