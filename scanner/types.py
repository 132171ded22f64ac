"""Inventory records produced by the filesystem walk."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional


class TitleYear(NamedTuple):
    title: str
    year: Optional[int]


class EpisodeNumbers(NamedTuple):
    season: Optional[int]
    episode: Optional[int]


@dataclass(slots=True)
class MovieEntry:
    """A movie folder holding a finished HLS package."""

    folder_name: str
    title: str
    year_released: Optional[int] = None
    resolutions: List[int] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "year_released": self.year_released,
            "resolutions": list(self.resolutions),
            "folder_name": self.folder_name,
        }


@dataclass(slots=True)
class SeriesEntry:
    title: str

    def to_payload(self) -> Dict[str, Any]:
        return {"title": self.title}


@dataclass(slots=True)
class EpisodeEntry:
    """An episode folder below ``series/season/``."""

    folder_name: str
    series: str
    season_number: int
    episode_number: int
    resolutions: List[int] = field(default_factory=list)
    title: str = ""

    def __post_init__(self) -> None:
        if not self.title:
            self.title = f"Season {self.season_number} Episode {self.episode_number}"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "series": self.series,
            "season_number": self.season_number,
            "episode_number": self.episode_number,
            "resolutions": list(self.resolutions),
            "folder_name": self.folder_name,
            "title": self.title,
        }


@dataclass(slots=True)
class AdEntry:
    folder_name: str

    def to_payload(self) -> Dict[str, Any]:
        return {"folder_name": self.folder_name}


@dataclass(slots=True)
class ReconcileSummary:
    """Counters describing one collection reconciliation."""

    collection: str
    on_disk: int = 0
    in_store: int = 0
    created: int = 0
    deleted: int = 0
    unchanged: int = 0
    failed: int = 0
    failures: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "collection": self.collection,
            "on_disk": self.on_disk,
            "in_store": self.in_store,
            "created": self.created,
            "deleted": self.deleted,
            "unchanged": self.unchanged,
            "failed": self.failed,
            "failures": list(self.failures),
        }


@dataclass(slots=True)
class ScanReport:
    """Outcome of one full scan; ``None`` entries mark skipped media kinds."""

    started_utc: str
    finished_utc: Optional[str] = None
    movies: Optional[ReconcileSummary] = None
    episodes: Optional[ReconcileSummary] = None
    ads: Optional[ReconcileSummary] = None
    series_created: int = 0
    error: Optional[str] = None


@dataclass(slots=True)
class ScanSettings:
    """Roots, completion marker and collection names used by a scan."""

    movies_root: Path = Path("/mnt/media/movies")
    series_root: Path = Path("/mnt/media/series")
    ads_root: Path = Path("/mnt/media/ads")
    completion_marker: str = "master.m3u8"
    movies_collection: str = "movies"
    series_collection: str = "series"
    episodes_collection: str = "episodes"
    ads_collection: str = "ads"


def load_scan_settings(data: Dict[str, object]) -> ScanSettings:
    settings = ScanSettings()
    media = data.get("media") if isinstance(data, dict) else None
    if isinstance(media, dict):
        for key in ("movies_root", "series_root", "ads_root"):
            value = media.get(key)
            if isinstance(value, (str, Path)) and str(value).strip():
                setattr(settings, key, Path(str(value).strip()).expanduser())
        marker = media.get("completion_marker")
        if isinstance(marker, str) and marker.strip():
            settings.completion_marker = marker.strip()
    collections = data.get("collections") if isinstance(data, dict) else None
    if isinstance(collections, dict):
        for kind in ("movies", "series", "episodes", "ads"):
            value = collections.get(kind)
            if isinstance(value, str) and value.strip():
                setattr(settings, f"{kind}_collection", value.strip())
    return settings


__all__ = [
    "AdEntry",
    "EpisodeEntry",
    "EpisodeNumbers",
    "MovieEntry",
    "ReconcileSummary",
    "ScanReport",
    "ScanSettings",
    "SeriesEntry",
    "TitleYear",
    "load_scan_settings",
]
