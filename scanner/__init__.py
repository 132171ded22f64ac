"""Filesystem to record-store reconciliation for pre-transcoded media."""

from .errors import MediaRootError, ScanError
from .names import extract_title_and_year, parse_episode_path
from .reconcile import reconcile_collection
from .resolutions import detect_resolutions
from .series import SeriesResolver
from .service import ScanOrchestrator
from .types import (
    AdEntry,
    EpisodeEntry,
    MovieEntry,
    ReconcileSummary,
    ScanReport,
    ScanSettings,
    SeriesEntry,
    load_scan_settings,
)
from .walker import MediaWalker

__all__ = [
    "AdEntry",
    "EpisodeEntry",
    "MediaRootError",
    "MediaWalker",
    "MovieEntry",
    "ReconcileSummary",
    "ScanError",
    "ScanOrchestrator",
    "ScanReport",
    "ScanSettings",
    "SeriesEntry",
    "SeriesResolver",
    "detect_resolutions",
    "extract_title_and_year",
    "load_scan_settings",
    "parse_episode_path",
    "reconcile_collection",
]
