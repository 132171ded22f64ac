"""Full media scan orchestration."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from store.base import RecordStore
from store.errors import RemoteStoreError

from .errors import MediaRootError
from .reconcile import reconcile_collection
from .series import SeriesResolver
from .types import ReconcileSummary, ScanReport, ScanSettings
from .walker import MediaWalker

LOGGER = logging.getLogger("streamflex.scanner")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _log_summary(summary: ReconcileSummary) -> None:
    LOGGER.info(
        "%s: %d created, %d deleted, %d unchanged, %d failed",
        summary.collection,
        summary.created,
        summary.deleted,
        summary.unchanged,
        summary.failed,
        extra={"summary": summary.as_dict()},
    )


class ScanOrchestrator:
    """Run movies, series/episodes and ads scans one after another.

    At most one scan runs per instance: a call made while a scan is in
    progress returns ``None`` straight away without touching the filesystem
    or the store.
    """

    def __init__(
        self,
        store: RecordStore,
        settings: ScanSettings,
        *,
        walker: Optional[MediaWalker] = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._walker = walker or MediaWalker(settings)
        self._guard = threading.Lock()
        self.last_started_utc: Optional[str] = None
        self.last_finished_utc: Optional[str] = None

    @property
    def running(self) -> bool:
        return self._guard.locked()

    @property
    def settings(self) -> ScanSettings:
        return self._settings

    def scan_all_media(self) -> Optional[ScanReport]:
        if not self._guard.acquire(blocking=False):
            LOGGER.info("Scan is already in progress. Skipping.")
            return None
        report = ScanReport(started_utc=_utcnow())
        self.last_started_utc = report.started_utc
        LOGGER.info("--- Starting Full Media Scan ---")
        try:
            report.movies = self.scan_movies()
            report.episodes = self.scan_series_and_episodes(report)
            report.ads = self.scan_ads()
        except Exception as exc:
            report.error = str(exc) or exc.__class__.__name__
            LOGGER.exception("An unexpected error occurred during the scan: %s", exc)
        finally:
            report.finished_utc = _utcnow()
            self.last_finished_utc = report.finished_utc
            self._guard.release()
            LOGGER.info("--- Scan Complete ---")
        return report

    # ------------------------------------------------------------------
    def scan_movies(self) -> Optional[ReconcileSummary]:
        try:
            movies = self._walker.collect_movies()
            summary = reconcile_collection(
                self._store,
                self._settings.movies_collection,
                movies,
                label="Movie",
            )
            _log_summary(summary)
            return summary
        except (MediaRootError, RemoteStoreError) as exc:
            LOGGER.error("Error scanning movies directory: %s", exc)
            return None

    def scan_series_and_episodes(self, report: Optional[ScanReport] = None) -> Optional[ReconcileSummary]:
        LOGGER.info("--- Scanning SERIES & EPISODES ---")
        resolver = SeriesResolver(self._store, self._settings.series_collection)
        try:
            episodes = self._walker.collect_episodes(resolver)
            summary = reconcile_collection(
                self._store,
                self._settings.episodes_collection,
                episodes,
                label="Episode",
            )
            _log_summary(summary)
            return summary
        except (MediaRootError, RemoteStoreError) as exc:
            LOGGER.error("Error scanning series directory: %s", exc)
            return None
        finally:
            if report is not None:
                report.series_created = resolver.created

    def scan_ads(self) -> Optional[ReconcileSummary]:
        try:
            ads = self._walker.collect_ads()
            summary = reconcile_collection(
                self._store,
                self._settings.ads_collection,
                ads,
                label="Ad",
            )
            _log_summary(summary)
            return summary
        except (MediaRootError, RemoteStoreError) as exc:
            LOGGER.error("Error scanning ads directory: %s", exc)
            return None


__all__ = ["ScanOrchestrator"]
