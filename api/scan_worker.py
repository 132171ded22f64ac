"""Background execution of media scans triggered over HTTP."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from scanner.service import ScanOrchestrator

LOGGER = logging.getLogger("streamflex.api.scan_worker")


class ScanTrigger:
    """Start ``scan_all_media`` on a daemon thread and return immediately."""

    def __init__(self, orchestrator: ScanOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._thread: Optional[threading.Thread] = None
        self._launch_lock = threading.Lock()

    @property
    def orchestrator(self) -> ScanOrchestrator:
        return self._orchestrator

    def fire(self) -> bool:
        """Launch a scan; returns ``False`` when one was already running.

        A worker that has been started but has not yet taken the scan guard
        counts as running, so back-to-back calls start at most one scan.
        """

        with self._launch_lock:
            pending = self._thread is not None and self._thread.is_alive()
            if pending or self._orchestrator.running:
                LOGGER.info("Scan trigger ignored: a scan is already running")
                return False
            thread = threading.Thread(target=self._run, name="media-scan", daemon=True)
            self._thread = thread
            thread.start()
            return True

    def _run(self) -> None:
        try:
            self._orchestrator.scan_all_media()
        except Exception as exc:  # pragma: no cover - scan_all_media already guards
            LOGGER.exception("Background scan crashed: %s", exc)

    def join(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
