"""Error hierarchy for media scans."""
from __future__ import annotations

from pathlib import Path


class ScanError(RuntimeError):
    """Base exception for scan failures."""


class MediaRootError(ScanError):
    """Raised when a configured media root cannot be listed."""

    def __init__(self, kind: str, path: Path, reason: str) -> None:
        super().__init__(f"cannot list {kind} root {path}: {reason}")
        self.kind = kind
        self.path = path


__all__ = ["MediaRootError", "ScanError"]
