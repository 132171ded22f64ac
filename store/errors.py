"""Error hierarchy for remote store operations."""
from __future__ import annotations

from typing import Optional


class RemoteStoreError(RuntimeError):
    """Base exception for failed remote store requests."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RecordNotFoundError(RemoteStoreError):
    """Raised when a lookup matches no record."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message, status=404)


class AuthenticationError(RemoteStoreError):
    """Raised when the service account cannot authenticate."""


__all__ = ["AuthenticationError", "RecordNotFoundError", "RemoteStoreError"]
