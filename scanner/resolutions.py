from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Union

LOGGER = logging.getLogger("streamflex.scanner.resolutions")

RESOLUTION_LABELS: Dict[str, int] = {
    "360p": 360,
    "480p": 480,
    "720p": 720,
    "1080p": 1080,
    "1440p": 1440,
    "2160p": 2160,
    "4k": 2160,
}


def detect_resolutions(media_path: Union[str, Path]) -> List[int]:
    """Return the resolutions whose rendition folders exist directly under *media_path*."""

    found: set[int] = set()
    try:
        entries = list(Path(media_path).iterdir())
    except OSError as exc:
        LOGGER.warning("Could not read directory for resolution detection: %s (%s)", media_path, exc)
        return []
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError:
            continue
        lowered = entry.name.lower()
        for label, value in RESOLUTION_LABELS.items():
            if label in lowered:
                found.add(value)
    return sorted(found)


__all__ = ["RESOLUTION_LABELS", "detect_resolutions"]
