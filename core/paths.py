from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

__all__ = [
    "get_default_settings_paths",
    "get_logs_dir",
    "resolve_working_dir",
]

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _expand_path(value: str) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(value))
    return Path(expanded).resolve()


def _prepare_working_dir(candidate: Path) -> Optional[Path]:
    try:
        candidate.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    if not os.access(candidate, os.W_OK):
        return None
    return candidate


def resolve_working_dir() -> Path:
    """Resolve the StreamFlex working directory, creating it if required."""

    env_home = os.environ.get("STREAMFLEX_HOME")
    if env_home:
        try:
            env_path = _expand_path(env_home)
        except (OSError, RuntimeError):
            env_path = None
        if env_path:
            prepared = _prepare_working_dir(env_path)
            if prepared is not None:
                return prepared

    prepared = _prepare_working_dir(Path.home() / ".streamflex")
    if prepared is not None:
        return prepared

    fallback = _PROJECT_ROOT / ".streamflex"
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def get_logs_dir(working_dir: Path) -> Path:
    return working_dir / "logs"


def get_default_settings_paths(working_dir: Path) -> list[Path]:
    """Return the search order for settings.json files."""

    return [working_dir / "settings.json", _PROJECT_ROOT / "settings.json"]
