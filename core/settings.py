from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from dotenv import load_dotenv

from .paths import get_default_settings_paths, get_logs_dir
from .settings_schema import SETTINGS_VALIDATOR

__all__ = [
    "DEFAULT_SETTINGS",
    "ENV_OVERRIDES",
    "SETTINGS_VERSION",
    "apply_env_overrides",
    "load_settings",
    "merge_defaults",
]

LOGGER = logging.getLogger("streamflex.settings")

SETTINGS_VERSION = 1


DEFAULT_SETTINGS: Dict[str, Any] = {
    "version": SETTINGS_VERSION,
    "media": {
        "movies_root": "/mnt/media/movies",
        "series_root": "/mnt/media/series",
        "ads_root": "/mnt/media/ads",
        "completion_marker": "master.m3u8",
    },
    "collections": {
        "movies": "movies",
        "series": "series",
        "episodes": "episodes",
        "ads": "ads",
    },
    "store": {
        "backend": "pocketbase",
    },
    "pocketbase": {
        "url": "http://127.0.0.1:8090",
        "admin_email": None,
        "admin_password": None,
        "timeout_s": 15,
        "page_size": 500,
    },
    "server": {
        "host": "0.0.0.0",
        "port": 3001,
        "api_key": None,
        "cors_origins": [],
    },
}


def _as_int(value: str) -> int:
    return int(value.strip())


# Environment variable -> (section, key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "MOVIES_ROOT": ("media", "movies_root", str),
    "SERIES_ROOT": ("media", "series_root", str),
    "ADS_ROOT": ("media", "ads_root", str),
    "POCKETBASE_URL": ("pocketbase", "url", str),
    "POCKETBASE_ADMIN_EMAIL": ("pocketbase", "admin_email", str),
    "POCKETBASE_ADMIN_PASSWORD": ("pocketbase", "admin_password", str),
    "SERVER_HOST": ("server", "host", str),
    "SERVER_PORT": ("server", "port", _as_int),
    "STREAMFLEX_API_KEY": ("server", "api_key", str),
    "STREAMFLEX_STORE": ("store", "backend", str),
}


def merge_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    def _merge(default: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in default.items():
            if isinstance(value, dict):
                current = payload.get(key)
                if isinstance(current, dict):
                    result[key] = _merge(value, current)
                else:
                    result[key] = _merge(value, {})
            elif isinstance(value, list):
                current = payload.get(key)
                result[key] = list(current) if isinstance(current, list) else list(value)
            else:
                result[key] = payload.get(key, value)
        for key, value in payload.items():
            if key not in result:
                result[key] = value
        return result

    return _merge(DEFAULT_SETTINGS, data or {})


def apply_env_overrides(settings: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Overlay non-empty environment variables listed in :data:`ENV_OVERRIDES`."""

    env = os.environ if environ is None else environ
    for variable, (section, key, convert) in ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is None or not str(raw).strip():
            continue
        try:
            value = convert(str(raw))
        except (TypeError, ValueError):
            LOGGER.warning("Ignoring invalid value for %s", variable)
            continue
        block = settings.setdefault(section, {})
        if isinstance(block, dict):
            block[key] = value
    return settings


def _load_env_files(working_dir: Path) -> None:
    for candidate in (working_dir / ".env", Path.cwd() / ".env"):
        if candidate.is_file():
            load_dotenv(candidate, override=False)


def _log_unknown_keys(settings: Dict[str, Any], working_dir: Path) -> None:
    unknown = list(SETTINGS_VALIDATOR.unknown_keys(settings))
    if not unknown:
        return
    LOGGER.warning("Unknown settings keys: %s", ", ".join(unknown))
    logs_dir = get_logs_dir(working_dir)
    payload = {
        "ts": time.time(),
        "unknown": unknown,
    }
    target = logs_dir / "settings_unknown.json"
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
    except OSError:
        return


def load_settings(working_dir: Path, *, use_env: bool = True) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for candidate in get_default_settings_paths(working_dir):
        try:
            with open(candidate, "r", encoding="utf-8") as handle:
                loaded = json.load(handle)
        except FileNotFoundError:
            continue
        except json.JSONDecodeError:
            LOGGER.warning("Skipping unreadable settings file %s", candidate)
            continue
        except OSError:
            continue
        if isinstance(loaded, dict):
            data = loaded
            break
    merged = merge_defaults(data)
    if merged.get("version") != SETTINGS_VERSION:
        merged["version"] = SETTINGS_VERSION
    merged.setdefault("working_dir", str(working_dir))
    _log_unknown_keys(merged, working_dir)
    if use_env:
        _load_env_files(working_dir)
        apply_env_overrides(merged)
    return merged

