"""CLI entry-point to launch the StreamFlex scanner HTTP service."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import uvicorn

from api import __version__ as API_VERSION
from api.scan_worker import ScanTrigger
from api.server import APIServerConfig, create_app
from core.logging_utils import configure_json_logging, redact_secret
from core.paths import resolve_working_dir
from core.settings import load_settings
from scanner.service import ScanOrchestrator
from scanner.types import load_scan_settings
from store import AuthenticationError, PocketBaseStore, RecordStore, build_store

LOGGER = logging.getLogger("streamflex")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3001


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the StreamFlex media scanner service.")
    parser.add_argument("--host", default=None, help="Bind host (default from settings/SERVER_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default from settings/SERVER_PORT)")
    parser.add_argument("--api-key", dest="api_key", default=None, help="Require this X-API-Key on scan routes")
    parser.add_argument(
        "--cors",
        action="append",
        dest="cors",
        default=None,
        help="Allowed CORS origin (repeatable).",
    )
    parser.add_argument(
        "--scan-once",
        action="store_true",
        help="Run a single full scan in the foreground and exit instead of serving HTTP.",
    )
    parser.add_argument(
        "--store",
        choices=["pocketbase", "memory"],
        default=None,
        help="Override the record store backend.",
    )
    return parser.parse_args(argv)


def resolve_server_settings(args: argparse.Namespace, settings: Dict[str, Any]) -> tuple[str, int, Optional[str], List[str]]:
    server_settings = settings.get("server") if isinstance(settings.get("server"), dict) else {}
    host = (args.host or server_settings.get("host") or DEFAULT_HOST).strip() or DEFAULT_HOST
    port = args.port or server_settings.get("port") or DEFAULT_PORT
    try:
        port = int(port)
    except (TypeError, ValueError):
        port = DEFAULT_PORT
    api_key = args.api_key if args.api_key else server_settings.get("api_key")
    if args.cors:
        cors = list(args.cors)
    else:
        cors = list(server_settings.get("cors_origins") or [])
    return host, port, api_key, cors


def connect_store(settings: Dict[str, Any]) -> RecordStore:
    """Build the configured store and authenticate when it is PocketBase.

    Raises :class:`store.AuthenticationError` when the superuser login fails.
    """

    store = build_store(settings)
    if isinstance(store, PocketBaseStore):
        pb = settings.get("pocketbase") or {}
        email = pb.get("admin_email")
        password = pb.get("admin_password")
        if not email or not password:
            raise AuthenticationError("POCKETBASE_ADMIN_EMAIL and POCKETBASE_ADMIN_PASSWORD must be set")
        LOGGER.info("Authenticating PocketBase superuser %s at %s", redact_secret(str(email)), store.base_url)
        store.authenticate_superuser(str(email), str(password))
    return store


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    working_dir = resolve_working_dir()
    configure_json_logging("streamflex", working_dir=Path(working_dir))
    settings = load_settings(working_dir)
    if args.store:
        settings.setdefault("store", {})["backend"] = args.store

    try:
        store = connect_store(settings)
    except AuthenticationError as exc:
        LOGGER.error("FATAL: Could not authenticate PocketBase superuser. %s", exc)
        return 1
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return 2

    try:
        return _run(args, settings, store)
    finally:
        close = getattr(store, "close", None)
        if callable(close):
            close()


def _run(args: argparse.Namespace, settings: Dict[str, Any], store: RecordStore) -> int:
    scan_settings = load_scan_settings(settings)
    orchestrator = ScanOrchestrator(store, scan_settings)
    LOGGER.info(
        "Media roots: movies=%s series=%s ads=%s",
        scan_settings.movies_root,
        scan_settings.series_root,
        scan_settings.ads_root,
    )

    if args.scan_once:
        report = orchestrator.scan_all_media()
        return 0 if report is not None and report.error is None else 1

    host, port, api_key, cors = resolve_server_settings(args, settings)
    app = create_app(
        APIServerConfig(
            trigger=ScanTrigger(orchestrator),
            api_key=api_key,
            cors_origins=cors,
            app_version=API_VERSION,
        )
    )

    LOGGER.info("Server listening on http://%s:%s", host, port)
    uvicorn_config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)
    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
