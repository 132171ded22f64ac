"""REST client for the PocketBase collections the scanner mirrors into.

Only the handful of record endpoints needed for presence reconciliation are
wrapped here. Authentication happens once as a superuser; when the token
expires the client re-authenticates with the stored credentials and retries
the failed request a single time.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import requests

from core.logging_utils import redact_secret

from .base import Record
from .errors import AuthenticationError, RecordNotFoundError, RemoteStoreError

LOGGER = logging.getLogger("streamflex.store.pocketbase")

SUPERUSERS_COLLECTION = "_superusers"


def filter_literal(value: str) -> str:
    """Return *value* quoted for use inside a PocketBase filter expression."""

    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class PocketBaseStore:
    """Thin ``requests`` based implementation of :class:`store.base.RecordStore`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        page_size: int = 500,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.page_size = max(1, int(page_size))
        self._session = session or requests.Session()
        self._credentials: Optional[tuple[str, str]] = None
        self._token: Optional[str] = None

    # ------------------------------------------------------------------
    @property
    def authenticated(self) -> bool:
        return bool(self._token)

    def authenticate_superuser(self, email: str, password: str) -> None:
        """Log in as a superuser and keep the credentials for re-authentication."""

        self._credentials = (email, password)
        self._login()

    def _login(self) -> None:
        if not self._credentials:
            raise AuthenticationError("no superuser credentials configured", status=401)
        email, password = self._credentials
        url = f"{self.base_url}/api/collections/{SUPERUSERS_COLLECTION}/auth-with-password"
        try:
            response = self._session.post(
                url,
                json={"identity": email, "password": password},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthenticationError(f"PocketBase unreachable at {self.base_url}: {exc}") from exc
        if response.status_code >= 400:
            raise AuthenticationError(
                f"superuser authentication failed for {redact_secret(email)}: {_error_message(response)}",
                status=response.status_code,
            )
        token = (_json_body(response) or {}).get("token")
        if not token:
            raise AuthenticationError("authentication response did not include a token")
        self._token = str(token)
        self._session.headers["Authorization"] = self._token
        LOGGER.info("PocketBase superuser authenticated (%s)", redact_secret(email))

    # ------------------------------------------------------------------
    def _records_url(self, collection: str, record_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/collections/{quote(collection, safe='')}/records"
        if record_id is not None:
            url = f"{url}/{quote(str(record_id), safe='')}"
        return url

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        response = self._send(method, url, **kwargs)
        if response.status_code == 401 and self._credentials:
            LOGGER.info("PocketBase token rejected; re-authenticating")
            self._login()
            response = self._send(method, url, **kwargs)
        if response.status_code == 404:
            raise RecordNotFoundError(_error_message(response))
        if response.status_code >= 400:
            raise RemoteStoreError(
                f"{method} {url} failed: {_error_message(response)}",
                status=response.status_code,
            )
        return response

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise RemoteStoreError(f"{method} {url} failed: {exc}") from exc

    # ------------------------------------------------------------------
    def list_records(self, collection: str, *, fields: Optional[Sequence[str]] = None) -> List[Record]:
        """Fetch every record of *collection*, optionally projecting *fields*."""

        items: List[Record] = []
        page = 1
        while True:
            params: Dict[str, Any] = {
                "page": page,
                "perPage": self.page_size,
                "skipTotal": 1,
            }
            if fields:
                params["fields"] = ",".join(fields)
            response = self._request("GET", self._records_url(collection), params=params)
            batch = (_json_body(response) or {}).get("items") or []
            items.extend(batch)
            if len(batch) < self.page_size:
                return items
            page += 1

    def get_first(self, collection: str, field: str, value: str) -> Record:
        params = {
            "page": 1,
            "perPage": 1,
            "skipTotal": 1,
            "filter": f"{field}={filter_literal(value)}",
        }
        response = self._request("GET", self._records_url(collection), params=params)
        batch = (_json_body(response) or {}).get("items") or []
        if not batch:
            raise RecordNotFoundError(f"{collection}: no record with {field}={value!r}")
        return batch[0]

    def create(self, collection: str, payload: Dict[str, Any]) -> Record:
        response = self._request("POST", self._records_url(collection), json=payload)
        return _json_body(response) or {}

    def update(self, collection: str, record_id: str, payload: Dict[str, Any]) -> Record:
        response = self._request("PATCH", self._records_url(collection, record_id), json=payload)
        return _json_body(response) or {}

    def delete(self, collection: str, record_id: str) -> None:
        self._request("DELETE", self._records_url(collection, record_id))

    def close(self) -> None:
        self._session.close()


def _json_body(response: requests.Response) -> Optional[Dict[str, Any]]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _error_message(response: requests.Response) -> str:
    body = _json_body(response)
    if body and body.get("message"):
        return f"{response.status_code} {body['message']}"
    text = (response.text or "").strip()
    return f"{response.status_code} {text[:200]}" if text else str(response.status_code)


__all__ = ["PocketBaseStore", "filter_literal"]
