from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from store.errors import AuthenticationError, RecordNotFoundError, RemoteStoreError
from store.pocketbase import PocketBaseStore, filter_literal


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Optional[Any] = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []

    def _next(self, method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
        self.calls.append({"method": method, "url": url, "auth": self.headers.get("Authorization"), **kwargs})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method, url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, kwargs)

    def close(self) -> None:
        pass


def _client(responses: List[Any], **kwargs: Any) -> tuple[PocketBaseStore, FakeSession]:
    session = FakeSession(responses)
    return PocketBaseStore("http://pb.local:8090/", session=session, **kwargs), session


def test_authenticate_superuser_installs_token():
    client, session = _client([FakeResponse(200, {"token": "tok-1", "record": {}})])

    client.authenticate_superuser("admin@example.com", "secret")

    call = session.calls[0]
    assert call["url"] == "http://pb.local:8090/api/collections/_superusers/auth-with-password"
    assert call["json"] == {"identity": "admin@example.com", "password": "secret"}
    assert session.headers["Authorization"] == "tok-1"
    assert client.authenticated


def test_authenticate_superuser_failure_raises():
    client, _ = _client([FakeResponse(400, {"message": "Failed to authenticate."})])

    with pytest.raises(AuthenticationError) as excinfo:
        client.authenticate_superuser("admin@example.com", "wrong")
    assert excinfo.value.status == 400


def test_list_records_pages_until_short_batch():
    client, session = _client(
        [
            FakeResponse(200, {"items": [{"id": "1", "folder_name": "a"}, {"id": "2", "folder_name": "b"}]}),
            FakeResponse(200, {"items": [{"id": "3", "folder_name": "c"}]}),
        ],
        page_size=2,
    )

    records = client.list_records("movies", fields=("id", "folder_name"))

    assert [record["id"] for record in records] == ["1", "2", "3"]
    assert [call["params"]["page"] for call in session.calls] == [1, 2]
    assert session.calls[0]["params"]["fields"] == "id,folder_name"
    assert session.calls[0]["url"] == "http://pb.local:8090/api/collections/movies/records"


def test_get_first_escapes_filter_value():
    client, session = _client([FakeResponse(200, {"items": [{"id": "s1", "title": "Grey's Anatomy"}]})])

    record = client.get_first("series", "title", "Grey's Anatomy")

    assert record["id"] == "s1"
    assert session.calls[0]["params"]["filter"] == "title='Grey\\'s Anatomy'"
    assert filter_literal("a\\b") == "'a\\\\b'"


def test_get_first_without_match_raises_not_found():
    client, _ = _client([FakeResponse(200, {"items": []})])

    with pytest.raises(RecordNotFoundError):
        client.get_first("series", "title", "Nope")


def test_expired_token_is_refreshed_once():
    client, session = _client(
        [
            FakeResponse(200, {"token": "tok-1"}),
            FakeResponse(401, {"message": "The request requires valid record authorization token."}),
            FakeResponse(200, {"token": "tok-2"}),
            FakeResponse(204),
        ]
    )
    client.authenticate_superuser("admin@example.com", "secret")

    client.delete("ads", "rec 1")

    methods = [call["method"] for call in session.calls]
    assert methods == ["POST", "DELETE", "POST", "DELETE"]
    assert session.calls[-1]["url"].endswith("/api/collections/ads/records/rec%201")
    assert session.calls[-1]["auth"] == "tok-2"


def test_http_errors_become_remote_store_errors():
    client, _ = _client([FakeResponse(400, {"message": "Failed to create record."})])

    with pytest.raises(RemoteStoreError) as excinfo:
        client.create("movies", {"folder_name": "x"})
    assert excinfo.value.status == 400
    assert "Failed to create record." in str(excinfo.value)


def test_transport_errors_become_remote_store_errors():
    client, _ = _client([requests.ConnectionError("refused")])

    with pytest.raises(RemoteStoreError) as excinfo:
        client.update("movies", "abc", {"title": "New"})
    assert excinfo.value.status is None


def test_create_and_update_send_json_payloads():
    client, session = _client(
        [
            FakeResponse(200, {"id": "m1", "folder_name": "Heat.1995"}),
            FakeResponse(200, {"id": "m1", "title": "Heat"}),
        ]
    )

    created = client.create("movies", {"folder_name": "Heat.1995"})
    updated = client.update("movies", "m1", {"title": "Heat"})

    assert created["id"] == "m1"
    assert updated["title"] == "Heat"
    assert session.calls[0]["method"] == "POST"
    assert session.calls[1]["method"] == "PATCH"
    assert session.calls[1]["url"].endswith("/records/m1")
    assert session.calls[1]["json"] == {"title": "Heat"}
