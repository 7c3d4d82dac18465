from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from tadoku_client.errors import (
    AuthError,
    ClientError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)
from tadoku_client.gateway import RequestGateway
from tadoku_client.session import Session
from tadoku_client.storage import Storage


def _response(status_code=200, body=None, content=b"x"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content if body is not None or status_code != 204 else b""
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session(tmp_path):
    return Session(Storage(str(tmp_path)))


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def gateway(session, http):
    return RequestGateway(session, base_url="http://api.test/", http=http)


def _sent_headers(http):
    return http.request.call_args.kwargs["headers"]


def test_bearer_token_is_injected(gateway, session, http):
    session.login("tok-1")
    http.request.return_value = _response(body={"stories": []})

    body = asyncio.run(gateway.request("GET", "/stories", params={"page": 1, "limit": 10}))

    assert body == {"stories": []}
    method, url = http.request.call_args.args
    assert (method, url) == ("GET", "http://api.test/api/v1/stories")
    assert _sent_headers(http) == {"Authorization": "Bearer tok-1"}
    assert http.request.call_args.kwargs["params"] == {"page": 1, "limit": 10}


def test_no_token_sends_unauthenticated(gateway, http):
    http.request.return_value = _response(body={})
    asyncio.run(gateway.request("GET", "/users/me/stats"))
    assert "Authorization" not in _sent_headers(http)


def test_login_routes_skip_the_credential(gateway, session, http):
    session.login("tok-1")
    http.request.return_value = _response(body={"token": "new"})
    asyncio.run(gateway.request("POST", "/login", json={}, authenticated=False))
    assert _sent_headers(http) == {}


def test_token_after_logout_is_not_sent(gateway, session, http):
    session.login("tok-1")
    session.logout()
    http.request.return_value = _response(body={})
    asyncio.run(gateway.request("GET", "/stories"))
    assert _sent_headers(http) == {}


def test_no_content_returns_none(gateway, http):
    http.request.return_value = _response(status_code=204)
    assert asyncio.run(gateway.request("DELETE", "/stories/7")) is None


@pytest.mark.parametrize(
    "status, error_type",
    [
        (400, InvalidRequestError),
        (401, AuthError),
        (403, AuthError),
        (404, NotFoundError),
        (409, ConflictError),
        (418, ClientError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
    ],
)
def test_status_codes_map_to_typed_errors(gateway, http, status, error_type):
    http.request.return_value = _response(status_code=status, body={"error": "nope"})
    with pytest.raises(error_type) as excinfo:
        asyncio.run(gateway.request("GET", "/stories/1"))
    assert excinfo.value.status_code == status
    assert excinfo.value.message == "nope"


def test_server_rejected_input_is_a_validation_error(gateway, http):
    http.request.return_value = _response(
        status_code=400, body={"message": {"error": "Title is required"}}
    )
    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(gateway.request("PATCH", "/stories/1", json={"title": ""}))
    assert excinfo.value.message == "Title is required"


def test_error_without_body_uses_default_message(gateway, http):
    http.request.return_value = _response(status_code=429)
    with pytest.raises(RateLimitError) as excinfo:
        asyncio.run(gateway.request("POST", "/stories", json={"prompt": "x"}))
    assert "quota" in excinfo.value.message.lower()


def test_transport_failure_is_not_retried(gateway, http):
    http.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(TransportError):
        asyncio.run(gateway.request("GET", "/stories"))
    assert http.request.call_count == 1


def test_default_http_session_has_json_headers(session):
    gateway = RequestGateway(session)
    assert gateway.http.headers["Content-Type"] == "application/json"
    assert gateway.url("/login") == "http://localhost:8080/api/v1/login"


def test_non_json_success_body_is_a_server_error(gateway, http):
    resp = _response(status_code=200, content=b"<html>proxy page</html>")
    http.request.return_value = resp
    with pytest.raises(ServerError) as excinfo:
        asyncio.run(gateway.request("GET", "/stories/1"))
    assert excinfo.value.status_code == 200
