from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import API_BASE_URL, API_PREFIX, HTTP_TIMEOUT, REQUEST_HEADERS
from .errors import ServerError, TransportError, error_for_status
from .session import Session

logger = logging.getLogger("tadoku")


class RequestGateway:
    """Single exit point for HTTP traffic.

    Decorates each call with the session's bearer token and turns transport or
    status failures into the typed errors from :mod:`tadoku_client.errors`.
    Nothing is retried here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        session: Session,
        base_url: str = API_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        http: Optional[requests.Session] = None,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or self._create_http_session()

    def _create_http_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        adapter = HTTPAdapter(max_retries=Retry(total=0, read=False))
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    def auth_headers(self) -> Dict[str, str]:
        token = self.session.token
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        # Read the token on the loop so a concurrent logout is seen consistently.
        headers = self.auth_headers() if authenticated else {}
        return await asyncio.to_thread(
            self.send, method, path, json=json, params=params, headers=headers
        )

    def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = self.url(path)
        logger.debug("%s %s", method, url)
        try:
            resp = self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers or {},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError() from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("%s %s -> %s %s", method, url, resp.status_code, message or "")
            raise error_for_status(resp.status_code, message)

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("%s %s -> %s with a non-JSON body", method, url, resp.status_code)
            raise ServerError(resp.status_code, "Malformed response from the server.") from e


def _error_message(resp: requests.Response) -> Optional[str]:
    """Pull a human-readable message out of an error body, if there is one."""
    try:
        body = resp.json()
    except ValueError:
        return None
    # Handlers answer {"error": ...}; framework errors answer {"message": ...},
    # which may itself wrap {"error": ...}.
    while isinstance(body, dict):
        body = body.get("error") or body.get("message")
    if isinstance(body, str) and body.strip():
        return body
    return None
