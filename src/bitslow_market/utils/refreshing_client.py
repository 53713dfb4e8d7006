"""Caller-side HTTP wrapper that silently refreshes an expired session.

Protocol, capped at one retry:

1. send the request with the current access token;
2. if (and only if) the answer is 401, exchange the stored refresh token at
   ``/api/refresh``; on success retry the original request once with the new
   access token and return that answer whatever its status; if the refresh
   fails, return the original 401 unchanged.

The original request goes over the wire at most twice and the retried
request is never retried again. The two legs share no
transaction: callers must not resubmit non-idempotent requests whose first
outcome is unknown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from bitslow_market.core.security import AUTH_HEADER

logger = logging.getLogger(__name__)

REFRESH_PATH = "/api/refresh"


@dataclass
class TokenPair:
    """Tokens held by the caller between requests."""

    access_token: str | None = None
    refresh_token: str | None = None

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


class RefreshingClient:
    """Wraps an ``httpx.Client`` with the refresh-and-retry-once protocol."""

    def __init__(
        self,
        http: httpx.Client,
        tokens: TokenPair | None = None,
        *,
        refresh_path: str = REFRESH_PATH,
        header_name: str = AUTH_HEADER,
    ) -> None:
        self.http = http
        self.tokens = tokens or TokenPair()
        self.refresh_path = refresh_path
        self.header_name = header_name

    def _send(self, method: str, url: str, token: str | None, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if token:
            headers[self.header_name] = token
        return self.http.request(method, url, headers=headers, **kwargs)

    def _refresh_access_token(self) -> str | None:
        """Return a new access token, or None if the refresh was refused."""
        if not self.tokens.refresh_token:
            return None
        try:
            response = self.http.get(
                self.refresh_path,
                headers={self.header_name: self.tokens.refresh_token},
            )
        except httpx.HTTPError as err:
            logger.warning("Token refresh failed: %s", err)
            return None
        if response.status_code != httpx.codes.OK:
            logger.info("Token refresh refused with status %d", response.status_code)
            return None
        token = response.headers.get(self.header_name)
        if not token:
            try:
                body = response.json()
            except ValueError:
                body = None
            token = body.get("accessToken") if isinstance(body, dict) else None
        return token if isinstance(token, str) and token else None

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, refreshing the session and retrying once on 401."""
        response = self._send(method, url, self.tokens.access_token, **kwargs)
        if response.status_code != httpx.codes.UNAUTHORIZED:
            return response

        new_token = self._refresh_access_token()
        if new_token is None:
            return response

        self.tokens.access_token = new_token
        return self._send(method, url, new_token, **kwargs)

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def _store_session(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            body = response.json()
            self.tokens.access_token = response.headers.get(self.header_name) or body.get(
                "accessToken"
            )
            self.tokens.refresh_token = body.get("refreshToken")
        return response

    def login(self, email: str, password: str) -> httpx.Response:
        """Log in and keep the returned token pair."""
        response = self.http.post("/api/login", json={"email": email, "password": password})
        return self._store_session(response)

    def signup(
        self,
        *,
        name: str,
        email: str,
        password: str,
        phone: str | None = None,
        address: str | None = None,
    ) -> httpx.Response:
        """Register and keep the returned token pair."""
        response = self.http.post(
            "/api/signup",
            json={
                "name": name,
                "email": email,
                "password": password,
                "phoneNumber": phone,
                "address": address,
            },
        )
        return self._store_session(response)

    def logout(self) -> httpx.Response:
        """Tell the server and forget the local tokens."""
        response = self.http.post("/api/logout")
        self.tokens.clear()
        return response
