"""HTTP client for the EquityHub backend.

Uses only stdlib (urllib). Cookies set by the backend are kept in a
cookie jar for the lifetime of the client; mutating requests echo the
CSRF cookie back in an ``X-CSRFToken`` header, as Django expects.

Usage::

    from equityhub.api.client import EquityHubClient

    client = EquityHubClient("http://localhost:8000")
    holdings = client.fetch_holdings()
    client.register_ticker("7203")

Every failure, HTTP or transport, surfaces as ``ApiError``.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Mapping
from http.cookiejar import CookieJar
from typing import Any

from equityhub.config import DEFAULT_CSRF_COOKIE, DEFAULT_TIMEOUT, Settings
from equityhub.portfolio.models import EquityHolding, parse_holdings

logger = logging.getLogger(__name__)

_API_PREFIX = "/home/api/"


class ApiError(RuntimeError):
    """A backend call failed.

    Attributes:
        method: HTTP method of the failed request.
        path: Request path relative to the API prefix.
        status: HTTP status code, or None for transport failures.
        detail: The backend's ``error`` field when it sent one, otherwise
            the raw body or the transport error text.

    """

    def __init__(
        self,
        method: str,
        path: str,
        status: int | None,
        detail: str,
    ) -> None:
        self.method = method
        self.path = path
        self.status = status
        self.detail = detail
        where = f"{method} {_API_PREFIX}{path}"
        if status is None:
            super().__init__(f"{where} failed: {detail}")
        else:
            super().__init__(f"{where} returned {status}: {detail}")


def _error_detail(raw: bytes) -> str:
    """Pull the ``error`` field out of an error body, if it is JSON."""
    text = raw.decode(errors="replace")
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return text


class EquityHubClient:
    """Thin wrapper around the EquityHub REST endpoints."""

    def __init__(
        self,
        base_url: str,
        csrf_cookie_name: str = DEFAULT_CSRF_COOKIE,
        timeout: float = DEFAULT_TIMEOUT,
        csrf_token: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.csrf_cookie_name = csrf_cookie_name
        self.timeout = timeout
        self.csrf_token = csrf_token
        self.cookies = CookieJar()
        self._opener = urllib.request.build_opener(
            urllib.request.HTTPCookieProcessor(self.cookies)
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> EquityHubClient:
        """Build a client from loaded settings."""
        return cls(
            settings.api_url,
            csrf_cookie_name=settings.csrf_cookie,
            timeout=settings.timeout,
        )

    # -- low-level request helper -------------------------------------------

    def _csrf_header(self) -> str:
        """CSRF token to send: explicit token first, then the cookie jar."""
        if self.csrf_token:
            return self.csrf_token
        for cookie in self.cookies:
            if cookie.name == self.csrf_cookie_name and cookie.value:
                return cookie.value
        return ""

    def _request(
        self,
        method: str,
        path: str,
        body: Any = None,
    ) -> Any:
        """Make a request to the backend and decode the JSON reply."""
        url = f"{self.base_url}{_API_PREFIX}{path}"
        data = json.dumps(body).encode() if body is not None else None

        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Accept", "application/json")
        req.add_header("Content-Type", "application/json")
        if method != "GET":
            req.add_header("X-CSRFToken", self._csrf_header())

        logger.debug("%s %s", method, url)
        try:
            with self._opener.open(req, timeout=self.timeout) as resp:
                raw = resp.read()
                return json.loads(raw) if raw else {}
        except urllib.error.HTTPError as exc:
            raise ApiError(method, path, exc.code, _error_detail(exc.read())) from exc
        except urllib.error.URLError as exc:
            raise ApiError(method, path, None, str(exc.reason)) from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise ApiError(method, path, None, str(exc)) from exc

    # -- Holdings -----------------------------------------------------------

    def fetch_holdings(self) -> list[EquityHolding]:
        """Fetch the full, ordered holdings list.

        Raises:
            ApiError: If the request fails or the reply is not a list of
                valid holding records.

        """
        result = self._request("GET", "")
        if not isinstance(result, list):
            raise ApiError("GET", "", None, f"expected a list, got {type(result).__name__}")
        try:
            return parse_holdings(result)
        except ValueError as exc:
            raise ApiError("GET", "", None, str(exc)) from exc

    def update_prices(self) -> Any:
        """Ask the backend to refresh prices and yields for every holding."""
        return self._request("PUT", "update/", {})

    def commit_purchase(self, quantities: Mapping[int, int]) -> Any:
        """Add purchased shares to holdings.

        Args:
            quantities: Extra shares by holding id (a PurchaseOverlay works).

        """
        payload = [
            {"id": holding_id, "quantity": quantity}
            for holding_id, quantity in quantities.items()
        ]
        return self._request("PUT", "", payload)

    def register_ticker(self, ticker_symbol: str) -> str:
        """Start tracking a ticker.

        Returns:
            The backend's confirmation message.

        Raises:
            ValueError: If the symbol is blank.
            ApiError: If the backend rejects the symbol or is unreachable.

        """
        symbol = ticker_symbol.strip()
        if not symbol:
            msg = "ticker_symbol must be a non-empty string"
            raise ValueError(msg)
        result = self._request("POST", "register/", {"ticker_symbol": symbol})
        if isinstance(result, dict):
            return str(result.get("message", ""))
        return ""

    def delete_holding(self, holding_id: int) -> Any:
        """Stop tracking a holding."""
        return self._request("DELETE", f"delete/{holding_id}/")
