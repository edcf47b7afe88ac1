"""Shared pytest fixtures for EquityHub tests."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any

import pytest
from equityhub.portfolio.models import EquityHolding


@pytest.fixture
def sample_holdings() -> list[EquityHolding]:
    """Two holdings: A forecasts 400/yr, B forecasts 200/yr."""
    return [
        EquityHolding(
            id=1,
            symbol="AAA",
            name="Alpha",
            price=1000.0,
            dividend_yield_percent=4.0,
            shares_owned=10,
            industry="Tech",
        ),
        EquityHolding(
            id=2,
            symbol="BBB",
            name="Beta",
            price=2000.0,
            dividend_yield_percent=2.0,
            shares_owned=5,
            industry="Finance",
        ),
    ]


@pytest.fixture
def sector_holdings() -> list[EquityHolding]:
    """Four holdings across three industries, one without a label."""
    return [
        EquityHolding(1, "T1", "Tech One", 100.0, 5.0, 10, "Tech"),  # 50
        EquityHolding(2, "F1", "Fin One", 200.0, 2.5, 10, "Finance"),  # 50
        EquityHolding(3, "T2", "Tech Two", 50.0, 4.0, 50, "Tech"),  # 100
        EquityHolding(4, "N1", "No Label", 10.0, 10.0, 0, ""),  # 0
    ]


# -- Fake EquityHub backend ---------------------------------------------------


def backend_record(
    holding_id: int,
    symbol: str,
    price: float,
    dividend_yield: float,
    shares_owned: int,
    industry: str = "",
) -> dict[str, Any]:
    """A holding record in the shape the backend serves."""
    return {
        "stock_No": holding_id,
        "symbol": symbol,
        "name": f"{symbol} Corp",
        "price": price,
        "dividend_yield": dividend_yield,
        "shares_owned": shares_owned,
        "industry": industry,
    }


@dataclass
class FakeBackend:
    """State behind the fake server, inspected and tweaked by tests."""

    url: str = ""
    records: list[dict[str, Any]] = field(default_factory=list)
    requests: list[dict[str, Any]] = field(default_factory=list)
    fail: set[str] = field(default_factory=set)
    csrf_token: str = "tok-123"
    next_id: int = 100


def _make_handler(state: FakeBackend) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
            pass

        def _body(self) -> Any:
            length = int(self.headers.get("Content-Length", 0))
            return json.loads(self.rfile.read(length)) if length else None

        def _record(self, body: Any) -> None:
            state.requests.append(
                {
                    "method": self.command,
                    "path": self.path,
                    "csrf": self.headers.get("X-CSRFToken"),
                    "body": body,
                }
            )

        def _respond(self, code: int, payload: Any, cookie: bool = False) -> None:
            raw = json.dumps(payload).encode()
            self.send_response(code)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(raw)))
            if cookie:
                self.send_header("Set-Cookie", f"csrftoken={state.csrf_token}; Path=/")
            self.end_headers()
            self.wfile.write(raw)

        def do_GET(self) -> None:
            self._record(None)
            if self.path != "/home/api/":
                self._respond(404, {"error": "Not found"})
            elif "fetch" in state.fail:
                self._respond(503, {"error": "Service unavailable"})
            else:
                self._respond(200, state.records, cookie=True)

        def do_PUT(self) -> None:
            body = self._body()
            self._record(body)
            if self.path == "/home/api/update/":
                if "update" in state.fail:
                    self._respond(500, {"error": "Price source down"})
                    return
                for record in state.records:
                    record["price"] = record["price"] * 2
                self._respond(200, {"message": "updated"})
            elif self.path == "/home/api/":
                if "purchase" in state.fail:
                    self._respond(500, {"error": "Purchase failed"})
                    return
                for item in body:
                    for record in state.records:
                        if record["stock_No"] == item["id"]:
                            record["shares_owned"] += item["quantity"]
                self._respond(200, {"message": "purchased"})
            else:
                self._respond(404, {"error": "Not found"})

        def do_POST(self) -> None:
            body = self._body()
            self._record(body)
            symbol = body.get("ticker_symbol", "")
            if symbol == "BAD":
                self._respond(400, {"error": "Invalid ticker symbol"})
                return
            state.records.append(backend_record(state.next_id, symbol, 500.0, 3.0, 0))
            state.next_id += 1
            self._respond(201, {"message": f"Registered {symbol}"})

        def do_DELETE(self) -> None:
            self._record(None)
            parts = self.path.rstrip("/").split("/")
            holding_id = int(parts[-1])
            before = len(state.records)
            state.records[:] = [r for r in state.records if r["stock_No"] != holding_id]
            if len(state.records) == before:
                self._respond(404, {"error": "Holding not found"})
            else:
                self._respond(200, {"message": "deleted"})

    return Handler


@pytest.fixture
def fake_backend() -> Iterator[FakeBackend]:
    """Run a fake EquityHub backend on a random local port."""
    state = FakeBackend(
        records=[
            backend_record(1, "AAA", 1000.0, 4.0, 10, "Tech"),
            backend_record(2, "BBB", 2000.0, 2.0, 5, "Finance"),
        ]
    )
    server = HTTPServer(("127.0.0.1", 0), _make_handler(state))
    state.url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield state
    server.shutdown()
    server.server_close()
