"""EquityHub sidecar entry point.

Communicates with the dashboard front end via stdin/stdout using
newline-delimited JSON messages.

Protocol:
    Request:  {"id": "uuid", "method": "string", "params": {}}
    Response: {"id": "uuid", "result": {}}
    Error:    {"id": "uuid", "error": {"message": "string", "traceback": "string"}}

Computation methods are stateless: each request carries the holdings
(backend records) and the purchase overlay (``{id: quantity}``) it
applies to. Backend methods share one client per process so cookies,
including the CSRF token, persist between calls.
"""

from __future__ import annotations

import functools
import json
import sys
import traceback
from typing import Any

from equityhub.api.client import EquityHubClient
from equityhub.config import Settings
from equityhub.export.csv_export import export_dividend_table_csv, export_sector_csv
from equityhub.export.formatting import format_currency
from equityhub.export.json_export import DashboardEncoder, export_dashboard_json
from equityhub.portfolio.dividends import compute_dividend_summary
from equityhub.portfolio.models import parse_holdings
from equityhub.portfolio.overlay import PurchaseOverlay
from equityhub.portfolio.sectors import chart_slices, compute_sector_breakdown
from equityhub.portfolio.sorting import (
    post_purchase_percentages,
    sort_by_post_purchase_percent,
)


@functools.lru_cache(maxsize=1)
def _get_client() -> EquityHubClient:
    """Backend client for this process, configured from the environment."""
    return EquityHubClient.from_settings(Settings.from_env())


def _handle_dividends_summary(
    holdings: list[dict[str, Any]],
    overlay: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Dividend projection for the given holdings and overlay."""
    summary = compute_dividend_summary(parse_holdings(holdings), PurchaseOverlay(overlay))
    return summary.to_dict()


def _handle_sectors_breakdown(holdings: list[dict[str, Any]]) -> dict[str, Any]:
    """Industry totals for the given holdings."""
    return compute_sector_breakdown(parse_holdings(holdings)).to_dict()


def _handle_sectors_chart(holdings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Pie chart slices for the given holdings."""
    return chart_slices(compute_sector_breakdown(parse_holdings(holdings)))


def _handle_holdings_sort(
    holdings: list[dict[str, Any]],
    overlay: dict[str, Any] | None = None,
    order: str = "asc",
) -> list[dict[str, Any]]:
    """Holdings reordered by post-purchase percentage of total."""
    ordered = sort_by_post_purchase_percent(
        parse_holdings(holdings), PurchaseOverlay(overlay), order
    )
    return [h.to_record() for h in ordered]


def _handle_holdings_percentages(
    holdings: list[dict[str, Any]],
    overlay: dict[str, Any] | None = None,
) -> Any:
    """Post-purchase percentage of total per holding, in input order."""
    return post_purchase_percentages(parse_holdings(holdings), PurchaseOverlay(overlay))


def _handle_export_dividends_csv(
    holdings: list[dict[str, Any]],
    overlay: dict[str, Any] | None = None,
    output_path: str | None = None,
) -> str:
    """Dividend table as CSV."""
    summary = compute_dividend_summary(parse_holdings(holdings), PurchaseOverlay(overlay))
    return export_dividend_table_csv(summary, output_path=output_path)


def _handle_export_sectors_csv(
    holdings: list[dict[str, Any]],
    output_path: str | None = None,
) -> str:
    """Sector breakdown as CSV."""
    breakdown = compute_sector_breakdown(parse_holdings(holdings))
    return export_sector_csv(breakdown, output_path=output_path)


def _handle_export_dashboard_json(
    holdings: list[dict[str, Any]],
    overlay: dict[str, Any] | None = None,
    output_path: str | None = None,
) -> str:
    """Full dashboard snapshot as JSON."""
    return export_dashboard_json(
        parse_holdings(holdings), PurchaseOverlay(overlay), output_path=output_path
    )


def _handle_backend_holdings() -> list[dict[str, Any]]:
    """Current holdings from the backend."""
    return [h.to_record() for h in _get_client().fetch_holdings()]


def _handle_backend_update_prices() -> Any:
    """Trigger a backend price refresh."""
    return _get_client().update_prices()


def _handle_backend_register(ticker_symbol: str) -> dict[str, str]:
    """Register a ticker with the backend."""
    return {"message": _get_client().register_ticker(ticker_symbol)}


def _handle_backend_delete(holding_id: int) -> Any:
    """Delete a holding on the backend."""
    return _get_client().delete_holding(int(holding_id))


def _handle_backend_purchase(overlay: dict[str, Any]) -> Any:
    """Commit purchase quantities on the backend."""
    return _get_client().commit_purchase(PurchaseOverlay(overlay))


def dispatch(method: str, params: dict[str, Any]) -> Any:
    """Route a method call to the appropriate handler.

    Args:
        method: The method name (e.g., "dividends.summary").
        params: The parameters for the method.

    Returns:
        The result of the method call.

    Raises:
        ValueError: If the method is not recognized.

    """
    handlers: dict[str, Any] = {
        # Projections
        "dividends.summary": _handle_dividends_summary,
        "sectors.breakdown": _handle_sectors_breakdown,
        "sectors.chart": _handle_sectors_chart,
        "holdings.sort": _handle_holdings_sort,
        "holdings.percentages": _handle_holdings_percentages,
        "format.currency": format_currency,
        # Export
        "export.dividends_csv": _handle_export_dividends_csv,
        "export.sectors_csv": _handle_export_sectors_csv,
        "export.dashboard_json": _handle_export_dashboard_json,
        # Backend
        "backend.holdings": _handle_backend_holdings,
        "backend.update_prices": _handle_backend_update_prices,
        "backend.register": _handle_backend_register,
        "backend.delete": _handle_backend_delete,
        "backend.purchase": _handle_backend_purchase,
    }
    if method not in handlers:
        msg = f"Unknown method: {method}"
        raise ValueError(msg)
    return handlers[method](**params)


def main() -> None:
    """Run the sidecar message loop.

    Reads newline-delimited JSON from stdin, dispatches to handlers,
    and writes JSON responses to stdout. Runs until stdin is closed.
    """
    for raw_line in sys.stdin:
        stripped = raw_line.strip()
        if not stripped:
            continue

        request: dict[str, Any] = {}
        try:
            request = json.loads(stripped)
            request_id = request.get("id", "unknown")
            method = request["method"]
            params = request.get("params", {})
            result = dispatch(method, params)
            response: dict[str, Any] = {"id": request_id, "result": result}
        except Exception as exc:  # noqa: BLE001 errors go back to the caller as JSON
            request_id = (
                request.get("id", "unknown") if isinstance(request, dict) else "unknown"
            )
            response = {
                "id": request_id,
                "error": {
                    "message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            }
        sys.stdout.write(json.dumps(response, cls=DashboardEncoder) + "\n")
        sys.stdout.flush()


if __name__ == "__main__":
    main()
