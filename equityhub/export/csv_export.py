"""CSV export for the dividend table and the sector breakdown.

Generates CSV files with metadata comment lines (title, export time,
totals) above the header row.

"""

from __future__ import annotations

import csv
import io
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from equityhub.portfolio.dividends import DividendSummary
from equityhub.portfolio.sectors import SectorBreakdown

_DIVIDEND_FIELDS = [
    "id",
    "symbol",
    "name",
    "price",
    "dividend_yield",
    "shares_owned",
    "dividend_forecast",
    "percent_of_total",
    "purchase_quantity",
    "post_purchase_dividend_forecast",
    "post_purchase_percent_of_total",
]

_SECTOR_FIELDS = ["industry", "total_amount", "percent_of_grand_total", "holdings"]


def export_dividend_table_csv(
    summary: DividendSummary,
    output_path: str | None = None,
) -> str:
    """Export the per-holding dividend table to CSV.

    Args:
        summary: Result of compute_dividend_summary().
        output_path: File path to write. If None, returns CSV string.

    Returns:
        The CSV content as a string, or file path if output_path given.

    """
    output = io.StringIO()
    _write_metadata_header(
        output,
        "Dividend Forecast Export",
        extra=(
            f"Total: {summary.total_dividend_forecast:.2f} | "
            f"After purchase: {summary.total_post_purchase_dividend_forecast:.2f} | "
            f"Purchase cost: {summary.total_buy_amount:.2f}"
        ),
    )

    writer = csv.DictWriter(output, fieldnames=_DIVIDEND_FIELDS)
    writer.writeheader()
    for metrics in summary.rows:
        holding = metrics.holding
        row: dict[str, Any] = {
            "id": holding.id,
            "symbol": holding.symbol,
            "name": holding.name,
            "price": f"{holding.price:.2f}",
            "dividend_yield": f"{holding.dividend_yield_percent:.2f}",
            "shares_owned": holding.shares_owned,
            "dividend_forecast": f"{metrics.dividend_forecast:.2f}",
            "percent_of_total": f"{metrics.percent_of_total:.2f}",
            "purchase_quantity": metrics.purchase_quantity,
            "post_purchase_dividend_forecast": (
                f"{metrics.post_purchase_dividend_forecast:.2f}"
            ),
            "post_purchase_percent_of_total": (
                f"{metrics.post_purchase_percent_of_total:.2f}"
            ),
        }
        writer.writerow(row)

    return _finish(output, output_path)


def export_sector_csv(
    breakdown: SectorBreakdown,
    output_path: str | None = None,
) -> str:
    """Export industry totals to CSV.

    The holdings column lists member symbols separated by spaces.

    Args:
        breakdown: Result of compute_sector_breakdown().
        output_path: File path to write. If None, returns CSV string.

    Returns:
        The CSV content as a string, or file path if output_path given.

    """
    output = io.StringIO()
    _write_metadata_header(
        output,
        "Sector Breakdown Export",
        extra=f"Grand Total: {breakdown.grand_total:.2f}",
    )

    writer = csv.DictWriter(output, fieldnames=_SECTOR_FIELDS)
    writer.writeheader()
    for group in breakdown.groups:
        writer.writerow(
            {
                "industry": group.industry,
                "total_amount": f"{group.total_amount:.2f}",
                "percent_of_grand_total": f"{group.percent_of_grand_total:.2f}",
                "holdings": " ".join(m.holding.symbol for m in group.members),
            }
        )

    return _finish(output, output_path)


def _finish(output: io.StringIO, output_path: str | None) -> str:
    """Return the buffer contents, or write them and return the path."""
    content = output.getvalue()
    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path
    return content


def _write_metadata_header(
    output: io.StringIO,
    title: str,
    extra: str = "",
) -> None:
    """Write metadata comment lines at the top of a CSV export.

    Args:
        output: StringIO buffer to write to.
        title: Export title.
        extra: Optional additional metadata line.

    """
    now = datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    output.write(f"# {title}\n")
    output.write(f"# Generated: {now}\n")
    if extra:
        output.write(f"# {extra}\n")
