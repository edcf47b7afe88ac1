"""JSON export of a dashboard snapshot.

Bundles the holdings records, the dividend projection for the current
purchase overlay, and the sector breakdown, with export metadata.

"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import numpy as np

from equityhub.portfolio.dividends import compute_dividend_summary
from equityhub.portfolio.models import EquityHolding
from equityhub.portfolio.sectors import compute_sector_breakdown


class DashboardEncoder(json.JSONEncoder):
    """JSON encoder that handles NumPy types and datetimes."""

    def default(self, o: Any) -> Any:
        """Convert non-serializable types to JSON-safe values."""
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.floating):
            return float(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def export_dashboard_json(
    holdings: Sequence[EquityHolding],
    overlay: Mapping[int, int] | None = None,
    output_path: str | None = None,
) -> str:
    """Export a dashboard snapshot to JSON format.

    Args:
        holdings: Holdings in display order.
        overlay: Prospective extra shares by holding id.
        output_path: File path to write. If None, returns JSON string.

    Returns:
        JSON string, or file path if output_path given.

    """
    overlay = overlay or {}
    export_data: dict[str, Any] = {
        "metadata": {
            "export_date": datetime.now(tz=UTC),
            "format_version": "1.0",
            "source": "EquityHub",
            "holdings_count": len(holdings),
        },
        "holdings": [h.to_record() for h in holdings],
        "overlay": {str(k): v for k, v in overlay.items()},
        "dividends": compute_dividend_summary(holdings, overlay).to_dict(),
        "sectors": compute_sector_breakdown(holdings).to_dict(),
    }

    content = json.dumps(export_data, cls=DashboardEncoder, indent=2)

    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path
    return content
