"""Ordering holdings by their post-purchase share of the dividend total.

The sort key is not stored on the holding. It is recomputed from the
whole collection and the current purchase overlay each time a sort runs.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

import numpy as np

from equityhub.portfolio.dividends import (
    percent_of,
    post_purchase_dividend_forecast,
    total_post_purchase_dividend_forecast,
)
from equityhub.portfolio.models import EquityHolding


class SortOrder(str, Enum):
    """Direction of the post-purchase percentage sort."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    def toggled(self) -> SortOrder:
        """The opposite direction."""
        if self is SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING


def post_purchase_percentages(
    holdings: Sequence[EquityHolding],
    overlay: Mapping[int, int],
) -> np.ndarray:
    """Each holding's post-purchase percentage of the post-purchase total."""
    total = total_post_purchase_dividend_forecast(holdings, overlay)
    return np.array(
        [
            percent_of(
                post_purchase_dividend_forecast(h, overlay.get(h.id, 0)),
                total,
            )
            for h in holdings
        ],
        dtype=np.float64,
    )


def sort_by_post_purchase_percent(
    holdings: Sequence[EquityHolding],
    overlay: Mapping[int, int] | None = None,
    order: SortOrder | str = SortOrder.ASCENDING,
) -> list[EquityHolding]:
    """Return the holdings ordered by post-purchase percentage of total.

    The sort is stable in both directions: holdings with equal percentages
    keep their relative input order.

    Args:
        holdings: Holdings in their current order.
        overlay: Prospective extra shares by holding id.
        order: SortOrder or its string value ("asc" / "desc").

    Returns:
        A new list; ``holdings`` is not modified.

    """
    order = SortOrder(order)
    if not holdings:
        return []

    keys = post_purchase_percentages(holdings, overlay or {})
    if order is SortOrder.DESCENDING:
        keys = -keys
    indices = np.argsort(keys, kind="stable")
    return [holdings[int(i)] for i in indices]
