"""Dividend forecast aggregation.

Derives, for every holding, the annual dividend forecast before and after
the prospective purchases in a ``PurchaseOverlay``, each holding's share
of the portfolio total, and the portfolio-wide totals. Nothing here is
cached: every call recomputes from the holdings and the overlay it is
given.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from equityhub.portfolio.models import EquityHolding


@dataclass
class HoldingMetrics:
    """Derived dividend figures for a single holding.

    Attributes:
        holding: The source holding.
        dividend_forecast: Annual dividend on currently owned shares.
        percent_of_total: dividend_forecast as a percentage of the
            portfolio total (0 when the total is 0).
        purchase_quantity: Extra shares entered in the overlay.
        purchase_cost: price * purchase_quantity.
        post_purchase_dividend_forecast: Annual dividend once the extra
            shares are bought.
        post_purchase_percent_of_total: Post-purchase forecast as a
            percentage of the post-purchase total.

    """

    holding: EquityHolding
    dividend_forecast: float
    percent_of_total: float
    purchase_quantity: int
    purchase_cost: float
    post_purchase_dividend_forecast: float
    post_purchase_percent_of_total: float

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a JSON-friendly dict (holding fields inlined)."""
        data = self.holding.to_record()
        data.update(
            {
                "dividend_forecast": self.dividend_forecast,
                "percent_of_total": self.percent_of_total,
                "purchase_quantity": self.purchase_quantity,
                "purchase_cost": self.purchase_cost,
                "post_purchase_dividend_forecast": self.post_purchase_dividend_forecast,
                "post_purchase_percent_of_total": self.post_purchase_percent_of_total,
            }
        )
        return data


@dataclass
class DividendSummary:
    """Portfolio-wide dividend projection.

    Attributes:
        rows: Per-holding metrics, in the order the holdings were given.
        total_dividend_forecast: Sum of current dividend forecasts.
        total_post_purchase_dividend_forecast: Sum of post-purchase forecasts.
        total_buy_amount: Cost of every prospective purchase in the overlay.

    """

    rows: list[HoldingMetrics] = field(default_factory=list)
    total_dividend_forecast: float = 0.0
    total_post_purchase_dividend_forecast: float = 0.0
    total_buy_amount: float = 0.0

    @property
    def dividend_increase(self) -> float:
        """How much the annual dividend grows if the purchases go through."""
        return self.total_post_purchase_dividend_forecast - self.total_dividend_forecast

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the sidecar and JSON export."""
        return {
            "rows": [row.to_dict() for row in self.rows],
            "total_dividend_forecast": self.total_dividend_forecast,
            "total_post_purchase_dividend_forecast": (
                self.total_post_purchase_dividend_forecast
            ),
            "total_buy_amount": self.total_buy_amount,
            "dividend_increase": self.dividend_increase,
        }


def dividend_forecast(holding: EquityHolding) -> float:
    """Annual dividend on the shares currently owned."""
    return holding.price * holding.yield_fraction * holding.shares_owned


def post_purchase_dividend_forecast(holding: EquityHolding, extra_shares: int) -> float:
    """Annual dividend after buying ``extra_shares`` more shares."""
    return holding.price * holding.yield_fraction * (holding.shares_owned + extra_shares)


def percent_of(part: float, total: float) -> float:
    """``part`` as a percentage of ``total``; 0 when the total is not positive."""
    return part / total * 100 if total > 0 else 0.0


def total_post_purchase_dividend_forecast(
    holdings: Sequence[EquityHolding],
    overlay: Mapping[int, int],
) -> float:
    """Portfolio dividend forecast with every overlay purchase applied."""
    total = 0.0
    for holding in holdings:
        total += post_purchase_dividend_forecast(holding, overlay.get(holding.id, 0))
    return total


def compute_dividend_summary(
    holdings: Sequence[EquityHolding],
    overlay: Mapping[int, int] | None = None,
) -> DividendSummary:
    """Compute per-holding and portfolio dividend projections.

    Args:
        holdings: Holdings in display order.
        overlay: Prospective extra shares by holding id. Ids without an
            entry count as 0 extra shares.

    Returns:
        DividendSummary whose rows follow the order of ``holdings``.

    """
    overlay = overlay or {}
    summary = DividendSummary()

    # First pass: totals, accumulated in collection order
    forecasts: list[tuple[float, int, float]] = []
    for holding in holdings:
        extra = overlay.get(holding.id, 0)
        current = dividend_forecast(holding)
        post = post_purchase_dividend_forecast(holding, extra)
        forecasts.append((current, extra, post))

        summary.total_dividend_forecast += current
        summary.total_post_purchase_dividend_forecast += post
        summary.total_buy_amount += holding.price * extra

    # Second pass: shares of the totals
    for holding, (current, extra, post) in zip(holdings, forecasts):
        summary.rows.append(
            HoldingMetrics(
                holding=holding,
                dividend_forecast=current,
                percent_of_total=percent_of(current, summary.total_dividend_forecast),
                purchase_quantity=extra,
                purchase_cost=holding.price * extra,
                post_purchase_dividend_forecast=post,
                post_purchase_percent_of_total=percent_of(
                    post, summary.total_post_purchase_dividend_forecast
                ),
            )
        )

    return summary

