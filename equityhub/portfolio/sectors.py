"""Industry breakdown of the current dividend forecast.

Groups holdings by their industry label and totals each group's dividend
forecast for the sector list and pie chart. Purchase overlays are not
applied here: the breakdown always reflects shares actually owned.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from equityhub.export.formatting import format_percent
from equityhub.portfolio.dividends import dividend_forecast, percent_of
from equityhub.portfolio.models import EquityHolding

# Slice colours, cycled when there are more industries than colours
CHART_COLORS: tuple[str, ...] = (
    "#0088FE",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
    "#FF6347",
    "#8A2BE2",
    "#3CB371",
)


@dataclass
class SectorMember:
    """A holding listed under its industry, with its own forecast."""

    holding: EquityHolding
    dividend_forecast: float


@dataclass
class SectorTotal:
    """Dividend forecast totals for one industry.

    Attributes:
        industry: Industry label ("" for holdings without one).
        total_amount: Sum of the members' dividend forecasts.
        percent_of_grand_total: total_amount as a percentage of the sum
            over all industries (0 when that sum is 0).
        members: Holdings in this industry, in input order.

    """

    industry: str
    total_amount: float = 0.0
    percent_of_grand_total: float = 0.0
    members: list[SectorMember] = field(default_factory=list)


@dataclass
class SectorBreakdown:
    """All industry groups plus the grand total across them."""

    groups: list[SectorTotal] = field(default_factory=list)
    grand_total: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the sidecar and JSON export."""
        return {
            "grand_total": self.grand_total,
            "groups": [
                {
                    "industry": group.industry,
                    "total_amount": group.total_amount,
                    "percent_of_grand_total": group.percent_of_grand_total,
                    "members": [
                        {
                            "id": m.holding.id,
                            "symbol": m.holding.symbol,
                            "name": m.holding.name,
                            "dividend_forecast": m.dividend_forecast,
                        }
                        for m in group.members
                    ],
                }
                for group in self.groups
            ],
        }


def group_by_industry(
    holdings: Sequence[EquityHolding],
) -> dict[str, list[EquityHolding]]:
    """Partition holdings by industry, keeping first-seen industry order."""
    grouped: dict[str, list[EquityHolding]] = {}
    for holding in holdings:
        grouped.setdefault(holding.industry or "", []).append(holding)
    return grouped


def compute_sector_breakdown(holdings: Sequence[EquityHolding]) -> SectorBreakdown:
    """Total the current dividend forecast per industry.

    Args:
        holdings: Holdings in display order.

    Returns:
        SectorBreakdown with one group per distinct industry, ordered by
        first appearance. Empty input yields no groups and a zero total.

    """
    breakdown = SectorBreakdown()

    for industry, members in group_by_industry(holdings).items():
        group = SectorTotal(industry=industry)
        for holding in members:
            forecast = dividend_forecast(holding)
            group.members.append(SectorMember(holding=holding, dividend_forecast=forecast))
            group.total_amount += forecast
        breakdown.groups.append(group)

    for group in breakdown.groups:
        breakdown.grand_total += group.total_amount

    for group in breakdown.groups:
        group.percent_of_grand_total = percent_of(group.total_amount, breakdown.grand_total)

    return breakdown


def chart_slices(breakdown: SectorBreakdown) -> list[dict[str, Any]]:
    """Pie chart data, one slice per industry.

    Returns:
        List of dicts with keys: industry, total_amount, label, color.
        Empty when the breakdown has no groups, in which case the chart
        should not be drawn.

    """
    return [
        {
            "industry": group.industry,
            "total_amount": group.total_amount,
            "label": f"{group.industry} ({format_percent(group.percent_of_grand_total)})",
            "color": CHART_COLORS[index % len(CHART_COLORS)],
        }
        for index, group in enumerate(breakdown.groups)
    ]
