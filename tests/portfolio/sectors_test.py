"""Tests for the industry breakdown."""

from __future__ import annotations

import pytest
from equityhub.portfolio.models import EquityHolding
from equityhub.portfolio.sectors import (
    CHART_COLORS,
    chart_slices,
    compute_sector_breakdown,
    group_by_industry,
)


class TestGroupByIndustry:
    """Tests for industry partitioning."""

    def test_first_seen_order(self, sector_holdings):
        grouped = group_by_industry(sector_holdings)
        assert list(grouped) == ["Tech", "Finance", ""]
        assert [h.id for h in grouped["Tech"]] == [1, 3]

    def test_empty(self):
        assert group_by_industry([]) == {}


class TestComputeSectorBreakdown:
    """Tests for sector totals and percentages."""

    def test_two_sector_scenario(self, sample_holdings):
        breakdown = compute_sector_breakdown(sample_holdings)
        tech, finance = breakdown.groups
        assert tech.industry == "Tech"
        assert tech.total_amount == pytest.approx(400.0)
        assert finance.total_amount == pytest.approx(200.0)
        assert breakdown.grand_total == pytest.approx(600.0)
        assert tech.percent_of_grand_total == pytest.approx(66.6667, abs=1e-3)
        assert finance.percent_of_grand_total == pytest.approx(33.3333, abs=1e-3)

    def test_group_members_carry_forecasts(self, sector_holdings):
        breakdown = compute_sector_breakdown(sector_holdings)
        tech = breakdown.groups[0]
        assert [m.holding.symbol for m in tech.members] == ["T1", "T2"]
        assert [m.dividend_forecast for m in tech.members] == pytest.approx([50.0, 100.0])
        assert tech.total_amount == pytest.approx(150.0)

    def test_missing_industry_is_own_group(self, sector_holdings):
        breakdown = compute_sector_breakdown(sector_holdings)
        unlabeled = breakdown.groups[2]
        assert unlabeled.industry == ""
        assert unlabeled.total_amount == 0.0
        assert unlabeled.percent_of_grand_total == 0.0

    def test_percentages(self, sector_holdings):
        breakdown = compute_sector_breakdown(sector_holdings)
        assert breakdown.grand_total == pytest.approx(200.0)
        pcts = [g.percent_of_grand_total for g in breakdown.groups]
        assert pcts == pytest.approx([75.0, 25.0, 0.0])

    def test_empty_input(self):
        breakdown = compute_sector_breakdown([])
        assert breakdown.groups == []
        assert breakdown.grand_total == 0.0

    def test_zero_grand_total(self):
        holdings = [EquityHolding(1, "Z", "Zero", 100.0, 0.0, 10, "Utilities")]
        breakdown = compute_sector_breakdown(holdings)
        assert breakdown.grand_total == 0.0
        assert breakdown.groups[0].percent_of_grand_total == 0.0

    def test_to_dict(self, sample_holdings):
        data = compute_sector_breakdown(sample_holdings).to_dict()
        assert data["grand_total"] == pytest.approx(600.0)
        assert data["groups"][0]["members"][0]["symbol"] == "AAA"


class TestChartSlices:
    """Tests for pie chart data."""

    def test_labels_and_colors(self, sample_holdings):
        slices = chart_slices(compute_sector_breakdown(sample_holdings))
        assert [s["label"] for s in slices] == ["Tech (66.67%)", "Finance (33.33%)"]
        assert [s["color"] for s in slices] == list(CHART_COLORS[:2])

    def test_colors_cycle(self):
        holdings = [
            EquityHolding(i, f"S{i}", f"Stock {i}", 100.0, 1.0, 1, f"Industry {i}")
            for i in range(len(CHART_COLORS) + 2)
        ]
        slices = chart_slices(compute_sector_breakdown(holdings))
        assert slices[len(CHART_COLORS)]["color"] == CHART_COLORS[0]
        assert slices[len(CHART_COLORS) + 1]["color"] == CHART_COLORS[1]

    def test_no_slices_for_empty_breakdown(self):
        assert chart_slices(compute_sector_breakdown([])) == []
