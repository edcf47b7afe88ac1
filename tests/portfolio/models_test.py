"""Tests for holding records."""

from __future__ import annotations

import pytest
from equityhub.portfolio.models import EquityHolding, parse_holdings


def _record(**overrides):
    record = {
        "stock_No": 7,
        "symbol": "7203",
        "name": "Toyota",
        "price": "2850.5",
        "dividend_yield": 2.8,
        "shares_owned": 100,
        "industry": "Automotive",
    }
    record.update(overrides)
    return record


class TestFromRecord:
    """Tests for parsing backend records."""

    def test_backend_keys(self):
        holding = EquityHolding.from_record(_record())
        assert holding.id == 7
        assert holding.price == pytest.approx(2850.5)
        assert holding.dividend_yield_percent == pytest.approx(2.8)
        assert holding.shares_owned == 100
        assert holding.industry == "Automotive"

    def test_id_alias(self):
        record = _record()
        del record["stock_No"]
        record["id"] = 9
        assert EquityHolding.from_record(record).id == 9

    def test_missing_industry_is_empty(self):
        record = _record()
        del record["industry"]
        assert EquityHolding.from_record(record).industry == ""

    def test_null_industry_is_empty(self):
        assert EquityHolding.from_record(_record(industry=None)).industry == ""

    def test_missing_id_raises(self):
        record = _record()
        del record["stock_No"]
        with pytest.raises(ValueError, match="stock_No"):
            EquityHolding.from_record(record)

    def test_bad_number_raises(self):
        with pytest.raises(ValueError, match="Malformed"):
            EquityHolding.from_record(_record(price="n/a"))

    def test_negative_shares_raise(self):
        with pytest.raises(ValueError, match="shares_owned"):
            EquityHolding.from_record(_record(shares_owned=-1))

    def test_round_trip_shape(self):
        holding = EquityHolding.from_record(_record())
        assert holding.to_record()["stock_No"] == 7
        assert holding.to_record()["dividend_yield"] == pytest.approx(2.8)

    def test_yield_fraction(self):
        assert EquityHolding.from_record(_record(dividend_yield=3.5)).yield_fraction == (
            pytest.approx(0.035)
        )


class TestParseHoldings:
    """Tests for parsing a whole snapshot."""

    def test_preserves_order(self):
        holdings = parse_holdings([_record(stock_No=3), _record(stock_No=1)])
        assert [h.id for h in holdings] == [3, 1]

    def test_duplicate_ids_raise(self):
        with pytest.raises(ValueError, match="Duplicate"):
            parse_holdings([_record(), _record()])
