"""Holding records as served by the EquityHub backend.

The backend serialises each tracked equity with Django-style snake_case
keys (``stock_No``, ``dividend_yield``, ``shares_owned`` ...). This module
converts those records into ``EquityHolding`` values, which are what every
aggregation in ``equityhub.portfolio`` reads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EquityHolding:
    """One tracked, owned equity position.

    Attributes:
        id: Backend identifier, unique within one fetch snapshot.
        symbol: Ticker symbol (display only).
        name: Company name (display only).
        price: Current unit price in the portfolio's base currency.
        dividend_yield_percent: Annual dividend yield as a percentage
            (3.5 means 3.5%).
        shares_owned: Shares currently held.
        industry: Sector label used for grouping. Empty when the backend
            does not report one.

    """

    id: int
    symbol: str
    name: str
    price: float
    dividend_yield_percent: float
    shares_owned: int
    industry: str = ""

    def __post_init__(self) -> None:
        """Reject values no backend snapshot can legitimately contain."""
        if self.price < 0:
            msg = f"price must be non-negative, got {self.price} for id {self.id}"
            raise ValueError(msg)
        if self.shares_owned < 0:
            msg = (
                f"shares_owned must be non-negative, got {self.shares_owned} "
                f"for id {self.id}"
            )
            raise ValueError(msg)

    @property
    def yield_fraction(self) -> float:
        """Dividend yield as a fraction (3.5% -> 0.035)."""
        return self.dividend_yield_percent / 100

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> EquityHolding:
        """Build a holding from a backend JSON record.

        Args:
            record: Dict with keys stock_No (or id), symbol, name, price,
                dividend_yield, shares_owned, and optionally industry.

        Returns:
            The parsed holding.

        Raises:
            ValueError: If the identifier is missing or a numeric field
                cannot be parsed.

        """
        raw_id = record.get("stock_No", record.get("id"))
        if raw_id is None:
            msg = f"Holding record has no stock_No/id: {record}"
            raise ValueError(msg)

        try:
            return cls(
                id=int(raw_id),
                symbol=str(record.get("symbol", "")),
                name=str(record.get("name", "")),
                price=float(record.get("price") or 0.0),
                dividend_yield_percent=float(record.get("dividend_yield") or 0.0),
                shares_owned=int(record.get("shares_owned") or 0),
                industry=str(record.get("industry") or ""),
            )
        except (TypeError, ValueError) as exc:
            msg = f"Malformed holding record {raw_id}: {exc}"
            raise ValueError(msg) from exc

    def to_record(self) -> dict[str, Any]:
        """Serialise back to the backend record shape."""
        return {
            "stock_No": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "dividend_yield": self.dividend_yield_percent,
            "shares_owned": self.shares_owned,
            "industry": self.industry,
        }


def parse_holdings(records: list[dict[str, Any]]) -> list[EquityHolding]:
    """Parse a list of backend records, preserving order.

    Raises:
        ValueError: If any record is malformed or two records share an id.

    """
    holdings = [EquityHolding.from_record(r) for r in records]
    seen: set[int] = set()
    for holding in holdings:
        if holding.id in seen:
            msg = f"Duplicate holding id in snapshot: {holding.id}"
            raise ValueError(msg)
        seen.add(holding.id)
    return holdings
