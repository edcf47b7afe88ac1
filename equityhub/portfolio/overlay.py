"""Prospective purchase quantities entered against holdings.

The overlay is a sparse ``{holding_id: extra_shares}`` mapping used for
what-if projections before a purchase is committed. Any id without an
entry reads as zero extra shares.

Quantity policy: whole, non-negative share counts only. Integral floats
(``5.0``) and numeric strings are accepted; an empty string or ``None``
removes the entry. Anything else raises ``InvalidQuantityError`` and
leaves the overlay untouched.

"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from typing import Any


class InvalidQuantityError(ValueError):
    """Raised when a purchase quantity is negative, fractional, or not a number."""


def parse_quantity(raw: Any) -> int | None:
    """Interpret a user-entered purchase quantity.

    Args:
        raw: Value typed into the quantity field. May be an int, float,
            numeric string, empty string, or None.

    Returns:
        The share count, or None when the field was cleared.

    Raises:
        InvalidQuantityError: If the value is not a whole, non-negative number.

    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        msg = f"Purchase quantity must be a number, got {raw!r}"
        raise InvalidQuantityError(msg)

    value: float
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError as exc:
            msg = f"Purchase quantity must be a number, got {raw!r}"
            raise InvalidQuantityError(msg) from exc
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        msg = f"Purchase quantity must be a number, got {type(raw).__name__}"
        raise InvalidQuantityError(msg)

    if not math.isfinite(value):
        msg = f"Purchase quantity must be finite, got {raw!r}"
        raise InvalidQuantityError(msg)
    if value < 0:
        msg = f"Purchase quantity cannot be negative, got {raw!r}"
        raise InvalidQuantityError(msg)
    if not value.is_integer():
        msg = f"Purchase quantity must be a whole number of shares, got {raw!r}"
        raise InvalidQuantityError(msg)
    return int(value)


class PurchaseOverlay(Mapping[int, int]):
    """Sparse mapping of holding id to prospective additional shares."""

    def __init__(self, quantities: Mapping[Any, Any] | None = None) -> None:
        self._quantities: dict[int, int] = {}
        for holding_id, raw in (quantities or {}).items():
            self.set(int(holding_id), raw)

    def __getitem__(self, holding_id: int) -> int:
        return self._quantities[holding_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._quantities)

    def __len__(self) -> int:
        return len(self._quantities)

    def __repr__(self) -> str:
        return f"PurchaseOverlay({self._quantities!r})"

    def quantity_for(self, holding_id: int) -> int:
        """Extra shares entered for a holding, 0 if none."""
        return self._quantities.get(holding_id, 0)

    def set(self, holding_id: int, raw: Any) -> None:
        """Record (or clear) the quantity typed for one holding.

        Raises:
            InvalidQuantityError: If ``raw`` fails validation. The existing
                entry is kept in that case.

        """
        quantity = parse_quantity(raw)
        if quantity is None:
            self._quantities.pop(holding_id, None)
        else:
            self._quantities[holding_id] = quantity

    def retain(self, holding_ids: Iterable[int]) -> list[int]:
        """Drop entries for holdings outside ``holding_ids``.

        Returns:
            The ids that were dropped.

        """
        keep = set(holding_ids)
        dropped = [i for i in self._quantities if i not in keep]
        for holding_id in dropped:
            del self._quantities[holding_id]
        return dropped

    def clear(self) -> None:
        """Drop every entry."""
        self._quantities.clear()

