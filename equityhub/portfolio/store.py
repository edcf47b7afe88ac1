"""In-memory holdings collection shared by every dashboard view."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from equityhub.portfolio.models import EquityHolding

logger = logging.getLogger(__name__)


class HoldingStore:
    """Ordered snapshot of the holdings last fetched from the backend.

    The collection only changes wholesale: ``replace`` installs a new
    snapshot and ``reorder`` installs a permutation of the current one.
    """

    def __init__(self, holdings: Iterable[EquityHolding] = ()) -> None:
        self._holdings: tuple[EquityHolding, ...] = ()
        self.replace(holdings)

    def __iter__(self) -> Iterator[EquityHolding]:
        return iter(self._holdings)

    def __len__(self) -> int:
        return len(self._holdings)

    def __contains__(self, holding_id: object) -> bool:
        return any(h.id == holding_id for h in self._holdings)

    @property
    def holdings(self) -> tuple[EquityHolding, ...]:
        """The current snapshot, in display order."""
        return self._holdings

    def ids(self) -> list[int]:
        """Holding ids in display order."""
        return [h.id for h in self._holdings]

    def get(self, holding_id: int) -> EquityHolding | None:
        """Look up a holding by id."""
        for holding in self._holdings:
            if holding.id == holding_id:
                return holding
        return None

    def replace(self, holdings: Iterable[EquityHolding]) -> None:
        """Install a fresh snapshot.

        Raises:
            ValueError: If two holdings share an id.

        """
        snapshot = tuple(holdings)
        ids = [h.id for h in snapshot]
        if len(set(ids)) != len(ids):
            msg = f"Duplicate holding ids in snapshot: {ids}"
            raise ValueError(msg)
        self._holdings = snapshot
        logger.debug("Holding store replaced with %d holdings", len(snapshot))

    def reorder(self, new_order: Sequence[EquityHolding]) -> None:
        """Replace the collection with a reordering of itself.

        Raises:
            ValueError: If ``new_order`` is not a permutation of the
                current holdings. The store is left unchanged.

        """
        if sorted(h.id for h in new_order) != sorted(self.ids()):
            msg = "reorder() needs a permutation of the current holdings"
            raise ValueError(msg)
        self._holdings = tuple(new_order)
