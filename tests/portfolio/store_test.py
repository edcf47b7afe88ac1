"""Tests for the in-memory holding store."""

from __future__ import annotations

import pytest
from equityhub.portfolio.models import EquityHolding
from equityhub.portfolio.store import HoldingStore


class TestHoldingStore:
    """Tests for snapshot replacement and reordering."""

    def test_starts_empty(self):
        store = HoldingStore()
        assert len(store) == 0
        assert store.holdings == ()

    def test_replace(self, sample_holdings):
        store = HoldingStore()
        store.replace(sample_holdings)
        assert store.ids() == [1, 2]
        assert 2 in store
        assert 3 not in store
        assert store.get(1) is sample_holdings[0]
        assert store.get(99) is None

    def test_replace_is_wholesale(self, sample_holdings):
        store = HoldingStore(sample_holdings)
        store.replace(sample_holdings[1:])
        assert store.ids() == [2]

    def test_replace_rejects_duplicate_ids(self, sample_holdings):
        store = HoldingStore()
        with pytest.raises(ValueError, match="Duplicate"):
            store.replace([sample_holdings[0], sample_holdings[0]])

    def test_reorder(self, sample_holdings):
        store = HoldingStore(sample_holdings)
        store.reorder(list(reversed(sample_holdings)))
        assert store.ids() == [2, 1]
        assert [h.id for h in store] == [2, 1]

    def test_reorder_rejects_non_permutation(self, sample_holdings):
        store = HoldingStore(sample_holdings)
        other = EquityHolding(3, "C", "C", 1.0, 1.0, 1)
        with pytest.raises(ValueError, match="permutation"):
            store.reorder([sample_holdings[0], other])
        with pytest.raises(ValueError, match="permutation"):
            store.reorder(sample_holdings[:1])
        assert store.ids() == [1, 2]
