"""Dashboard session: holdings, purchase overlay, and backend round trips.

A ``Dashboard`` is the single writer of its state. Each method runs to
completion before returning; the only waiting is on backend calls.
Backend failures never propagate out of the action methods. They are
logged, reported through ``notify``, and local state is left as it was.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from equityhub.api.client import ApiError, EquityHubClient
from equityhub.config import DEFAULT_CURRENCY_SUFFIX
from equityhub.export.formatting import format_currency, format_percent
from equityhub.portfolio.dividends import DividendSummary, compute_dividend_summary
from equityhub.portfolio.overlay import PurchaseOverlay
from equityhub.portfolio.sectors import SectorBreakdown, compute_sector_breakdown
from equityhub.portfolio.sorting import SortOrder, sort_by_post_purchase_percent
from equityhub.portfolio.store import HoldingStore

logger = logging.getLogger(__name__)

PRICES_UPDATED_MESSAGE = "Updated latest stock prices."


def _log_notification(message: str) -> None:
    logger.info("%s", message)


class Dashboard:
    """Stateful view-model behind the holdings and sector pages.

    Attributes:
        store: Holdings from the last successful fetch.
        overlay: Purchase quantities typed in but not yet committed.
        sort_order: Direction used by ``sort()``.
        is_loading: True while a price refresh is outstanding.

    """

    def __init__(
        self,
        client: EquityHubClient,
        notify: Callable[[str], None] | None = None,
        currency_suffix: str = DEFAULT_CURRENCY_SUFFIX,
    ) -> None:
        self.client = client
        self.notify = notify or _log_notification
        self.currency_suffix = currency_suffix
        self.store = HoldingStore()
        self.overlay = PurchaseOverlay()
        self.sort_order = SortOrder.ASCENDING
        self.is_loading = False

    # -- backend round trips ------------------------------------------------

    def refresh(self) -> bool:
        """Replace the holdings with a fresh fetch.

        Returns:
            True if the fetch succeeded. On failure the previous holdings
            are kept.

        """
        try:
            holdings = self.client.fetch_holdings()
        except ApiError as exc:
            logger.error("Error fetching holdings: %s", exc)
            self.notify(f"Error: {exc.detail}")
            return False
        self.store.replace(holdings)
        dropped = self.overlay.retain(self.store.ids())
        if dropped:
            logger.info("Dropped purchase entries for removed holdings: %s", dropped)
        return True

    def refresh_prices(self) -> bool:
        """Have the backend update prices, then refetch.

        Ignored while a previous refresh is still running.

        Returns:
            True if both the update and the refetch succeeded.

        """
        if self.is_loading:
            logger.info("Price refresh already in progress; ignoring request")
            return False

        self.is_loading = True
        try:
            try:
                self.client.update_prices()
            except ApiError as exc:
                logger.error("Error updating stock prices: %s", exc)
                self.notify(f"Error: {exc.detail}")
                return False
            if not self.refresh():
                return False
        finally:
            self.is_loading = False

        self.notify(PRICES_UPDATED_MESSAGE)
        return True

    def apply_purchase(self) -> bool:
        """Commit the overlay quantities as purchases.

        The overlay is cleared only once the backend has accepted the
        purchase and the refetched holdings reflect it. If either step
        fails the overlay is kept so the user can see what was entered.
        Only entries for holdings in the current snapshot are sent.

        Returns:
            True if the purchase was committed and the holdings refetched.

        """
        pending = {i: q for i, q in self.overlay.items() if i in self.store}
        if not pending:
            logger.debug("No purchase quantities entered; nothing to commit")
            return False

        try:
            self.client.commit_purchase(pending)
        except ApiError as exc:
            logger.error("Error committing purchase: %s", exc)
            self.notify(f"Error: {exc.detail}")
            return False

        if not self.refresh():
            logger.warning("Purchase committed but holdings refetch failed; keeping overlay")
            return False

        self.overlay.clear()
        return True

    def register(self, ticker_symbol: str) -> bool:
        """Start tracking a ticker and refetch whatever the outcome.

        Returns:
            True if the backend accepted the symbol.

        """
        accepted = False
        try:
            message = self.client.register_ticker(ticker_symbol)
        except ApiError as exc:
            logger.error("Error registering %s: %s", ticker_symbol, exc)
            self.notify(f"Error: {exc.detail}")
        except ValueError as exc:
            self.notify(f"Error: {exc}")
        else:
            accepted = True
            self.notify(message)
        self.refresh()
        return accepted

    def delete(self, holding_id: int) -> bool:
        """Stop tracking a holding, then refetch.

        Returns:
            True if the backend deleted the holding.

        """
        try:
            self.client.delete_holding(holding_id)
        except ApiError as exc:
            logger.error("Error deleting holding %s: %s", holding_id, exc)
            self.notify(f"Error: {exc.detail}")
            return False
        self.refresh()
        return True

    # -- local edits --------------------------------------------------------

    def set_purchase_quantity(self, holding_id: int, raw: Any) -> None:
        """Record the quantity typed into a holding's purchase field.

        Raises:
            KeyError: If the holding is not in the current snapshot.
            InvalidQuantityError: If the quantity is not a whole,
                non-negative number.

        """
        if holding_id not in self.store:
            raise KeyError(holding_id)
        self.overlay.set(holding_id, raw)

    def sort(self) -> None:
        """Reorder the store by post-purchase percentage in ``sort_order``."""
        ordered = sort_by_post_purchase_percent(
            self.store.holdings, self.overlay, self.sort_order
        )
        self.store.reorder(ordered)

    def toggle_sort(self) -> SortOrder:
        """Flip the sort direction and re-sort immediately.

        Returns:
            The new direction.

        """
        self.sort_order = self.sort_order.toggled()
        self.sort()
        return self.sort_order

    # -- read-only views ----------------------------------------------------

    def summary(self) -> DividendSummary:
        """Dividend projection for the current holdings and overlay."""
        return compute_dividend_summary(self.store.holdings, self.overlay)

    def sectors(self) -> SectorBreakdown:
        """Industry breakdown of the current holdings."""
        return compute_sector_breakdown(self.store.holdings)

    def rows(self) -> list[dict[str, Any]]:
        """Table rows in store order, with display strings alongside raw values."""
        suffix = self.currency_suffix
        rows: list[dict[str, Any]] = []
        for metrics in self.summary().rows:
            row = metrics.to_dict()
            row["display"] = {
                "price": format_currency(metrics.holding.price, suffix),
                "dividend_forecast": format_currency(metrics.dividend_forecast, suffix),
                "percent_of_total": format_percent(metrics.percent_of_total),
                "post_purchase_dividend_forecast": format_currency(
                    metrics.post_purchase_dividend_forecast, suffix
                ),
                "post_purchase_percent_of_total": format_percent(
                    metrics.post_purchase_percent_of_total
                ),
            }
            rows.append(row)
        return rows
