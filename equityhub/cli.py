"""Command-line access to an EquityHub backend.

Usage::

    equityhub holdings --sort desc
    equityhub sectors
    equityhub update
    equityhub register 7203
    equityhub delete 12
    equityhub buy 12=100 15=50
    equityhub export csv --output dividends.csv

Connection settings come from the EQUITYHUB_* environment variables
(see ``equityhub.config``); ``--api-url`` overrides EQUITYHUB_API_URL.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from equityhub.api.client import EquityHubClient
from equityhub.config import Settings
from equityhub.dashboard import Dashboard
from equityhub.export.csv_export import export_dividend_table_csv
from equityhub.export.formatting import format_currency, format_percent
from equityhub.export.json_export import export_dashboard_json
from equityhub.portfolio.overlay import InvalidQuantityError
from equityhub.portfolio.sorting import SortOrder


def _print_holdings(dashboard: Dashboard) -> None:
    summary = dashboard.summary()
    suffix = dashboard.currency_suffix
    for row in dashboard.rows():
        display = row["display"]
        print(
            f"{row['stock_No']:>6}  {row['name']} ({row['symbol']})  "
            f"price {display['price']}  yield {row['dividend_yield']}%  "
            f"shares {row['shares_owned']}  "
            f"dividend {display['dividend_forecast']} ({display['percent_of_total']})  "
            f"buy {row['purchase_quantity']}  "
            f"after {display['post_purchase_dividend_forecast']} "
            f"({display['post_purchase_percent_of_total']})"
        )
    print(f"Purchase cost: {format_currency(summary.total_buy_amount, suffix)}")
    print(f"Difference: {format_currency(summary.dividend_increase, suffix)}")


def _print_sectors(dashboard: Dashboard) -> None:
    breakdown = dashboard.sectors()
    for group in breakdown.groups:
        print(
            f"{group.industry or '(no industry)'}  "
            f"{format_currency(group.total_amount)} "
            f"({format_percent(group.percent_of_grand_total)})"
        )
        for member in group.members:
            holding = member.holding
            print(
                f"    {holding.symbol} - {holding.name} - "
                f"{format_currency(member.dividend_forecast)}"
            )


def _parse_purchase(arg: str) -> tuple[int, str]:
    """Split an ``ID=QTY`` argument."""
    holding_id, sep, quantity = arg.partition("=")
    if not sep:
        msg = f"expected ID=QTY, got {arg!r}"
        raise argparse.ArgumentTypeError(msg)
    try:
        return int(holding_id), quantity
    except ValueError as exc:
        msg = f"holding id must be an integer, got {holding_id!r}"
        raise argparse.ArgumentTypeError(msg) from exc


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``equityhub`` command."""
    parser = argparse.ArgumentParser(description="EquityHub dividend dashboard")
    parser.add_argument(
        "--api-url",
        default=None,
        help="Backend base URL (overrides EQUITYHUB_API_URL)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    holdings = sub.add_parser("holdings", help="List holdings with dividend forecasts")
    holdings.add_argument(
        "--sort",
        choices=[o.value for o in SortOrder],
        default=None,
        help="Order by post-purchase share of the dividend total",
    )
    sub.add_parser("sectors", help="Dividend forecast grouped by industry")
    sub.add_parser("update", help="Refresh prices on the backend")

    register = sub.add_parser("register", help="Start tracking a ticker")
    register.add_argument("symbol")

    delete = sub.add_parser("delete", help="Stop tracking a holding")
    delete.add_argument("holding_id", type=int)

    buy = sub.add_parser("buy", help="Commit purchases given as ID=QTY")
    buy.add_argument("purchases", nargs="+", type=_parse_purchase)

    export = sub.add_parser("export", help="Export the dividend table")
    export.add_argument("format", choices=["csv", "json"])
    export.add_argument("--output", default=None, help="File to write")

    return parser


def run(args: argparse.Namespace, dashboard: Dashboard) -> int:
    """Execute a parsed command against a dashboard session.

    Returns:
        Process exit code.

    """
    if args.command == "register":
        return 0 if dashboard.register(args.symbol) else 1
    if args.command == "delete":
        return 0 if dashboard.delete(args.holding_id) else 1
    if args.command == "update":
        return 0 if dashboard.refresh_prices() else 1

    if not dashboard.refresh():
        return 1

    if args.command == "holdings":
        if args.sort:
            dashboard.sort_order = SortOrder(args.sort)
            dashboard.sort()
        _print_holdings(dashboard)
    elif args.command == "sectors":
        _print_sectors(dashboard)
    elif args.command == "buy":
        try:
            for holding_id, quantity in args.purchases:
                dashboard.set_purchase_quantity(holding_id, quantity)
        except KeyError as exc:
            print(f"Unknown holding id: {exc.args[0]}", file=sys.stderr)
            return 2
        except InvalidQuantityError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        return 0 if dashboard.apply_purchase() else 1
    elif args.command == "export":
        if args.format == "csv":
            result = export_dividend_table_csv(dashboard.summary(), args.output)
        else:
            result = export_dashboard_json(
                dashboard.store.holdings, dashboard.overlay, args.output
            )
        print(result)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    from equityhub.log_config import setup as setup_logging

    setup_logging(verbose=args.verbose)
    settings = Settings.from_env(api_url=args.api_url)
    dashboard = Dashboard(
        EquityHubClient.from_settings(settings),
        notify=print,
        currency_suffix=settings.currency_suffix,
    )
    return run(args, dashboard)


if __name__ == "__main__":
    sys.exit(main())
