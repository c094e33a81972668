"""Entry point for the order-desk apps."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from order_desk.api import Credentials, DashboardClient
from order_desk.config import API_BASE_URL, API_TOKEN, CART_ID, DB_PATH, DEBUG_LOG_PATH, EXPORT_DIR
from order_desk.export import export_paths, export_stats_csv, export_stats_workbook
from order_desk.manager import OrderManager
from order_desk.persistence import SqliteCartRepository


def configure_logging(path: str = DEBUG_LOG_PATH, level: int = logging.INFO) -> None:
    """Send log records to a file so they never draw over the terminal UI."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="order-desk", description="Restaurant order desk")
    parser.add_argument("--api-url", default=API_BASE_URL, help="order API base URL")
    parser.add_argument("--token", default=API_TOKEN, help="bearer token (default: $ORDER_DESK_TOKEN)")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    waiter = sub.add_parser("waiter", help="compose and submit a table's order")
    waiter.add_argument("--db", default=DB_PATH, help="cart database path")
    waiter.add_argument("--cart", default=CART_ID, help="cart id inside the database")

    sub.add_parser("kitchen", help="track order statuses and kitchen stats")

    export = sub.add_parser("export-stats", help="write kitchen stats to CSV and XLSX")
    export.add_argument("--out", default=EXPORT_DIR, help="output directory")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)

    client = DashboardClient(Credentials(token=args.token), base_url=args.api_url)
    try:
        if args.command == "waiter":
            from order_desk.cart_app import CartApp

            manager = OrderManager(SqliteCartRepository(args.db, args.cart))
            CartApp(manager, client).run()
            return 0

        if args.command == "kitchen":
            from order_desk.kitchen_app import KitchenApp

            KitchenApp(client).run()
            return 0

        stats = client.fetch_stats()
        if not stats.ok:
            print(stats.error, file=sys.stderr)
            return 1
        csv_path, xlsx_path = export_paths(args.out)
        export_stats_csv(stats.value, csv_path)
        export_stats_workbook(stats.value, xlsx_path)
        print(csv_path)
        print(xlsx_path)
        return 0
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
