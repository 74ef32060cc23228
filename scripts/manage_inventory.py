"""Inspect and edit the local inventory file.

Usage (run from project root):
    python scripts/manage_inventory.py list
    python scripts/manage_inventory.py add "Coffee Mug - Logo" 5 8.50
    python scripts/manage_inventory.py edit 1718000000000 --quantity 12
    python scripts/manage_inventory.py remove 1718000000000
    python scripts/manage_inventory.py report --threshold 10

Pass --path to work on a file other than the configured
INVENTORY_DATA_DIR/INVENTORY_STORAGE_KEY location.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from services.config import (
    DISTRIBUTION_BAR_WIDTH,
    DISTRIBUTION_TOP_N,
    LOG_FORMAT,
    LOW_STOCK_THRESHOLD,
)
from services.inventory_charts import format_low_stock, format_money, render_distribution_chart
from services.inventory_items import InventoryValidationError
from services.inventory_metrics import get_inventory_stats
from services.inventory_store import InventoryStore

logger = logging.getLogger("manage_inventory")
logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)

EXIT_INVALID = 2


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the local inventory")
    parser.add_argument("--path", help="Inventory JSON file. Defaults to the configured storage path")
    parser.add_argument("--verbose", action="store_true", help="Log store activity")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all items")

    add = sub.add_parser("add", help="Add a new item")
    add.add_argument("name")
    add.add_argument("quantity")
    add.add_argument("price")

    edit = sub.add_parser("edit", help="Change quantity and/or price of an item")
    edit.add_argument("item_id")
    edit.add_argument("--quantity")
    edit.add_argument("--price")

    remove = sub.add_parser("remove", help="Remove an item by id")
    remove.add_argument("item_id")

    report = sub.add_parser("report", help="Print summary, stats and distribution chart")
    report.add_argument("--threshold", type=int, default=LOW_STOCK_THRESHOLD)
    report.add_argument("--top-n", type=int, default=DISTRIBUTION_TOP_N)
    report.add_argument("--bar-width", type=int, default=DISTRIBUTION_BAR_WIDTH)

    reset = sub.add_parser("reset", help="Restore the sample inventory")
    reset.add_argument("--empty", action="store_true", help="Clear the inventory instead")

    return parser.parse_args(argv)


def _format_item(item) -> str:
    return f"{item.id}  {item.name}  {item.quantity}  {format_money(item.price)}"


def _print_report(store: InventoryStore, threshold: int, top_n: int, bar_width: int) -> None:
    stats = get_inventory_stats(store.items(), threshold=threshold, top_n=top_n, bar_width=bar_width)
    summary = stats.summary

    print(f"Total Items: {summary.total_units:,}")
    print(f"Unique Products: {summary.unique_product_count:,}")
    print(f"Total Value: {format_money(summary.total_value)}")

    if stats.is_empty:
        print("No inventory data to analyze yet. Add some items!")
        return

    top = stats.top_item
    print(f"Top Stocked Item: {top.name if top else 'N/A'} ({top.quantity if top else 0})")
    print(f"Low Stock (< {threshold}): {format_low_stock(stats.low_stock)}")
    print(f"Average Unit Price: {format_money(stats.average_price)}")
    chart = render_distribution_chart(stats.distribution)
    if chart:
        print()
        print(chart, end="")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    # reset must not seed a missing file before replacing it
    store = InventoryStore(path=args.path, seed_sample=False if args.command == "reset" else None)

    try:
        if args.command == "list":
            for item in store.items():
                print(_format_item(item))

        elif args.command == "add":
            item = store.add_item(args.name, args.quantity, args.price)
            print(f"Added {item.name} with id {item.id}")

        elif args.command == "edit":
            if args.quantity is None and args.price is None:
                print("Nothing to change: pass --quantity and/or --price")
                return EXIT_INVALID
            item = store.edit_item(args.item_id, quantity=args.quantity, price=args.price)
            if item is None:
                print(f"No item with id {args.item_id}; nothing changed")
            else:
                print(_format_item(item))

        elif args.command == "remove":
            if store.remove_item(args.item_id):
                print(f"Removed item {args.item_id}")
            else:
                print(f"No item with id {args.item_id}; nothing removed")

        elif args.command == "report":
            _print_report(store, args.threshold, args.top_n, args.bar_width)

        elif args.command == "reset":
            items = store.reset(seed_sample=not args.empty)
            print(f"Inventory reset with {len(items)} item(s)")

    except InventoryValidationError as exc:
        logger.error(f"Rejected {args.command}: {exc}")
        print(f"Error: {exc}")
        return EXIT_INVALID

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
