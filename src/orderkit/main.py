"""CLI: print customization summaries for exported order documents.

Usage:
    python -m orderkit.main orders.json
    python -m orderkit.main orders.json --store store_003

The input is a JSON list of order documents (each optionally carrying an
``id``), or an object mapping document ids to order documents.
"""

import argparse
import json
from pathlib import Path

from loguru import logger

from .config import get_settings
from .logging import setup_logging
from .models import PreviousOrder
from .receipts import previous_order_from_record


def load_orders(path: str | Path, store_id: str | None = None) -> list[PreviousOrder]:
    """Load and convert an export of raw order documents."""
    with open(path, "r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        documents = list(data.items())
    else:
        documents = [
            (str(doc.get("id", i)), doc)
            for i, doc in enumerate(data)
            if isinstance(doc, dict)
        ]

    orders = [
        previous_order_from_record(doc_id, doc, store_id=store_id)
        for doc_id, doc in documents
        if isinstance(doc, dict)
    ]
    if store_id:
        orders = [order for order in orders if order.store_id == store_id]
    logger.info("Loaded {} orders from {}", len(orders), path)
    return orders


def format_order(order: PreviousOrder) -> str:
    lines = [
        f"Order #{order.id} | {order.date} | {order.order_type.value} | "
        f"{order.status.value} | ${order.total:.2f}"
    ]
    for item in order.items:
        size = f" ({item.size})" if item.size else ""
        lines.append(f"  {item.quantity}x {item.name}{size}")
        lines.extend(f"      - {c}" for c in item.customizations)
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="JSON export of order documents")
    parser.add_argument("--store", default=None, help="Only show this store's orders")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(level=settings.log_level, to_file=settings.log_to_file)

    for order in load_orders(args.path, store_id=args.store):
        print(format_order(order))
        print()


if __name__ == "__main__":
    main()
