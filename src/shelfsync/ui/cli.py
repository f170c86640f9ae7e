from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shelfsync.app import (
    fetch_sink_products,
    list_products,
    purge_store,
    reconcile_store,
    store_stats,
)
from shelfsync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile local inventory with Shopify")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser("reconcile", help="Run one reconciliation for a shop")
    reconcile.add_argument(
        "--shop",
        type=str,
        help="Shop domain to reconcile (defaults to SHOPIFY_SHOP_DOMAIN)",
    )
    reconcile.add_argument(
        "--no-sink",
        action="store_true",
        help="Skip publishing catalog data to the backend",
    )
    reconcile.add_argument(
        "--preserve-pending",
        action="store_true",
        help="Keep local edits whose push to Shopify failed",
    )

    products = subparsers.add_parser("products", help="List local products of a shop")
    products.add_argument("--shop", type=str, required=True, help="Shop domain")

    subparsers.add_parser("stores", help="List stores with product counts")

    purge = subparsers.add_parser("purge", help="Delete every local product of a shop")
    purge.add_argument("--shop", type=str, required=True, help="Shop domain")

    sink_products = subparsers.add_parser(
        "sink-products",
        help="Show the products the catalog backend holds for a shop",
    )
    sink_products.add_argument("--shop", type=str, required=True, help="Shop domain")

    return parser.parse_args(list(argv))


def _run(parsed_args: argparse.Namespace) -> int:
    if parsed_args.command == "reconcile":
        result = reconcile_store(
            parsed_args.shop,
            publish_to_sink=False if parsed_args.no_sink else None,
            preserve_pending=True if parsed_args.preserve_pending else None,
        )
        if not result.success:
            log.error(result.message)
            return 1
        log.info(result.message)
        return 0
    if parsed_args.command == "products":
        for record in list_products(parsed_args.shop):
            log.info(
                "%s %s | %s | inventory=%s | %s",
                record.id,
                record.external_id,
                record.title,
                record.inventory_quantity,
                record.fields.price,
            )
        return 0
    if parsed_args.command == "stores":
        for stats in store_stats():
            log.info(
                "%s: %s product(s), %s in stock",
                stats.merchant_key,
                stats.product_count,
                stats.total_inventory,
            )
        return 0
    if parsed_args.command == "purge":
        deleted = purge_store(parsed_args.shop)
        log.info("Purged %s product(s) of %s", deleted, parsed_args.shop)
        return 0
    if parsed_args.command == "sink-products":
        remote = fetch_sink_products(parsed_args.shop)
        log.info("Catalog backend holds %s product(s) for %s", len(remote), parsed_args.shop)
        return 0
    raise ValueError(f"Unsupported command: {parsed_args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.debug else logging.INFO)

    try:
        exit_code = _run(parsed_args)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
