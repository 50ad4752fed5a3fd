#!/usr/bin/env python3
"""
RocketCart command line.

Runs one cart operation against the configured shop API and snapshot store,
then prints the cart.

Usage:
    python -m rocketcart show
    python -m rocketcart add 3
    python -m rocketcart update 3 2
    python -m rocketcart remove 3
"""
import argparse
import asyncio
import sys

from rocketcart.cart import CartEngine, build_cart_engine
from rocketcart.config import load_settings
from rocketcart.logging import set_log_level
from rocketcart.services import ShopApiClient
from rocketcart.services.money import format_money


def parse_product_id(raw: str):
    """Numeric ids stay ints so they match what the shop API returns."""
    return int(raw) if raw.isdigit() else raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rocketcart", description="Manage the persisted shopping cart")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log cart operations at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print the cart")

    add = sub.add_parser("add", help="Add one unit of a product")
    add.add_argument("product_id", type=parse_product_id)

    remove = sub.add_parser("remove", help="Remove a product")
    remove.add_argument("product_id", type=parse_product_id)

    update = sub.add_parser("update", help="Set a product's amount")
    update.add_argument("product_id", type=parse_product_id)
    update.add_argument("amount", type=int)

    return parser


def render_cart(engine: CartEngine) -> str:
    lines = engine.get_cart()
    if not lines:
        return "Cart is empty"

    rows = [
        f"{line.product_id:>6}  {line.title[:40]:<40}  x{line.amount:<3} {format_money(line.subtotal)}"
        for line in lines
    ]
    summary = engine.summary()
    rows.append(f"{summary['total_items']} item(s), total {format_money(summary['total'])}")
    return "\n".join(rows)


async def run(args: argparse.Namespace) -> int:
    settings = load_settings()
    async with ShopApiClient.from_settings(settings) as api:
        engine = await build_cart_engine(settings, api=api)

        if args.command == "add":
            result = await engine.add_product(args.product_id)
        elif args.command == "remove":
            result = await engine.remove_product(args.product_id)
        elif args.command == "update":
            result = await engine.update_product_amount(args.product_id, args.amount)
        else:
            result = None

        print(render_cart(engine))
        return 0 if result is None or result.ok else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_log_level("DEBUG")
    try:
        return asyncio.run(run(args))
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
