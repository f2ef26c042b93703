"""Command-line entry point.

Usage::

    payopt orders.json paymentmethods.json

Prints ``<method-id> <amount>`` for every payment method that was charged,
in the order the methods appear in the input file. Logs go to stderr.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from payopt.core.config import settings
from payopt.core.logging import setup_logging
from payopt.services.allocation.allocator import allocate_payments
from payopt.services.allocation.reporter import UsageReporter
from payopt.services.ingestion.base_parser import InputFileError
from payopt.services.ingestion.json_parser import load_orders, load_payment_methods


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="payopt",
        description="Assign payment methods to orders to maximize discounts.",
    )
    p.add_argument("orders", help="path to orders.json")
    p.add_argument("payment_methods", help="path to paymentmethods.json")
    p.add_argument(
        "--log-level",
        default=None,
        help=f"override LOG_LEVEL (default {settings.log_level})",
    )
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level or settings.log_level, stream=sys.stderr)

    try:
        orders = load_orders(args.orders)
        methods = load_payment_methods(args.payment_methods)
    except (OSError, InputFileError) as exc:
        logger.error("Could not load input: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    result = allocate_payments(orders, methods, settings)
    sys.stdout.write(UsageReporter().render(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
