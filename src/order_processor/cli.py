"""
Command-line interface for the Pizzeria Order Processor.
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import __version__
from .order_processing.exceptions import DataSourceError
from .order_processing.models import OrderBatch, OrderSummary, ProcessingResult
from .order_processing.processor import OrderProcessingService
from .order_processing.repository import DataRepository
from .utils.config import Config
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Pizzeria Order Processor - Order Aggregation and Ingredient Planning Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  order-processor --version
  order-processor process-orders
  order-processor process-orders --orders Data/orders.csv
  order-processor --env-file .env process-orders --output json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Pizzeria Order Processor {__version__}",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        help="Log file path",
    )

    parser.add_argument(
        "--env-file",
        help="Load settings (DATA_DIR, ORDERS_FILE, ...) from this .env file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    process_parser = subparsers.add_parser(
        "process-orders",
        help="Validate and aggregate orders, then report totals and ingredient demand",
    )
    process_parser.add_argument(
        "--orders",
        type=str,
        help="Orders file to process (.json, or delimited text with a header row). "
             "Defaults to ORDERS_FILE inside DATA_DIR.",
    )
    process_parser.add_argument(
        "--output",
        choices=["table", "json"],
        default="table",
        help="Report format (default: table)",
    )

    return parser


def _fmt_money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _print_box(lines: Sequence[Tuple[str, Any]]) -> None:
    label_width = max(len(lbl) for lbl, _ in lines)
    inner_width = max(len(f" {lbl.ljust(label_width)} : {val} ") for lbl, val in lines)
    print("┌" + "─" * inner_width + "┐")
    for lbl, val in lines:
        line = f" {lbl.ljust(label_width)} : {val}"
        print(f"│{line.ljust(inner_width)}│")
    print("└" + "─" * inner_width + "┘")


def _delivery_sort_key(summary: OrderSummary) -> Tuple[datetime, str]:
    # Naive timestamps are read as UTC so they order alongside offset-aware ones
    delivery_at = summary.delivery_at
    if delivery_at.tzinfo is None:
        delivery_at = delivery_at.replace(tzinfo=timezone.utc)
    return delivery_at, summary.order_id


def _sorted_for_display(summaries: Sequence[OrderSummary]) -> List[OrderSummary]:
    return sorted(summaries, key=_delivery_sort_key)


def render_table(
    result: ProcessingResult,
    batch: OrderBatch,
    orders_path: str,
    data_dir: str,
) -> None:
    """Print the processing report as console tables."""
    _print_box([
        ("Data directory", data_dir),
        ("Orders file", orders_path),
        ("Order lines", len(batch.lines)),
        ("Skipped rows", len(batch.row_errors)),
        ("Accepted orders", len(result.summaries)),
    ])

    if batch.row_errors or result.errors:
        print("\nVALIDATION ERRORS:")
        print("=" * 60)
        for error in batch.row_errors:
            print(f"  ❌ {error}")
        for error in result.errors:
            print(f"  ❌ Validation Error: {error}")

    print("\nORDER SUMMARIES:")
    print("=" * 60)
    if not result.summaries:
        print("  No valid orders to report.")

    for summary in _sorted_for_display(result.summaries):
        print(f"\n📦 Order {summary.order_id}")
        print(f"   Created:  {summary.created_at.isoformat()}")
        print(f"   Delivery: {summary.delivery_at.isoformat()}")
        print(f"   Address:  {summary.delivery_address}")
        name_width = max([len(item.product_name) for item in summary.items] + [7])
        header = f"   {'Product':<{name_width + 2}}{'Qty':>5}{'Unit':>12}{'Total':>14}"
        print(header)
        print("   " + "-" * (len(header) - 3))
        for item in summary.items:
            print(
                f"   {item.product_name:<{name_width + 2}}{item.quantity:>5}"
                f"{_fmt_money(item.unit_price):>12}{_fmt_money(item.line_total):>14}"
            )
        print(f"   {'Order total':<{name_width + 2}}{'':>17}{_fmt_money(summary.total_price):>14}")

    print(f"\nGRAND TOTAL: {_fmt_money(result.grand_total)}")

    print("\nINGREDIENTS REQUIRED:")
    print("=" * 60)
    if not result.ingredient_totals:
        print("  None")
    name_width = max([len(name) for name in result.ingredient_totals] + [10])
    for name in sorted(result.ingredient_totals):
        print(f"  {name:<{name_width + 2}}{result.ingredient_totals[name]:>12}")


def build_json_report(result: ProcessingResult, batch: OrderBatch) -> Dict[str, Any]:
    return {
        "summaries": [s.model_dump(mode="json") for s in _sorted_for_display(result.summaries)],
        "grandTotal": str(result.grand_total),
        "ingredientTotals": {
            name: str(result.ingredient_totals[name]) for name in sorted(result.ingredient_totals)
        },
        "validationErrors": list(result.errors),
        "rowErrors": list(batch.row_errors),
    }


def process_orders(
    orders_path: Optional[str] = None,
    output: str = "table",
    env_file: Optional[str] = None,
) -> None:
    """
    Load the catalog and orders, aggregate them and print the report.

    Args:
        orders_path: Override for the configured orders file
        output: Report format ("table" or "json")
        env_file: Optional .env file with path settings

    Raises:
        DataSourceError: when the catalog or the order source is unusable
    """
    config = Config(env_file)
    repository = DataRepository(config=config)
    service = OrderProcessingService(repository=repository)

    # Catalog problems are fatal before any order is read
    service.load_catalog()
    batch = service.load_orders(orders_path)
    # Validation errors are rendered in the report itself
    result = service.process_batch(
        batch,
        error_sink=lambda msg: logger.debug(f"Validation Error: {msg}"),
    )

    if output == "json":
        print(json.dumps(build_json_report(result, batch), indent=2, ensure_ascii=False))
    else:
        render_table(
            result,
            batch,
            orders_path=str(orders_path or repository.orders_path),
            data_dir=str(config.data_dir),
        )


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = "DEBUG" if parsed_args.verbose else Config(parsed_args.env_file).get("log_level", "INFO")
    logger = setup_logging(level=log_level, log_file=parsed_args.log_file)

    try:
        if parsed_args.command == "process-orders":
            process_orders(
                orders_path=parsed_args.orders,
                output=parsed_args.output,
                env_file=parsed_args.env_file,
            )

        elif not parsed_args.command:
            parser.print_help()
            return 1

    except DataSourceError as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
