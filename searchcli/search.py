"""CLI entry point for the product search client.

Modes:
1. One-shot search: ``product-search молоко``
2. Dry run: print the sanitized query and request URL without network access
3. Price lookup: ``product-search --price 123``
4. Interactive: read queries line by line from stdin; an empty line clears
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

# Ensure parent directory is in path for direct script execution
if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from product_search.core import config as config_module
from product_search.core.network import build_api_url
from product_search.model import ProductItem
from product_search.products_api import build_products_path, get_product_price, search_products
from product_search.sanitize import sanitize_query
from searchcli.session import SearchSession

logger = logging.getLogger(__name__)


def create_cli_parser() -> argparse.ArgumentParser:
    """Create argument parser for the search CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Product search client (CLI Mode)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search products
  product-search сир кисломолочний

  # Show the sanitized query and request URL only
  product-search "milk' OR 1=1 --" --dry-run

  # Look up a product price
  product-search --price 42

  # Read queries from stdin
  product-search --interactive
        """
    )

    parser.add_argument(
        "query",
        nargs="*",
        help="Search text. Multiple words are joined with spaces."
    )

    parser.add_argument("--page", type=int, default=None, help="Result page number.")
    parser.add_argument("--sort", default=None, help="Sort key passed to the backend.")
    parser.add_argument(
        "--max-len",
        type=int,
        default=None,
        metavar="N",
        help="Maximum sanitized query length (default: sanitizer.max_len from config)."
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the sanitized query and request URL without sending it."
    )

    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Read queries line by line from stdin (empty line clears results)."
    )

    parser.add_argument("--price", default=None, metavar="ID", help="Look up the price of a product id.")

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )

    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to JSON config file."
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    # Reduce noisy connection logs from urllib3
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)


def format_results(results: List[ProductItem]) -> str:
    if not results:
        return "No products found."
    lines = []
    for item in results:
        stores = ", ".join(item.available_stores) or "-"
        lines.append(f"{item.name} [{stores}]")
    return "\n".join(lines)


def run_interactive(stream: TextIO, out: TextIO) -> None:
    """Feed lines from ``stream`` into a SearchSession and print published results."""

    def _publish(text: str, results: List[ProductItem]) -> None:
        if not text:
            print("(cleared)", file=out)
            return
        print(format_results(results), file=out)

    session = SearchSession(on_results=_publish)
    try:
        for line in stream:
            text = line.rstrip("\r\n")
            if not text.strip():
                session.clear()
            else:
                session.submit(text)
        session.flush()
    finally:
        session.close()


def run_cli(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Run the search client for parsed arguments.

    Args:
        args: Parsed command-line arguments
        out: Output stream (defaults to stdout)

    Returns:
        Process exit code
    """
    out = out or sys.stdout

    os.environ["PRODUCT_SEARCH_CONFIG_PATH"] = args.config
    config_module.get_config(force_reload=True)

    if args.interactive:
        run_interactive(sys.stdin, out)
        return 0

    if args.price is not None:
        price = get_product_price(args.price)
        if price is None:
            logger.error("No price available for product %s", args.price)
            return 1
        print(f"{price.raw} ({price.currency})", file=out)
        return 0

    raw = " ".join(args.query)
    max_len = args.max_len if args.max_len is not None else config_module.get_max_query_length()
    if args.dry_run:
        clean = sanitize_query(raw, max_len=max_len)
        path = build_products_path(raw, page=args.page, sort=args.sort, max_len=max_len)
        print(f"query: {clean}", file=out)
        print(f"url: {build_api_url(path) if path else '-'}", file=out)
        return 0

    if not raw.strip():
        logger.error("A search query is required. Use --interactive to read from stdin.")
        return 2

    results = search_products(raw, page=args.page, sort=args.sort, max_len=max_len)
    print(format_results(results), file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = create_cli_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        code = run_cli(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(0)
    except Exception as e:
        logging.exception("Unexpected error: %s", e)
        print(f"Error: {e}")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
