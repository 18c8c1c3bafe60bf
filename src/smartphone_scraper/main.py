# ==============================================================================
#  Copyright 2025 Matthew Pounsett <matt@conundrum.com>
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# ==============================================================================
"""CLI entry point for the smartphone catalog scraper."""

import argparse
import logging
import sys

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from smartphone_scraper import __version__
from smartphone_scraper.config import ConfigError, ScraperConfig, load_config
from smartphone_scraper.models import Product, products_to_json
from smartphone_scraper.scraper import CatalogScraper, PageResult

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="smartphone-scraper",
        description="Scrape every page of the smartphone catalog into a JSON file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="YAML configuration file.",
    )
    parser.add_argument(
        "--base-url",
        metavar="URL",
        help="Catalog URL to scrape (overrides the config file).",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output JSON file path. Use '-' for stdout.",
    )
    parser.add_argument(
        "-p",
        "--print",
        action="store_true",
        dest="print_table",
        help="Print a table of results to stdout.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity. Use -vv for debug output.",
    )

    return parser.parse_args(args)


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: Verbosity level (0=warning, 1=info, 2+=debug).
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def build_config(parsed_args: argparse.Namespace) -> ScraperConfig:
    """Combine the config file (if any) with command line overrides."""
    config = load_config(parsed_args.config) if parsed_args.config else ScraperConfig()

    overrides = {}
    if parsed_args.base_url:
        overrides["base_url"] = parsed_args.base_url
    if parsed_args.output:
        overrides["output"] = parsed_args.output
    return config.model_copy(update=overrides)


def print_results_table(products: list[Product], console: Console) -> None:
    """Print a Rich table of product results.

    Args:
        products: List of Product instances.
        console: Rich console for output.
    """
    table = Table(title="Smartphones")
    table.add_column("Title", style="green")
    table.add_column("Colour", style="cyan")
    table.add_column("Capacity (MB)", justify="right")
    table.add_column("Price", style="yellow", justify="right")
    table.add_column("Available")
    table.add_column("Shipping date", style="blue")

    for product in products:
        table.add_row(
            product.title or "-",
            product.colour,
            str(product.capacity_mb),
            f"{product.price:.2f}",
            "yes" if product.is_available else "no",
            product.shipping_date.isoformat() if product.shipping_date else "-",
        )

    console.print(table)


def output_json(products: list[Product], output_path: str) -> None:
    """Output product data as JSON.

    Args:
        products: List of Product instances, already sorted.
        output_path: File path or '-' for stdout.
    """
    data = products_to_json(products)

    if output_path == "-":
        sys.stdout.write(data + "\n")
    else:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(data + "\n")
        logger.info("Output written to: %s", output_path)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parsed_args = parse_args(args)
    setup_logging(parsed_args.verbose)

    try:
        config = build_config(parsed_args)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    # Keep stdout clean when the JSON goes there
    console = Console(stderr=config.output == "-")

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
    )

    with progress, CatalogScraper(config) as scraper:
        task = progress.add_task("Scraping catalog...", total=None)

        def on_page(result: PageResult) -> None:
            status = f"{len(result.products)} variants" if result.ok else "failed"
            progress.update(task, description=f"Page {result.page}: {status}")

        result = scraper.scrape(on_page=on_page)
        progress.update(task, description="Scraping complete", total=1, completed=1)

    for page, error in sorted(result.failed_pages.items()):
        logger.warning("Page %d was skipped: %s", page, error)

    if parsed_args.print_table:
        print_results_table(result.products, console)

    output_json(result.products, config.output)
    if config.output != "-":
        console.print(f"Scraping complete! Check {config.output} for results.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
