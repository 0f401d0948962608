"""quotescrape CLI — scrape quotes.toscrape.com into a CSV file.

Usage:
    quotescrape                                 # page 1 into quotes.csv
    quotescrape --pages 10 --output out.csv     # pages 1..10
    quotescrape --pages 10 --concurrency 2 -v   # fewer workers, log to stderr
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from quotescrape import __version__
from quotescrape.common.exceptions import ExportFailureException
from quotescrape.data_types import DEFAULT_BASE_URL, Quote, RunConfig
from quotescrape.driver.async_driver import AsyncDriver
from quotescrape.export import export_quotes
from quotescrape.scraper import QuotesScraper

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send diagnostics to stderr when verbose, and nowhere otherwise.

    The handler goes on the package logger rather than the root logger, and
    replaces whatever an earlier call installed there.
    """
    package_logger = logging.getLogger("quotescrape")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = False

    if not verbose:
        package_logger.addHandler(logging.NullHandler())
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


async def scrape(config: RunConfig) -> list[Quote]:
    """Run the worker pool for ``config`` and return the merged quotes."""
    driver = AsyncDriver(QuotesScraper(config.base_url), config)
    return await driver.run()


@click.command()
@click.version_option(version=__version__, prog_name="quotescrape")
@click.option(
    "--pages",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Maximum number of pages to scrape.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("quotes.csv"),
    show_default=True,
    help="Output CSV file.",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Maximum number of pages fetched at once.",
)
@click.option(
    "--retries",
    type=click.IntRange(min=1),
    default=3,
    show_default=True,
    help="Total GET attempts per page on network errors.",
)
@click.option(
    "--base-url",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Root URL of the quotes site.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=30.0,
    show_default=True,
    help="Per-request timeout in seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    pages: int,
    output: Path,
    concurrency: int,
    retries: int,
    base_url: str,
    timeout: float,
    verbose: bool,
) -> None:
    """Scrape quotes and authors into a CSV file.

    Pages 1..PAGES are fetched concurrently. Pages that fail are logged and
    skipped; the run only fails if the CSV file cannot be written.
    """
    configure_logging(verbose)
    logger.debug("Starting logs ...")

    config = RunConfig(
        max_pages=pages,
        output_path=output,
        concurrency=concurrency,
        per_request_retries=retries,
        base_url=base_url,
        request_timeout=timeout,
    )

    quotes = asyncio.run(scrape(config))

    try:
        count = export_quotes(config.output_path, quotes)
    except ExportFailureException as e:
        logger.error(f"Error exporting to csv: {e}")
        ctx.exit(1)

    click.echo(f"Scraped {count} quotes and saved to {config.output_path}")


def main() -> None:
    """Entry point for the ``quotescrape`` console script."""
    cli()
