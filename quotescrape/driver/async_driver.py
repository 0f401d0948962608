"""Asynchronous driver implementation.

This module contains the driver that runs the scraper over a fixed range of
pages with a bounded pool of concurrent workers.

Scheduling works as follows:

1. Every page in ``1..max_pages`` is scheduled eagerly, in page order
2. An asyncio.Semaphore of size ``concurrency`` gates each spawn, so the
   scheduling loop itself blocks once all slots are taken
3. A worker holds its slot through fetch, extraction, publishing and the
   post-success sleep, and releases it on every exit path
4. asyncio.gather over all workers is the completion barrier; only after it
   returns is the collector's channel closed
"""

from __future__ import annotations

import asyncio
import logging

from quotescrape.common.exceptions import ScrapeError
from quotescrape.common.request_manager import AsyncRequestManager
from quotescrape.data_types import PageResult, Quote, RunConfig
from quotescrape.driver.collector import Collector
from quotescrape.scraper import QuotesScraper

logger = logging.getLogger(__name__)


class AsyncDriver:
    """Asynchronous driver for running the quotes scraper with multiple workers.

    Example usage:
        config = RunConfig(max_pages=10, concurrency=5)
        driver = AsyncDriver(QuotesScraper(config.base_url), config)
        quotes = await driver.run()

    Attributes:
        failed_pages: Page number to error for every page dropped in the
            last run.
    """

    def __init__(
        self,
        scraper: QuotesScraper,
        config: RunConfig,
        request_manager: AsyncRequestManager | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            scraper: Scraper that builds page URLs and parses page bodies.
            config: Run configuration (page bound, concurrency, retry policy).
            request_manager: AsyncRequestManager for handling HTTP requests.
                If omitted, one is built from ``config`` and closed when
                run() finishes.
        """
        self.scraper = scraper
        self.config = config

        if request_manager is not None:
            self.request_manager = request_manager
            self._owns_request_manager = False
        else:
            self.request_manager = AsyncRequestManager(
                max_attempts=config.per_request_retries,
                retry_delay=config.retry_delay,
                timeout=config.request_timeout,
            )
            self._owns_request_manager = True

        self.failed_pages: dict[int, ScrapeError] = {}

    async def run(self) -> list[Quote]:
        """Scrape pages ``1..max_pages`` and return the merged quotes.

        Returns:
            Every quote from every successfully scraped page, in completion
            order across pages and document order within a page.
        """
        self.failed_pages = {}
        collector = Collector(maxsize=self.config.channel_size)
        semaphore = asyncio.Semaphore(self.config.concurrency)

        logger.info(
            f"Scraping {self.config.max_pages} page(s) with "
            f"{self.config.concurrency} worker slot(s)"
        )

        try:
            drain = asyncio.create_task(collector.drain())
            workers: list[asyncio.Task[None]] = []
            try:
                for page in range(1, self.config.max_pages + 1):
                    await semaphore.acquire()
                    workers.append(
                        asyncio.create_task(
                            self._worker(page, semaphore, collector)
                        )
                    )
                await asyncio.gather(*workers)
            except BaseException:
                for worker in workers:
                    worker.cancel()
                drain.cancel()
                await asyncio.gather(*workers, drain, return_exceptions=True)
                raise

            await collector.close()
            quotes = await drain
        finally:
            if self._owns_request_manager:
                await self.request_manager.close()

        logger.info(
            f"Collected {len(quotes)} quote(s); "
            f"{len(self.failed_pages)} page(s) failed"
        )
        return quotes

    async def scrape_page(self, page: int) -> PageResult:
        """Fetch and parse one page.

        Per-page errors are returned in the result instead of raised.

        Args:
            page: The 1-indexed page number.

        Returns:
            PageResult with either quotes or an error.
        """
        url = self.scraper.page_url(page)
        try:
            response = await self.request_manager.fetch_page(page, url)
            quotes, has_next = self.scraper.parse_page(response)
        except ScrapeError as e:
            return PageResult(page=page, error=e)
        return PageResult(page=page, quotes=quotes, has_next=has_next)

    async def _worker(
        self,
        page: int,
        semaphore: asyncio.Semaphore,
        collector: Collector,
    ) -> None:
        """Scrape one page and publish its quotes, then release the slot.

        Args:
            page: The page number to scrape.
            semaphore: The capacity semaphore; already acquired for this worker.
            collector: Destination for this page's quotes.
        """
        try:
            result = await self.scrape_page(page)

            if result.error is not None:
                self.failed_pages[page] = result.error
                logger.warning(
                    f"Error scraping page {page}: {result.error.message}",
                    extra={
                        "page": page,
                        "url": result.error.url,
                        "error_type": type(result.error).__name__,
                    },
                )
                return

            for quote in result.quotes:
                await collector.publish(quote)

            # The hint is informational; max_pages alone bounds the run.
            logger.debug(
                f"Page {page} done: {len(result.quotes)} quote(s), "
                f"has_next={result.has_next}"
            )

            await asyncio.sleep(self.config.post_fetch_delay)
        finally:
            semaphore.release()
