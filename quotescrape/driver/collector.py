"""Collector: the merge stage between the worker pool and the exporter.

Workers publish quotes into a bounded asyncio.Queue; the collector drains it
into an ordered list. Publishing blocks while the queue is full, so a slow
collector exerts backpressure on the workers.
"""

from __future__ import annotations

import asyncio
import logging

from quotescrape.data_types import Quote

logger = logging.getLogger(__name__)

# End-of-stream marker; never a Quote.
_CLOSED = object()


class Collector:
    """Drains a bounded channel of quotes into an in-memory aggregate.

    The aggregate reflects completion order across workers. Quotes from a
    single page keep their document order because one worker publishes them
    sequentially.

    Example::

        collector = Collector(maxsize=100)
        drain = asyncio.create_task(collector.drain())
        await collector.publish(Quote("...", "..."))
        await collector.close()
        quotes = await drain
    """

    def __init__(self, maxsize: int = 100) -> None:
        """Initialize the collector.

        Args:
            maxsize: Capacity of the output channel. Must be positive.
        """
        if maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self.quotes: list[Quote] = []

    @property
    def closed(self) -> bool:
        return self._closed

    async def publish(self, quote: Quote) -> None:
        """Send one quote, waiting while the channel is full."""
        if self._closed:
            raise RuntimeError("Cannot publish to a closed collector")
        await self._queue.put(quote)

    async def close(self) -> None:
        """Mark end of stream. Must be called exactly once."""
        if self._closed:
            raise RuntimeError("Collector is already closed")
        self._closed = True
        await self._queue.put(_CLOSED)

    async def drain(self) -> list[Quote]:
        """Consume quotes until the channel is closed.

        Returns:
            The aggregate, in the order quotes were published.
        """
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                break
            self.quotes.append(item)  # type: ignore[arg-type]

        logger.debug(f"Collector drained {len(self.quotes)} quote(s)")
        return self.quotes
