"""Request manager for fetching quote pages.

AsyncRequestManager encapsulates the HTTP client and request resolution
logic. It is responsible for:

- Maintaining the httpx.AsyncClient
- Retrying transport-layer failures with a fixed, linear backoff
- Rejecting non-200 responses without retrying them
- Following redirects, so a moved page is judged by where it lands
- Converting HTTP responses to PageResponse objects

This separation allows the driver to focus on scheduling while delegating
HTTP concerns to the request manager.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from quotescrape.common.exceptions import (
    BadStatusException,
    ResponseException,
    TransportException,
)
from quotescrape.data_types import PageResponse

logger = logging.getLogger(__name__)


class AsyncRequestManager:
    """Manages HTTP requests for the async driver.

    The retry policy is a fixed linear backoff::

        delay before retry k = k * retry_delay    (k = 1, 2, ...)

    With the defaults (3 attempts, 1s unit) a page is tried at 0s, after a
    further 1s, and after a further 2s. Only ``httpx.TransportError`` (connect,
    read, protocol and timeout errors) triggers a retry. Any other
    ``httpx.HTTPError`` becomes a ResponseException at once.

    Example::

        async with AsyncRequestManager(max_attempts=3, timeout=30.0) as manager:
            response = await manager.fetch_page(1, "https://quotes.toscrape.com/page/1/")
    """

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            max_attempts: Total GET attempts per page, including the first.
            retry_delay: Backoff unit in seconds.
            timeout: Request timeout in seconds. None means no timeout.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout

        if transport is not None:
            self._client = httpx.AsyncClient(
                timeout=timeout, transport=transport, follow_redirects=True
            )
        else:
            self._client = httpx.AsyncClient(
                timeout=timeout, follow_redirects=True
            )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncRequestManager:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()

    def backoff(self, retry: int) -> float:
        """Seconds to wait before the given 1-indexed retry."""
        return retry * self.retry_delay

    async def fetch_page(self, page: int, url: str) -> PageResponse:
        """GET ``url`` and return its full body.

        Args:
            page: The page number being fetched (for logging and the result).
            url: Absolute URL of the page.

        Returns:
            PageResponse with the decoded body of a 200 response.

        Raises:
            TransportException: If every attempt failed at the transport layer.
            BadStatusException: If the server returned a status other than 200.
            ResponseException: If the response could not be read for any
                other reason, e.g. an undecodable body.
        """
        last_error: httpx.TransportError | None = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay = self.backoff(attempt - 1)
                logger.info(
                    f"Retry {attempt - 1} for page {page} in {delay:.1f}s: "
                    f"{last_error!r}"
                )
                await asyncio.sleep(delay)

            logger.debug(f"Fetching page {page} (attempt {attempt}): {url}")
            try:
                return await self._get(page, url)
            except httpx.TransportError as e:
                last_error = e
                logger.debug(
                    f"Attempt {attempt} for page {page} failed: {e!r}",
                    extra={"page": page, "url": url, "attempt": attempt},
                )
            except httpx.HTTPError as e:
                raise ResponseException(url=url, error=e) from e

        assert last_error is not None
        raise TransportException(
            url=url, attempts=self.max_attempts, last_error=last_error
        )

    async def _get(self, page: int, url: str) -> PageResponse:
        # The stream is closed when the block exits, on success or failure.
        async with self._client.stream("GET", url) as http_response:
            if http_response.status_code != 200:
                raise BadStatusException(
                    status_code=http_response.status_code, url=url
                )
            await http_response.aread()
            return PageResponse(
                page=page,
                url=url,
                status_code=http_response.status_code,
                text=http_response.text,
                content=http_response.content,
                encoding=http_response.encoding,
            )
