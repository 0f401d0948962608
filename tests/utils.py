"""Test utilities shared across test modules."""

import csv
from pathlib import Path

import httpx

from quotescrape.common.request_manager import AsyncRequestManager
from quotescrape.data_types import PageResponse


def read_csv_rows(path: Path) -> list[list[str]]:
    """Read a CSV file back with the stdlib reader."""
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def page_response(text: str, page: int = 1) -> PageResponse:
    """Wrap an HTML body in a PageResponse as the fetcher would."""
    return PageResponse(
        page=page,
        url=f"http://example.com/page/{page}/",
        status_code=200,
        text=text,
        content=text.encode("utf-8"),
        encoding="utf-8",
    )


def mock_manager(
    handler, max_attempts: int = 3, retry_delay: float = 0.0
) -> AsyncRequestManager:
    """Build a request manager whose requests are answered by ``handler``.

    ``handler`` receives an httpx.Request and returns an httpx.Response or
    raises an httpx exception, as with httpx.MockTransport.
    """
    return AsyncRequestManager(
        max_attempts=max_attempts,
        retry_delay=retry_delay,
        transport=httpx.MockTransport(handler),
    )


class TrackingStream(httpx.AsyncByteStream):
    """Async response body that records whether it was closed."""

    def __init__(self, content: bytes) -> None:
        self._content = content
        self.closed = False

    async def __aiter__(self):
        yield self._content

    async def aclose(self) -> None:
        self.closed = True
