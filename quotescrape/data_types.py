"""Data types passed between the fetcher, scraper, driver and exporter.

These types are designed to be:

1. Immutable where they cross task boundaries - Quote and RunConfig are frozen
2. Transient where they are not - PageResult is created per page and
   consumed exactly once
3. Free of I/O - nothing here touches the network or the filesystem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quotescrape.common.exceptions import ScrapeError

DEFAULT_BASE_URL = "https://quotes.toscrape.com"


@dataclass(frozen=True)
class Quote:
    """A single quote record extracted from a ``.quote`` element.

    Both fields are kept exactly as extracted. No whitespace is trimmed and
    nothing is escaped; CSV quoting is left to the exporter.

    Attributes:
        text: Text content of the ``.text`` descendant.
        author: Text content of the ``.author`` descendant.
    """

    text: str
    author: str


@dataclass
class PageResponse:
    """A successfully fetched page (HTTP 200) with its full decoded body.

    Attributes:
        page: The 1-indexed page number that was requested.
        url: The URL that was fetched.
        status_code: HTTP status code (always 200 when returned by the fetcher).
        text: Decoded response body.
        content: Raw response body, the bytes the extractor parses.
        encoding: Charset httpx decoded ``text`` with, if known.
    """

    page: int
    url: str
    status_code: int
    text: str
    content: bytes
    encoding: str | None = None


@dataclass
class PageResult:
    """Outcome of scraping one page.

    Exactly one of two shapes: ``quotes``/``has_next`` filled in and
    ``error`` None, or ``error`` set and no quotes.

    Attributes:
        page: The page number this result belongs to.
        quotes: Quotes in document order.
        has_next: Whether the page advertises a link to a following page.
        error: The per-page failure, if any.
    """

    page: int
    quotes: list[Quote] = field(default_factory=list)
    has_next: bool = False
    error: ScrapeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunConfig:
    """Configuration for one scraper run.

    Attributes:
        max_pages: Pages ``1..max_pages`` are scheduled; the sole bound on a run.
        output_path: Destination CSV file.
        concurrency: Maximum number of pages in flight at once.
        per_request_retries: Total GET attempts per page on transport errors.
        base_url: Site root; page URLs are ``{base_url}/page/{n}/``.
        retry_delay: Backoff unit. Retry *k* waits ``k * retry_delay`` seconds.
        post_fetch_delay: Seconds a worker sleeps after a successful page,
            while still holding its concurrency slot.
        request_timeout: Per-request deadline in seconds. None means no timeout.
        channel_size: Capacity of the bounded output channel.
    """

    max_pages: int = 1
    output_path: Path = Path("quotes.csv")
    concurrency: int = 5
    per_request_retries: int = 3
    base_url: str = DEFAULT_BASE_URL
    retry_delay: float = 1.0
    post_fetch_delay: float = 1.0
    request_timeout: float | None = 30.0
    channel_size: int = 100

    def __post_init__(self) -> None:
        for name in (
            "max_pages",
            "concurrency",
            "per_request_retries",
            "channel_size",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value}")
        for name in ("retry_delay", "post_fetch_delay"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )
        # Accept plain strings for the output path
        object.__setattr__(self, "output_path", Path(self.output_path))
