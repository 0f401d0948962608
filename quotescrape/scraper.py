"""Scraper for quotes.toscrape.com listing pages.

The scraper knows the site: how page URLs are built and where quotes live in
the markup. It does no I/O; the driver hands it PageResponse objects fetched
by the request manager.
"""

from __future__ import annotations

import logging

from quotescrape.common.checked_html import parse_document
from quotescrape.data_types import DEFAULT_BASE_URL, PageResponse, Quote

logger = logging.getLogger(__name__)

QUOTE_SELECTOR = ".quote"
TEXT_SELECTOR = ".text"
AUTHOR_SELECTOR = ".author"
# The pager renders <li class="next"><a href="/page/N/">; an <li class="next">
# without a link does not count.
NEXT_LINK_SELECTOR = ".next a"


class QuotesScraper:
    """Extracts Quote records from quotes.toscrape.com listing pages.

    Attributes:
        base_url: Site root without a trailing slash.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = base_url.rstrip("/")

    def page_url(self, page: int) -> str:
        """Build the URL of listing page ``page`` (1-indexed)."""
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        return f"{self.base_url}/page/{page}/"

    def parse_page(self, response: PageResponse) -> tuple[list[Quote], bool]:
        """Extract quotes and the next-page hint from a fetched page.

        For each ``.quote`` element, in document order, the quote text is the
        text content of its ``.text`` descendants and the author the text
        content of its ``.author`` descendants. Neither is trimmed.

        ``has_next`` is true iff the page carries at least one ``.next`` link.

        Args:
            response: A page fetched with status 200.

        Returns:
            Tuple of (quotes in document order, has_next).

        Raises:
            ParseFailureException: If the body is not parseable HTML.
        """
        tree = parse_document(
            response.content, response.url, response.encoding
        )

        quotes = [
            Quote(
                text=block.css_text(TEXT_SELECTOR, "quote text"),
                author=block.css_text(AUTHOR_SELECTOR, "quote author"),
            )
            for block in tree.checked_css(
                QUOTE_SELECTOR, "quote blocks", min_count=0
            )
        ]
        has_next = bool(
            tree.checked_css(NEXT_LINK_SELECTOR, "next page link", min_count=0)
        )

        logger.debug(
            f"Page {response.page}: {len(quotes)} quote(s), has_next={has_next}"
        )
        return quotes, has_next
