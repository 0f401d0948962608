"""Checked HTML element wrapper for safe CSS querying.

This module provides CheckedHtmlElement, a wrapper around lxml.html.HtmlElement
that validates selector results against expected counts, and parse_document()
for turning a response body into one.
"""

from __future__ import annotations

from lxml import etree, html
from lxml.html import HtmlElement

from quotescrape.common.exceptions import (
    HTMLStructuralAssumptionException,
    ParseFailureException,
)


def parse_document(
    body: str | bytes, url: str = "", encoding: str | None = None
) -> CheckedHtmlElement:
    """Parse an HTML document into a CheckedHtmlElement.

    Raw bytes are preferred: lxml refuses ``str`` input that carries an XML
    encoding declaration, but parses the same document as bytes.

    Args:
        body: The HTML body, raw or decoded.
        url: URL of the document, for error context.
        encoding: Charset of a bytes ``body``. If None, lxml reads it from
            the document itself.

    Returns:
        The document root wrapped in a CheckedHtmlElement.

    Raises:
        ParseFailureException: If lxml cannot build a document from ``body``
            (for example an empty body) or ``encoding`` is unknown.
    """
    try:
        parser = None
        if encoding is not None and isinstance(body, bytes):
            parser = html.HTMLParser(encoding=encoding)
        root = html.document_fromstring(body, parser=parser)
    except (etree.LxmlError, LookupError, ValueError) as e:
        raise ParseFailureException(
            f"Could not parse HTML: {e}", url, {"length": len(body)}
        ) from e
    return CheckedHtmlElement(root, url)


class CheckedHtmlElement:
    """Wrapper around HtmlElement with validated selectors.

    checked_css() validates the number of results against expected min/max
    counts. If the actual count doesn't match expectations, it raises
    HTMLStructuralAssumptionException with clear error context.
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        """Initialize the checked element wrapper.

        Args:
            element: The lxml HtmlElement to wrap.
            request_url: Optional URL for error context.
        """
        self._element = element
        self._request_url = request_url

    def checked_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Execute CSS selector query with count validation.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching CheckedHtmlElements in document order. Each
            element is wrapped to support nested checked queries.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match
                expectations or the selector is invalid.

        Example::

            tree = parse_document(body)
            quotes = tree.checked_css(".quote", "quote blocks", min_count=0)
            for quote in quotes:
                text = quote.checked_css(".text", "quote text", max_count=1)
        """
        try:
            results = self._element.cssselect(selector)
        except Exception as e:
            raise HTMLStructuralAssumptionException(
                selector=selector,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=0,
                url=self._request_url,
            ) from e

        actual_count = len(results)
        if actual_count < min_count or (
            max_count is not None and actual_count > max_count
        ):
            raise HTMLStructuralAssumptionException(
                selector=selector,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=actual_count,
                url=self._request_url,
            )

        return [
            CheckedHtmlElement(result, self._request_url) for result in results
        ]

    def css_text(self, selector: str, description: str) -> str:
        """Return the concatenated text content of every match of ``selector``.

        Missing matches give the empty string. Text is returned untrimmed.
        """
        return "".join(
            match.text_content()
            for match in self.checked_css(selector, description, min_count=0)
        )

    def __getattr__(self, name: str):
        """Delegate all other attributes to the wrapped element."""
        return getattr(self._element, name)
