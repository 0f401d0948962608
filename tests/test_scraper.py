"""Tests for QuotesScraper and the checked CSS helpers it relies on."""

import pytest

from quotescrape.common.checked_html import parse_document
from quotescrape.common.exceptions import (
    HTMLStructuralAssumptionException,
    ParseFailureException,
)
from quotescrape.data_types import Quote
from quotescrape.scraper import QuotesScraper
from tests.mock_server import MockPage, generate_page_html
from tests.utils import page_response


class TestPageUrl:
    def test_builds_page_url(self) -> None:
        scraper = QuotesScraper("https://quotes.toscrape.com")
        assert scraper.page_url(3) == "https://quotes.toscrape.com/page/3/"

    def test_strips_trailing_slash_from_base_url(self) -> None:
        scraper = QuotesScraper("http://127.0.0.1:8080/")
        assert scraper.page_url(1) == "http://127.0.0.1:8080/page/1/"

    def test_rejects_page_zero(self) -> None:
        with pytest.raises(ValueError):
            QuotesScraper().page_url(0)


class TestParsePage:
    def test_extracts_quotes_in_document_order(self) -> None:
        """Quotes shall come out in the order they appear on the page."""
        html = generate_page_html(
            MockPage(quotes=[("“A”", "X"), ("“B”", "Y"), ("“C”", "Z")])
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes == [
            Quote("“A”", "X"),
            Quote("“B”", "Y"),
            Quote("“C”", "Z"),
        ]

    def test_preserves_whitespace(self) -> None:
        """Text and author shall not be trimmed."""
        html = (
            "<html><body>"
            '<div class="quote"><span class="text">  spaced out \n</span>'
            '<small class="author"> Someone </small></div>'
            "</body></html>"
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes == [Quote("  spaced out \n", " Someone ")]

    def test_text_includes_nested_markup(self) -> None:
        html = (
            "<html><body>"
            '<div class="quote"><span class="text">Be <b>bold</b>.</span>'
            '<small class="author">Anon</small></div>'
            "</body></html>"
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes[0].text == "Be bold."

    def test_missing_author_gives_empty_string(self) -> None:
        html = (
            "<html><body>"
            '<div class="quote"><span class="text">Orphan</span></div>'
            "</body></html>"
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes == [Quote("Orphan", "")]

    def test_html_entities_are_decoded(self) -> None:
        html = generate_page_html(
            MockPage(quotes=[('He said "Hi, there" & left', "A <B>")])
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes == [Quote('He said "Hi, there" & left', "A <B>")]

    def test_page_without_quotes(self) -> None:
        """A listing past the last page shall yield no quotes and no next link."""
        html = generate_page_html(MockPage())

        quotes, has_next = QuotesScraper().parse_page(page_response(html))

        assert quotes == []
        assert has_next is False

    def test_empty_body_is_parse_failure(self) -> None:
        with pytest.raises(ParseFailureException):
            QuotesScraper().parse_page(page_response(""))

    def test_xml_declared_page_is_parsed(self) -> None:
        """A page opening with an XML encoding declaration shall still yield its quotes."""
        html = (
            '<?xml version="1.0" encoding="utf-8"?>'
            "<html><body>"
            '<div class="quote"><span class="text">“Hi”</span>'
            '<small class="author">Ann</small></div>'
            "</body></html>"
        )

        quotes, _ = QuotesScraper().parse_page(page_response(html))

        assert quotes == [Quote("“Hi”", "Ann")]

    def test_unknown_encoding_is_parse_failure(self) -> None:
        response = page_response("<html><body></body></html>")
        response.encoding = "no-such-charset"

        with pytest.raises(ParseFailureException):
            QuotesScraper().parse_page(response)


class TestHasNext:
    def test_single_next_link_means_more_pages(self) -> None:
        """One ``.next`` link is enough to advertise a following page."""
        html = generate_page_html(MockPage(quotes=[("q", "a")], has_next=True))

        _, has_next = QuotesScraper().parse_page(page_response(html))

        assert has_next is True

    def test_no_next_link(self) -> None:
        html = generate_page_html(MockPage(quotes=[("q", "a")], has_next=False))

        _, has_next = QuotesScraper().parse_page(page_response(html))

        assert has_next is False

    def test_next_item_without_link_does_not_count(self) -> None:
        html = (
            "<html><body>"
            '<ul class="pager"><li class="next">Next</li></ul>'
            "</body></html>"
        )

        _, has_next = QuotesScraper().parse_page(page_response(html))

        assert has_next is False


class TestCheckedCss:
    def test_count_below_minimum_raises(self) -> None:
        tree = parse_document("<html><body><p>one</p></body></html>")

        with pytest.raises(HTMLStructuralAssumptionException) as exc_info:
            tree.checked_css("p", "paragraphs", min_count=2)

        assert exc_info.value.actual_count == 1
        assert "at least 2" in str(exc_info.value)

    def test_count_above_maximum_raises(self) -> None:
        tree = parse_document("<html><body><p>1</p><p>2</p></body></html>")

        with pytest.raises(HTMLStructuralAssumptionException) as exc_info:
            tree.checked_css("p", "paragraph", min_count=1, max_count=1)

        assert "exactly 1" in str(exc_info.value)

    def test_invalid_selector_is_parse_failure(self) -> None:
        tree = parse_document("<html><body><p>1</p></body></html>")

        with pytest.raises(ParseFailureException):
            tree.checked_css("p[", "broken selector")

    def test_nested_queries(self) -> None:
        tree = parse_document(
            '<html><body><div class="a"><span class="b">x</span></div>'
            '<span class="b">y</span></body></html>'
        )

        (outer,) = tree.checked_css(".a", "outer", max_count=1)

        assert outer.css_text(".b", "inner") == "x"
        assert tree.css_text(".b", "all") == "xy"
