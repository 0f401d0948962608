"""
Bounded-concurrency scraper for the quotes.toscrape.com site.

This package fetches a fixed range of paginated quote pages with a pool of
async workers, extracts quote/author records with CSS selectors, and writes
the merged result as a CSV file.

The pieces are kept apart the same way throughout: the request manager does
HTTP, the scraper does parsing, the driver schedules work, the collector
merges results and the exporter owns the output file.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
