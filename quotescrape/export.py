"""CSV export of the merged quotes."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from quotescrape.common.exceptions import ExportFailureException
from quotescrape.data_types import Quote

logger = logging.getLogger(__name__)

HEADER = ("Quote", "Author")


def export_quotes(path: str | Path, quotes: Iterable[Quote]) -> int:
    """Write ``quotes`` to a CSV file at ``path``.

    The file is created or truncated, and gets exactly one ``Quote,Author``
    header row followed by one row per quote in the order given. Fields are
    quoted the RFC 4180 way by the stdlib csv writer: only fields containing
    a delimiter, quote character or line break are quoted, and embedded
    quotes are doubled.

    Args:
        path: Destination file path.
        quotes: Quotes to write, in output order.

    Returns:
        Number of data rows written (the header is not counted).

    Raises:
        ExportFailureException: If the file cannot be created, written,
            flushed or closed.
    """
    count = 0
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for quote in quotes:
                writer.writerow((quote.text, quote.author))
                count += 1
    except OSError as e:
        raise ExportFailureException(str(path), e) from e

    logger.info(f"Exported {count} quote(s) to {path}")
    return count
