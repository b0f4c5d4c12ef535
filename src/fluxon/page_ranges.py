"""Page range parsing helpers.

Range strings are comma-separated tokens, each either a single page (`5`) or an
inclusive span (`7-10`). Pages are 1-based.
"""

from __future__ import annotations

import re

from fluxon.exceptions import PageRangeError
from fluxon.typing.models import PageRange

_TOKEN_RE = re.compile(r"^(?P<start>\d+)\s*(?:-\s*(?P<end>\d+))?$")


def _parse_token(token: str) -> PageRange:
    """Parse one range token.

    Args:
        token (str): Stripped token such as `"3"` or `"2-6"`.

    Raises:
        PageRangeError: If the token is malformed, zero-based, or reversed.

    Returns:
        PageRange: Parsed range.
    """
    match = _TOKEN_RE.match(token)
    if match is None:
        raise PageRangeError(message="Malformed page range", value=token)

    start = int(match.group("start"))
    end = int(match.group("end") or start)
    if start < 1:
        raise PageRangeError(message="Page numbers start at 1", value=token)
    if end < start:
        raise PageRangeError(message="Range end is before range start", value=token)
    return PageRange(start=start, end=end)


def _split_tokens(text: str) -> list[str]:
    tokens = [part.strip() for part in text.split(",")]
    tokens = [token for token in tokens if token]
    if not tokens:
        raise PageRangeError(message="No page ranges specified", value=text)
    return tokens


def parse_page_ranges(text: str, total_pages: int | None = None) -> list[PageRange]:
    """Parse a range string into ordered ranges.

    Order and duplicates are preserved. When `total_pages` is given, range ends are
    clamped to it and ranges starting past the last page are dropped.

    Args:
        text (str): Range string, e.g. `"1-3, 5, 7-10"`.
        total_pages (int | None): Page count of the target document.

    Raises:
        PageRangeError: If a token is malformed or no range fits the document.

    Returns:
        list[PageRange]: Parsed ranges.
    """
    ranges = [_parse_token(token) for token in _split_tokens(text)]
    if total_pages is None:
        return ranges

    clamped = [
        PageRange(start=page_range.start, end=min(page_range.end, total_pages))
        for page_range in ranges
        if page_range.start <= total_pages
    ]
    if not clamped:
        raise PageRangeError(message=f"No valid page ranges for a {total_pages}-page document", value=text)
    return clamped


def parse_page_numbers(text: str, total_pages: int | None = None) -> list[int]:
    """Parse a range string into a sorted list of unique page numbers.

    Args:
        text (str): Range string, e.g. `"1-3,5,7-10"`.
        total_pages (int | None): Page count used to drop out-of-bounds pages.

    Raises:
        PageRangeError: If a token is malformed or no page is left.

    Returns:
        list[int]: Sorted unique page numbers.
    """
    pages: set[int] = set()
    for page_range in (_parse_token(token) for token in _split_tokens(text)):
        last = page_range.end if total_pages is None else min(page_range.end, total_pages)
        pages.update(range(page_range.start, last + 1))

    if not pages:
        raise PageRangeError(message="No valid pages to convert", value=text)
    return sorted(pages)


def interval_ranges(total_pages: int, interval: int) -> list[PageRange]:
    """Cut `1..total_pages` into consecutive chunks of `interval` pages.

    Args:
        total_pages (int): Page count.
        interval (int): Chunk length.

    Raises:
        PageRangeError: If the interval is lower than 1.

    Returns:
        list[PageRange]: Consecutive ranges, the last one possibly shorter.
    """
    if interval < 1:
        raise PageRangeError(message="Interval must be at least 1", value=str(interval))
    return [
        PageRange(start=start, end=min(start + interval - 1, total_pages))
        for start in range(1, total_pages + 1, interval)
    ]


def all_pages(total_pages: int) -> list[PageRange]:
    """Return one single-page range per page."""
    return interval_ranges(total_pages, 1)
