"""
Helpers deriving the per-article context from the source url.

The legacy site encodes the language and the publish date in the article
path, e.g. ``https://cmo.adobe.com/de/articles/2017/11/some-title``.
"""

from __future__ import annotations

import posixpath
import re
from datetime import date
from typing import Optional
from urllib.parse import urlparse

LANGUAGES = ("en", "de")

_NUMERIC = re.compile(r"^\d{1,4}$")


def language_for_url(url: str) -> str:
    return "de" if "/de/" in url else "en"


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def article_name(url: str) -> str:
    """Final path segment of ``url`` without its extension."""
    segment = posixpath.basename(urlparse(url).path.rstrip("/"))
    stem, _ext = posixpath.splitext(segment)
    return stem or segment


def publish_date_from_url(url: str) -> Optional[date]:
    """
    Read the publish date out of the directory part of the url path.

    The first four-digit segment is the year, the following numeric segments
    are the month and the day.  A missing day defaults to the first of the
    month.  Returns ``None`` when no valid date can be read.
    """
    directory = posixpath.dirname(urlparse(url).path)
    numbers = [s for s in directory.split("/") if _NUMERIC.match(s)]
    for i, segment in enumerate(numbers):
        if len(segment) != 4:
            continue
        rest = [int(n) for n in numbers[i + 1:i + 3]]
        month = rest[0] if rest else 1
        day = rest[1] if len(rest) > 1 else 1
        try:
            return date(int(segment), month, day)
        except ValueError:
            return None
    return None


def format_publish_date(value: date) -> str:
    return value.strftime("%Y/%m/%d")
