"""
Fetching of the legacy article pages.

:class:`PageFetcher` returns the raw html of a page, or ``""`` when the
server does not answer with a 200.  An optional cache directory keeps a copy
of every fetched page so that re-runs do not hit the legacy site again.
"""

from __future__ import annotations

import hashlib
import os
from typing import Optional

import requests

from cmo_importer.utils.logs import log_message

PAGE_TIMEOUT = 60


class PageFetcher:
    def __init__(self, cache_dir: Optional[str] = None, session: Optional[requests.Session] = None) -> None:
        self.cache_dir = cache_dir
        self.session = session or requests.Session()

    def _cache_path(self, url: str) -> Optional[str]:
        if not self.cache_dir:
            return None
        key = hashlib.sha1(url.encode("utf-8")).hexdigest()
        return os.path.join(self.cache_dir, f"{key}.html")

    def fetch(self, url: str) -> str:
        cache_path = self._cache_path(url)
        if cache_path and os.path.exists(cache_path):
            with open(cache_path, "r", encoding="utf-8") as f:
                return f.read()

        resp = self.session.get(url, timeout=PAGE_TIMEOUT)
        if resp.status_code != 200:
            log_message(f"Unable to fetch {url}: status {resp.status_code}", level="WARNING")
            return ""

        html = resp.text or ""
        if cache_path and html:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                f.write(html)
        return html
