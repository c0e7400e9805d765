"""
Redirect registration on the Fastly edge.

Imported articles are redirected from their legacy url to the new location
through an edge dictionary.  :class:`FastlyHandler` upserts one dictionary
item per article: the legacy url is the key, the publish date path is the
value.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

import requests

from .http import RateLimiter, with_retries

FASTLY_API = "https://api.fastly.com"
DEFAULT_DICTIONARY = "redirects"

_limiter = RateLimiter(600)


class FastlyHandler:
    def __init__(
        self,
        *,
        service_id: str,
        token: str,
        dictionary: str = DEFAULT_DICTIONARY,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.service_id = service_id
        self.token = token
        self.dictionary = dictionary
        self.session = session or requests.Session()
        self.timeout = timeout
        self._dictionary_id: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        return {"Fastly-Key": self.token, "Accept": "application/json"}

    def _call(self, method: str, path: str, **kwargs) -> requests.Response:
        def do_request() -> requests.Response:
            _limiter.wait()
            return self.session.request(
                method, f"{FASTLY_API}{path}", headers=self._headers(), timeout=self.timeout, **kwargs
            )

        return with_retries(do_request)

    def dictionary_id(self) -> str:
        if self._dictionary_id is None:
            version = self._call("GET", f"/service/{self.service_id}/version/active").json()["number"]
            resp = self._call(
                "GET",
                f"/service/{self.service_id}/version/{version}/dictionary/{quote(self.dictionary, safe='')}",
            )
            self._dictionary_id = resp.json()["id"]
        return self._dictionary_id

    def add_dict_entry(self, key: str, value: str) -> None:
        dictionary_id = self.dictionary_id()
        self._call(
            "PUT",
            f"/service/{self.service_id}/dictionary/{dictionary_id}/item/{quote(key, safe='')}",
            data={"item_value": value},
        )

    def register(self, source_url: str, target_date: str) -> None:
        self.add_dict_entry(source_url, target_date)
