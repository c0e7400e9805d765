"""
Microsoft Graph backed collaborators.

The content store and the admin workbooks (url ledger, taxonomy mappings)
live in OneDrive folders published through sharing links.  This module
implements:

* :class:`GraphClient` – refresh-token authentication and request plumbing
* :class:`OneDriveHandler` – document storage rooted at the content link
* :class:`ExcelHandler` – workbook table rows rooted at the admin link
"""

from __future__ import annotations

import base64
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from cmo_importer.utils.errors import StorageError
from .http import RateLimiter, with_retries

GRAPH_BASE = "https://graph.microsoft.com/v1.0"
TOKEN_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
SCOPES = "offline_access Files.ReadWrite.All"

_limiter = RateLimiter(600)


def encode_sharing_link(link: str) -> str:
    """Encode a sharing url into the ``u!`` share id Graph expects."""
    encoded = base64.urlsafe_b64encode(link.encode("utf-8")).decode("ascii")
    return "u!" + encoded.rstrip("=")


def _quote_path(path: str) -> str:
    return quote(path.strip("/"), safe="/")


class GraphClient:
    """
    Thin Graph API client.  Access tokens are obtained from the refresh
    token on first use and renewed shortly before they expire.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.session = session or requests.Session()
        self.timeout = timeout
        self._access_token: Optional[str] = None
        self._expires_at = 0.0
        self._roots: Dict[str, Dict[str, str]] = {}

    def _token(self) -> str:
        if self._access_token and time.time() < self._expires_at - 60:
            return self._access_token
        resp = self.session.post(
            TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": self.refresh_token,
                "grant_type": "refresh_token",
                "scope": SCOPES,
            },
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise StorageError(f"Unable to refresh OneDrive access token: {resp.text}", resp.status_code)
        payload = resp.json()
        self._access_token = payload["access_token"]
        self._expires_at = time.time() + float(payload.get("expires_in", 3600))
        # Refresh tokens are rotated by the identity platform.
        self.refresh_token = payload.get("refresh_token", self.refresh_token)
        return self._access_token

    def request(self, method: str, url: str, *, ok_statuses: tuple = (), **kwargs: Any) -> requests.Response:
        extra_headers = kwargs.pop("headers", {})

        def do_request() -> requests.Response:
            _limiter.wait()
            headers = {**extra_headers, "Authorization": f"Bearer {self._token()}"}
            return self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)

        return with_retries(do_request, ok_statuses=ok_statuses)

    def root(self, sharing_link: str) -> Dict[str, str]:
        """Resolve (and memoize) the drive and item ids behind a sharing link."""
        if sharing_link not in self._roots:
            resp = self.request("GET", f"{GRAPH_BASE}/shares/{encode_sharing_link(sharing_link)}/driveItem")
            item = resp.json()
            self._roots[sharing_link] = {
                "drive_id": item["parentReference"]["driveId"],
                "item_id": item["id"],
            }
        return self._roots[sharing_link]

    def item_url(self, sharing_link: str, path: str) -> str:
        root = self.root(sharing_link)
        return f"{GRAPH_BASE}/drives/{root['drive_id']}/items/{root['item_id']}:/{_quote_path(path)}:"


class OneDriveHandler:
    """Document storage inside the folder published by ``sharing_link``."""

    def __init__(self, client: GraphClient, sharing_link: str) -> None:
        self.client = client
        self.sharing_link = sharing_link

    def exists(self, path: str) -> bool:
        resp = self.client.request("GET", self.client.item_url(self.sharing_link, path), ok_statuses=(404,))
        return resp.status_code != 404

    def put(self, path: str, content: str) -> None:
        url = self.client.item_url(self.sharing_link, path) + "/content"
        self.client.request(
            "PUT",
            url,
            data=content.encode("utf-8"),
            headers={"Content-Type": "text/markdown; charset=utf-8"},
        )


class ExcelHandler:
    """Workbook table rows inside the folder published by ``sharing_link``."""

    def __init__(self, client: GraphClient, sharing_link: str) -> None:
        self.client = client
        self.sharing_link = sharing_link

    def _rows_url(self, workbook: str, worksheet: str, table: str) -> str:
        base = self.client.item_url(self.sharing_link, workbook)
        return (
            f"{base}/workbook/worksheets/{quote(worksheet, safe='')}"
            f"/tables/{quote(table, safe='')}/rows"
        )

    def get_rows(self, workbook: str, worksheet: str, table: str) -> List[List[Any]]:
        """
        Return the data rows of ``table``.  Graph wraps each row as
        ``{"values": [[...]]}``; the inner cell list is returned per row.
        """
        resp = self.client.request("GET", self._rows_url(workbook, worksheet, table))
        rows: List[List[Any]] = []
        for row in resp.json().get("value", []):
            values = row.get("values") or []
            if values:
                rows.append(list(values[0]))
        return rows

    def add_row(self, workbook: str, worksheet: str, table: str, values: List[List[Any]]) -> None:
        self.client.request(
            "POST",
            self._rows_url(workbook, worksheet, table),
            json={"values": values},
        )
