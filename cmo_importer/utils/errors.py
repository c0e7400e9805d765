"""
Exceptions and structured event reports for import runs.

Besides the exception hierarchy used across the package, this module
centralizes the writing of per-URL events.  Each entry is appended to a JSON
Lines file under the reports directory so that the outcome of a batch can be
reviewed or parsed after a run.

``report_error``
    Record a failure for a URL.  An optional exception can be supplied and
    will be serialized to the log.

``report_ok``
    Record a successful step for a URL.  Additional key/value information can
    be attached to the entry via the ``extra`` parameter.

The ``EVENTS`` dictionary maps event codes to human readable messages.  Codes
not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from .logs import log_message, report_dir


class ImporterError(Exception):
    """Base class for importer failures."""


class ConfigurationError(ImporterError):
    """Raised when a run is missing its url or its store credentials."""


class StorageError(ImporterError):
    """Raised when a remote store answers with an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


EVENTS: Dict[str, str] = {
    "IMPORTED": "Article imported successfully",
    "ALREADY_IMPORTED": "Article already present in the ledger",
    "EMPTY_PAGE": "Fetched page was empty",
    "REDIRECT_CREATED": "Redirect registered",
    "REDIRECT_FAILED": "Failed to register redirect",
    "IMPORT_FAILED": "Article import failed",
}


def _write_jsonl(filename: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``filename``."""
    directory = report_dir()
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, filename), "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def report_error(code: str, url: str, exc: Optional[BaseException] = None) -> None:
    """Log a failure event for ``url``.

    Parameters
    ----------
    code:
        A key identifying the type of failure.  If ``code`` is present in
        :data:`EVENTS` its value will be used as the message.
    url:
        The source article url the event belongs to.
    exc:
        Optional exception instance that triggered the failure.  Its string
        representation is included in the entry.
    """
    message = EVENTS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, "url": url}
    if exc is not None:
        entry["error"] = str(exc)
    log_message(f"{message} - {url}", level="ERROR")
    _write_jsonl("errors.jsonl", entry)


def report_ok(code: str, url: str, extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``url``.

    ``extra`` is merged into the JSON entry when given.
    """
    message = EVENTS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, "url": url}
    if extra:
        entry.update(extra)
    log_message(f"{message} - {url}")
    _write_jsonl("success.jsonl", entry)
