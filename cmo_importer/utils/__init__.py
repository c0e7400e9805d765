"""
Utility helpers used by the importer.

This subpackage exposes levelled logging, structured event reports, the
exception hierarchy and small helpers around urls, filenames, the mapping
table and the url ledger.
"""

from .errors import EVENTS, ConfigurationError, ImporterError, StorageError, report_error, report_ok
from .logs import log_message

__all__ = [
    "EVENTS",
    "ConfigurationError",
    "ImporterError",
    "StorageError",
    "report_error",
    "report_ok",
    "log_message",
]
