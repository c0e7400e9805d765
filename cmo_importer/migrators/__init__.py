"""
Remote collaborators used by the importer.

This subpackage provides the document stores (OneDrive or a local
directory), the workbook handlers backing the url ledger and the taxonomy
mapping table, and the Fastly redirect registrar.  Rate limiting and retries
of the HTTP clients live in :mod:`cmo_importer.migrators.http`.
"""

from .documents import DocumentStore, MarkdownDocumentStore
from .fastly import FastlyHandler
from .local import FSHandler, LocalExcelHandler
from .onedrive import ExcelHandler, GraphClient, OneDriveHandler

__all__ = [
    "DocumentStore",
    "MarkdownDocumentStore",
    "FastlyHandler",
    "FSHandler",
    "LocalExcelHandler",
    "ExcelHandler",
    "GraphClient",
    "OneDriveHandler",
]
