"""
High-level orchestration of one article import.

:class:`CMOImporter` ties the collaborators together: it checks the url
ledger, loads the taxonomy mapping table when none was preloaded, fetches
and transforms the page, registers the redirect, and appends the ledger row.
Recoverable page problems are absorbed as warnings by the transformer; any
collaborator failure turns into a failed :class:`ImportResult` echoing the
url and the error message.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from cmo_importer.config import ImportOptions
from cmo_importer.extractors.page_fetcher import PageFetcher
from cmo_importer.migrators.documents import MarkdownDocumentStore
from cmo_importer.migrators.fastly import FastlyHandler
from cmo_importer.migrators.local import FSHandler, LocalExcelHandler
from cmo_importer.migrators.onedrive import ExcelHandler, GraphClient, OneDriveHandler
from cmo_importer.models.result import ImportResult, LedgerRow, utc_now_iso
from cmo_importer.parsers.article import NOT_AVAILABLE, ArticleContext, ArticleTransformer
from cmo_importer.parsers.embeds import fetch_embed_html
from cmo_importer.utils.errors import report_error, report_ok
from cmo_importer.utils.ledger import append_ledger_row, is_already_imported
from cmo_importer.utils.logs import log_message
from cmo_importer.utils.mappings import load_mappings


def build_collaborators(options: ImportOptions):
    """Create ``(document_store, excel_handler)`` for ``options.store``."""
    store = options.store
    client = None
    if store.has_onedrive:
        client = GraphClient(
            client_id=store.client_id,
            client_secret=store.client_secret,
            refresh_token=store.refresh_token,
        )

    if store.local_storage:
        log_message("localStorage provided - using FSHandler")
        handler = FSHandler(store.local_storage)
    else:
        log_message("OneDrive credentials provided - using OneDrive handler")
        handler = OneDriveHandler(client, store.content_link)

    if store.local_workbooks:
        excel_handler = LocalExcelHandler(store.local_workbooks)
    else:
        excel_handler = ExcelHandler(client, store.admin_link)

    return MarkdownDocumentStore(handler), excel_handler


class CMOImporter:
    """
    Runs the import of ``options.url``.  Collaborators default to the ones
    described by ``options`` and can be injected for tests or batch runs.
    """

    def __init__(
        self,
        options: ImportOptions,
        *,
        document_store=None,
        excel_handler=None,
        fetcher=None,
        registrar=None,
        fetch_html: Callable[[str], str] = fetch_embed_html,
    ) -> None:
        self.options = options
        if document_store is None or excel_handler is None:
            default_store, default_excel = build_collaborators(options)
            document_store = document_store or default_store
            excel_handler = excel_handler or default_excel
        self.document_store = document_store
        self.excel_handler = excel_handler
        self.fetcher = fetcher or PageFetcher(cache_dir=options.cache_dir)
        if registrar is None and options.fastly is not None and options.fastly.configured:
            registrar = FastlyHandler(service_id=options.fastly.service_id, token=options.fastly.token)
        self.registrar = registrar
        self.fetch_html = fetch_html

    def run(self) -> ImportResult:
        start_time = time.time()
        url = self.options.url
        try:
            log_message(f"Received url {url}")

            if not self.options.force and is_already_imported(self.excel_handler, url):
                report_ok("ALREADY_IMPORTED", url)
                return ImportResult(status="skipped", body=f"{url} has already been imported.", url=url)

            mappings = self.options.mappings
            if mappings is None:
                mappings = load_mappings(self.excel_handler)

            context = ArticleContext.from_url(url)
            html = self.fetcher.fetch(url)
            transformer = ArticleTransformer(
                self.document_store,
                mappings,
                check_if_related_exists=self.options.check_if_related_exists,
                fetch_html=self.fetch_html,
            )
            date = transformer.transform(context, html)

            if date == NOT_AVAILABLE:
                report_ok("EMPTY_PAGE", url)
            elif self.registrar is not None:
                try:
                    self.registrar.register(url, date)
                except Exception as e:
                    report_error("REDIRECT_FAILED", url, e)
                    raise
                report_ok("REDIRECT_CREATED", url, {"date": date})
            else:
                log_message("Unable to create redirect, check FASTLY_SERVICE_ID and FASTLY_TOKEN", level="WARNING")

            timestamp = utc_now_iso()
            if self.options.update_ledger:
                append_ledger_row(self.excel_handler, LedgerRow(date=date, url=url, imported_at=timestamp))

            log_message(f"Process done in {time.time() - start_time:.2f}s.")
            report_ok("IMPORTED", url, {"date": date})
            return ImportResult(
                status="imported",
                body=f"Successfully imported {url}",
                url=url,
                date=date,
                timestamp=timestamp,
            )
        except Exception as e:
            report_error("IMPORT_FAILED", url, e)
            return ImportResult(
                status="failed",
                status_code=500,
                body=f"Error for {url} import: {e}",
                url=url,
                error=str(e),
            )


def run_import(options: ImportOptions, **collaborators) -> ImportResult:
    return CMOImporter(options, **collaborators).run()
