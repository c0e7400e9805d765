import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
pytest.importorskip("markdownify")

from cmo_importer.extractors.page_fetcher import PageFetcher
from cmo_importer.migrators.documents import MarkdownDocumentStore, document_path
from cmo_importer.migrators.local import FSHandler, LocalExcelHandler, create_workbook
from cmo_importer.models.result import LedgerRow
from cmo_importer.parsers.markdown import html_to_markdown
from cmo_importer.utils.errors import StorageError
from cmo_importer.utils.ledger import (
    LEDGER_COLUMNS,
    URLS_XLSX,
    append_ledger_row,
    export_ledger,
    is_already_imported,
)
from cmo_importer.utils.mappings import load_mappings
from fakes import FakeExcelHandler


class _Response:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class _Session:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        return self.responses.pop(0)


def test_markdown_renders_headings_rules_and_embeds():
    html = (
        "<h1>The Title</h1><hr/><p>Some <em>text</em></p>"
        "<hlxembed>https://www.youtube.com/embed/abc</hlxembed><p>after</p>"
    )
    markdown = html_to_markdown(html)
    assert markdown.startswith("# The Title\n")
    assert "\n---\n" in markdown
    assert "Some *text*" in markdown
    assert "\n\nhttps://www.youtube.com/embed/abc\n\n" in markdown
    assert "hlxembed" not in markdown
    assert "\n\n\n" not in markdown
    assert markdown.endswith("after\n")


def test_empty_embed_placeholder_is_dropped():
    assert html_to_markdown("<p>a</p><hlxembed> </hlxembed>") == "a\n"


def test_document_store_writes_markdown_files(tmp_path):
    store = MarkdownDocumentStore(FSHandler(str(tmp_path)))
    assert not store.exists("en/topics", "ai")

    store.create("en/topics", "ai", "<h1>AI</h1>")

    assert store.exists("en/topics", "ai")
    with open(tmp_path / "en" / "topics" / "ai.md", encoding="utf-8") as f:
        assert f.read() == "# AI\n"


def test_document_path_joins_logical_location():
    assert document_path("/en/publish/2016/06/01/", "title") == "en/publish/2016/06/01/title.md"


def test_load_mappings_reads_each_language():
    excel = FakeExcelHandler({
        "en - Migration": [
            ["Marketing", "Digital Marketing, Brand", "Experience Cloud"],
            ["AI", "Artificial Intelligence"],
            ["", "ignored"],
            ["lonely"],
        ],
        "de - Migration": [["Marketing", "Digitales Marketing", ""]],
    })
    mappings = load_mappings(excel)

    en = mappings.for_language("en")
    assert en.category_for("marketing") == "Digital Marketing"
    assert en.categories["marketing"] == ["Digital Marketing", "Brand"]
    assert en.product_for("Marketing") == "Experience Cloud"
    assert en.category_for("AI") == "Artificial Intelligence"
    assert en.product_for("AI") is None
    assert en.category_for("lonely") is None

    de = mappings.for_language("de")
    assert de.category_for("MARKETING") == "Digitales Marketing"
    assert de.product_for("marketing") is None


def test_ledger_export_to_duckdb(tmp_path):
    duckdb = pytest.importorskip("duckdb")
    excel = FakeExcelHandler({"urls": [
        ["2016/06/01", "https://example.com/a", "2020-04-01T10:00:00.000Z"],
        ["N/A", "https://example.com/b", ""],
    ]})
    db_path = str(tmp_path / "ledger.duckdb")

    assert export_ledger(excel, db_path) == 2

    con = duckdb.connect(db_path)
    try:
        rows = con.execute(f"SELECT {', '.join(LEDGER_COLUMNS)} FROM imports ORDER BY url").fetchall()
    finally:
        con.close()
    assert rows[0] == ("2016/06/01", "https://example.com/a", "2020-04-01T10:00:00.000Z")
    assert rows[1][0] == "N/A"


def test_local_workbook_round_trip(tmp_path):
    pytest.importorskip("openpyxl")
    handler = LocalExcelHandler(str(tmp_path))
    path = handler.workbook_path(URLS_XLSX)

    assert create_workbook(path, {"urls": LEDGER_COLUMNS})
    assert not create_workbook(path, {"urls": LEDGER_COLUMNS})
    assert handler.get_rows(URLS_XLSX, "urls", "listOfURLS") == []

    url = "https://example.com/articles/2016/6/a"
    append_ledger_row(handler, LedgerRow(date="2016/06/01", url=url, imported_at=None))
    assert not is_already_imported(handler, url)

    append_ledger_row(handler, LedgerRow(date="2016/06/01", url=url, imported_at="2020-04-01T10:00:00.000Z"))
    assert is_already_imported(handler, url)
    assert len(handler.get_rows(URLS_XLSX, "urls", "listOfURLS")) == 2


def test_local_workbook_missing_is_a_storage_error(tmp_path):
    handler = LocalExcelHandler(str(tmp_path))
    with pytest.raises(StorageError):
        handler.get_rows(URLS_XLSX, "urls", "listOfURLS")


def test_page_fetcher_caches_successful_pages(tmp_path):
    session = _Session([_Response(200, "<p>page</p>")])
    fetcher = PageFetcher(cache_dir=str(tmp_path / "cache"), session=session)

    assert fetcher.fetch("https://example.com/a") == "<p>page</p>"
    assert fetcher.fetch("https://example.com/a") == "<p>page</p>"
    assert session.calls == ["https://example.com/a"]


def test_page_fetcher_returns_empty_page_on_error_status(tmp_path):
    session = _Session([_Response(404, "missing"), _Response(200, "<p>back</p>")])
    fetcher = PageFetcher(cache_dir=str(tmp_path / "cache"), session=session)

    assert fetcher.fetch("https://example.com/a") == ""
    assert fetcher.fetch("https://example.com/a") == "<p>back</p>"
    assert len(session.calls) == 2


def test_init_workbooks_creates_ledger_and_mapping_sheets(tmp_path):
    pytest.importorskip("openpyxl")
    sys.path.insert(0, os.path.join(PROJECT_ROOT, "scripts"))
    from init_workbooks import init_workbooks

    created = init_workbooks(str(tmp_path))
    assert len(created) == 2
    assert init_workbooks(str(tmp_path)) == []

    handler = LocalExcelHandler(str(tmp_path))
    assert handler.get_rows(URLS_XLSX, "urls", "listOfURLS") == []
    assert load_mappings(handler).for_language("de").categories == {}
