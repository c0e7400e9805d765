"""In-memory stand-ins for the importer collaborators."""

from typing import Dict, List, Optional, Tuple


class FakeDocumentStore:
    def __init__(self, existing=()):
        self.existing = set(existing)
        self.created: Dict[Tuple[str, str], str] = {}

    def exists(self, path, name):
        return (path, name) in self.existing or (path, name) in self.created

    def create(self, path, name, body):
        self.created[(path, name)] = body


class FakeExcelHandler:
    def __init__(self, rows: Optional[Dict[str, List[list]]] = None):
        self.rows = rows or {}
        self.added: List[tuple] = []

    def get_rows(self, workbook, worksheet, table):
        return [list(r) for r in self.rows.get(worksheet, [])]

    def add_row(self, workbook, worksheet, table, values):
        self.added.append((workbook, worksheet, table, values))
        self.rows.setdefault(worksheet, []).extend(values)


class FakeFetcher:
    def __init__(self, html="", error=None):
        self.html = html
        self.error = error
        self.calls: List[str] = []

    def fetch(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


class FakeRegistrar:
    def __init__(self):
        self.entries: List[tuple] = []

    def register(self, source_url, target_date):
        self.entries.append((source_url, target_date))


def no_network(url):
    raise AssertionError(f"unexpected embed fetch for {url}")
