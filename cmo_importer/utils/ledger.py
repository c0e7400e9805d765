"""
The url ledger: one row per imported article.

Rows are ``(date, url, imported_at)`` and live in the ``listOfURLS`` table of
the admin ``urls.xlsx`` workbook.  The ledger is append-only; it is used to
skip articles that were already imported and can be exported to a local
DuckDB database for auditing.
"""

from __future__ import annotations

from typing import List

import duckdb
import pandas as pd

from cmo_importer.models.result import LedgerRow

URLS_XLSX = "/importer/cmo/urls.xlsx"
URLS_XLSX_WORKSHEET = "urls"
URLS_XLSX_TABLE = "listOfURLS"
LEDGER_COLUMNS = ["date", "url", "imported_at"]


def ledger_rows(excel_handler) -> List[LedgerRow]:
    rows = excel_handler.get_rows(URLS_XLSX, URLS_XLSX_WORKSHEET, URLS_XLSX_TABLE)
    parsed = (LedgerRow.from_values(list(values)) for values in rows or [])
    return [row for row in parsed if row is not None]


def is_already_imported(excel_handler, url: str) -> bool:
    """A url counts as imported once its ledger row carries an import timestamp."""
    return any(row.url == url and row.imported_at for row in ledger_rows(excel_handler))


def append_ledger_row(excel_handler, row: LedgerRow) -> None:
    excel_handler.add_row(URLS_XLSX, URLS_XLSX_WORKSHEET, URLS_XLSX_TABLE, [row.to_values()])


def export_ledger(excel_handler, db_path: str, table_name: str = "imports") -> int:
    """Replace ``table_name`` in the DuckDB database with the current ledger."""
    df = pd.DataFrame([row.to_values() for row in ledger_rows(excel_handler)], columns=LEDGER_COLUMNS)
    con = duckdb.connect(database=db_path, read_only=False)
    try:
        con.register("ledger_df", df)
        con.execute(f"CREATE OR REPLACE TABLE {table_name} AS SELECT * FROM ledger_df")
        con.unregister("ledger_df")
    finally:
        con.close()
    return len(df)
