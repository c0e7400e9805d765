#!/usr/bin/env python3
"""
Create empty local admin workbooks for offline runs.

Writes ``importer/cmo/urls.xlsx`` (url ledger) and
``importer/cmo/mappings.xlsx`` (one mapping worksheet per language) below the
given directory.  Existing workbooks are left untouched.

Usage:
  python scripts/init_workbooks.py --directory data/workbooks
"""

from __future__ import annotations

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from cmo_importer.migrators.local import LocalExcelHandler, create_workbook  # noqa: E402
from cmo_importer.utils.ledger import LEDGER_COLUMNS, URLS_XLSX, URLS_XLSX_WORKSHEET  # noqa: E402
from cmo_importer.utils.mappings import MAPPINGS_XLSX, MAPPINGS_XLSX_WORKSHEET  # noqa: E402
from cmo_importer.utils.urls import LANGUAGES  # noqa: E402

MAPPING_COLUMNS = ["legacy", "topics", "products"]


def init_workbooks(directory: str) -> list:
    """Create the missing workbooks and return the paths that were written."""
    handler = LocalExcelHandler(directory)
    created = []
    urls_path = handler.workbook_path(URLS_XLSX)
    if create_workbook(urls_path, {URLS_XLSX_WORKSHEET: LEDGER_COLUMNS}):
        created.append(urls_path)
    mappings_path = handler.workbook_path(MAPPINGS_XLSX)
    sheets = {f"{lang}{MAPPINGS_XLSX_WORKSHEET}": MAPPING_COLUMNS for lang in LANGUAGES}
    if create_workbook(mappings_path, sheets):
        created.append(mappings_path)
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Create empty local admin workbooks")
    parser.add_argument("--directory", default="data/workbooks", help="Root of the local workbooks")
    args = parser.parse_args()

    created = init_workbooks(args.directory)
    for path in created:
        print(f"Created {path}")
    if not created:
        print("Workbooks already exist. Nothing to do.")


if __name__ == "__main__":
    main()
