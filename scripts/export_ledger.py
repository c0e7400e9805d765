#!/usr/bin/env python3
"""
Snapshot the url ledger into a local DuckDB database.

Usage:
  python scripts/export_ledger.py --db data/imports.duckdb [--config config/importer_config.json]
"""

from __future__ import annotations

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from cmo_importer.config import CONFIG_FILE, StoreCredentials, load_config  # noqa: E402
from cmo_importer.migrators.local import LocalExcelHandler  # noqa: E402
from cmo_importer.migrators.onedrive import ExcelHandler, GraphClient  # noqa: E402
from cmo_importer.utils.ledger import export_ledger  # noqa: E402


def excel_handler_from_config(config: dict):
    local_workbooks = config.get("import", {}).get("local_workbooks")
    if local_workbooks:
        return LocalExcelHandler(local_workbooks)
    creds = StoreCredentials(**config.get("onedrive", {}))
    if not creds.has_onedrive:
        raise SystemExit("No local workbooks directory and no OneDrive credentials configured.")
    client = GraphClient(
        client_id=creds.client_id,
        client_secret=creds.client_secret,
        refresh_token=creds.refresh_token,
    )
    return ExcelHandler(client, creds.admin_link)


def main() -> None:
    parser = argparse.ArgumentParser(description="Export the url ledger to DuckDB")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path of the JSON configuration file")
    parser.add_argument("--db", default="data/imports.duckdb", help="DuckDB database file")
    parser.add_argument("--table", default="imports", help="Target table name")
    args = parser.parse_args()

    os.makedirs(os.path.dirname(args.db) or ".", exist_ok=True)
    count = export_ledger(excel_handler_from_config(load_config(args.config)), args.db, args.table)
    print(f"Exported {count} ledger rows to {args.db} ({args.table}).")


if __name__ == "__main__":
    main()
