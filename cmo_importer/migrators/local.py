"""
Local filesystem counterparts of the OneDrive collaborators.

:class:`FSHandler` writes documents below a target directory and
:class:`LocalExcelHandler` reads and appends rows of ``.xlsx`` workbooks with
pandas.  Local workbooks keep one table per worksheet: the first row holds
the headers and every following row is data, so the ``table`` argument is
accepted for interface parity only.
"""

from __future__ import annotations

import os
from typing import Any, List

import pandas as pd

from cmo_importer.utils.errors import StorageError


class FSHandler:
    """Document storage inside the local directory ``target``."""

    def __init__(self, target: str) -> None:
        self.target = target

    def _full_path(self, path: str) -> str:
        return os.path.join(self.target, path.lstrip("/"))

    def exists(self, path: str) -> bool:
        return os.path.exists(self._full_path(path))

    def put(self, path: str, content: str) -> None:
        full_path = self._full_path(path)
        os.makedirs(os.path.dirname(full_path) or ".", exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(content)


class LocalExcelHandler:
    """Workbook rows stored in ``.xlsx`` files below ``directory``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def workbook_path(self, workbook: str) -> str:
        return os.path.join(self.directory, workbook.lstrip("/"))

    def _read_sheet(self, workbook: str, worksheet: str) -> pd.DataFrame:
        path = self.workbook_path(workbook)
        if not os.path.exists(path):
            raise StorageError(f"Workbook not found: {path}")
        try:
            df = pd.read_excel(path, sheet_name=worksheet, dtype=str, engine="openpyxl")
        except ValueError as e:
            # pandas raises ValueError for an unknown sheet name
            raise StorageError(f"Worksheet '{worksheet}' not found in {path}: {e}") from e
        return df.fillna("")

    def get_rows(self, workbook: str, worksheet: str, table: str) -> List[List[Any]]:
        df = self._read_sheet(workbook, worksheet)
        return df.values.tolist()

    def add_row(self, workbook: str, worksheet: str, table: str, values: List[List[Any]]) -> None:
        df = self._read_sheet(workbook, worksheet)
        width = len(df.columns)
        padded = [list(v)[:width] + [""] * (width - len(v)) for v in values]
        df = pd.concat([df, pd.DataFrame(padded, columns=df.columns)], ignore_index=True)
        with pd.ExcelWriter(
            self.workbook_path(workbook), engine="openpyxl", mode="a", if_sheet_exists="replace"
        ) as writer:
            df.to_excel(writer, sheet_name=worksheet, index=False)


def create_workbook(path: str, sheets: dict) -> bool:
    """
    Create an ``.xlsx`` workbook with one empty sheet per ``{name: columns}``
    entry.  Returns ``False`` without touching anything when ``path`` exists.
    """
    if os.path.exists(path):
        return False
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, columns in sheets.items():
            pd.DataFrame(columns=columns).to_excel(writer, sheet_name=name, index=False)
    return True
