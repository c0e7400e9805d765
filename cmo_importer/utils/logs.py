"""
Levelled log lines for the importer.

Messages are printed as ``[LEVEL] message`` and mirrored to a plain text
log file under the reports directory so that a run can be reviewed after the
fact.
"""

from __future__ import annotations

import os

REPORT_DIR_ENV = "CMO_IMPORTER_REPORTS"
DEFAULT_REPORT_DIR = os.path.join("reports", "import")


def report_dir() -> str:
    return os.getenv(REPORT_DIR_ENV) or DEFAULT_REPORT_DIR


def log_message(message: str, level: str = "INFO") -> None:
    print(f"[{level}] {message}")
    directory = report_dir()
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, "import.log"), "a", encoding="utf-8") as f:
        f.write(f"{level}: {message}\n")
