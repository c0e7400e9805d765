import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest


@pytest.fixture(autouse=True)
def _reports_in_tmp(tmp_path, monkeypatch):
    # keep log lines and JSONL reports out of the working tree
    monkeypatch.setenv("CMO_IMPORTER_REPORTS", str(tmp_path / "reports"))
