"""
Entry point for the CMO article importer.

Usage::

    python main.py https://cmo.adobe.com/articles/2016/6/think-and-act-like-the-underdog-fast
    python main.py --urls-file urls.txt --no-force --no-check-existing
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List

import requests

from cmo_importer.config import CONFIG_FILE, ImportOptions, load_config
from cmo_importer.importer import CMOImporter, build_collaborators
from cmo_importer.models.result import ImportResult
from cmo_importer.utils.errors import ConfigurationError, ImporterError, report_error
from cmo_importer.utils.logs import log_message
from cmo_importer.utils.mappings import load_mappings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import CMO articles into the markdown content store.")
    parser.add_argument("urls", nargs="*", help="Article urls to import")
    parser.add_argument("--urls-file", help="File with one article url per line")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path of the JSON configuration file")
    parser.add_argument("--no-force", action="store_true", help="Skip urls already present in the ledger")
    parser.add_argument(
        "--no-check-existing",
        action="store_true",
        help="Overwrite author and topic pages even when they already exist",
    )
    parser.add_argument("--no-ledger", action="store_true", help="Do not append rows to the url ledger")
    return parser.parse_args(argv)


def read_urls(args: argparse.Namespace) -> List[str]:
    urls = list(args.urls)
    if args.urls_file:
        with open(args.urls_file, "r", encoding="utf-8") as f:
            urls.extend(line.strip() for line in f if line.strip() and not line.startswith("#"))
    return urls


def main(argv=None) -> int:
    args = parse_args(argv)
    config = load_config(args.config)
    urls = read_urls(args)
    if not urls:
        log_message("No url given.", level="ERROR")
        return 2

    flags = {
        "force": not args.no_force,
        "check_if_related_exists": not args.no_check_existing,
        "update_ledger": not args.no_ledger,
    }
    try:
        first = ImportOptions.from_config(urls[0], config, **flags)
    except ConfigurationError as e:
        log_message(str(e), level="ERROR")
        return 2

    try:
        document_store, excel_handler = build_collaborators(first)
        # the mapping table is loaded once for the whole batch
        mappings = load_mappings(excel_handler)
    except (ImporterError, requests.RequestException) as e:
        for url in urls:
            report_error("IMPORT_FAILED", url, e)
            result = ImportResult(
                status="failed", status_code=500, body=f"Error for {url} import: {e}", url=url, error=str(e)
            )
            print(json.dumps(result.model_dump(), ensure_ascii=False))
        return 1

    failures = 0
    for url in urls:
        try:
            options = ImportOptions.from_config(url, config, mappings=mappings, **flags)
        except ConfigurationError as e:
            log_message(f"{url}: {e}", level="ERROR")
            failures += 1
            continue
        result = CMOImporter(options, document_store=document_store, excel_handler=excel_handler).run()
        print(json.dumps(result.model_dump(), ensure_ascii=False))
        if not result.ok:
            failures += 1

    log_message(f"Import finished: {len(urls) - failures} ok, {failures} failed.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
