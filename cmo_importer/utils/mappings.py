"""
Loading of the topic/product mapping table.

The table lives in the admin ``mappings.xlsx`` workbook, one worksheet per
language.  Each row holds the legacy label, the comma separated canonical
topics and the comma separated canonical products.
"""

from __future__ import annotations

from typing import Dict, List

from cmo_importer.models.taxonomy import LanguageMappings, TaxonomyMappings
from .urls import LANGUAGES

MAPPINGS_XLSX = "/importer/cmo/mappings.xlsx"
MAPPINGS_XLSX_WORKSHEET = " - Migration"
MAPPINGS_XLSX_TABLE = "_map"


def _split_labels(value) -> List[str]:
    return [label.strip() for label in str(value or "").split(",") if label.strip()]


def load_mappings(excel_handler) -> TaxonomyMappings:
    languages: Dict[str, LanguageMappings] = {}
    for lang in LANGUAGES:
        categories: Dict[str, List[str]] = {}
        products: Dict[str, List[str]] = {}
        rows = excel_handler.get_rows(
            MAPPINGS_XLSX, f"{lang}{MAPPINGS_XLSX_WORKSHEET}", f"{lang}{MAPPINGS_XLSX_TABLE}"
        )
        for row in rows:
            if not row or len(row) < 2 or not str(row[0] or "").strip():
                continue
            old_topic = str(row[0]).strip().lower()
            categories[old_topic] = _split_labels(row[1])
            if len(row) > 2:
                products[old_topic] = _split_labels(row[2])
        languages[lang] = LanguageMappings(categories=categories, products=products)
    return TaxonomyMappings(languages=languages)
