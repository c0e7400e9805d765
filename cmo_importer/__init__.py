"""
Top-level package for the CMO article importer.

This package bundles all components required to pull a published article
from the legacy CMO site, rewrite its markup into the normalized document
structure, classify it against the topic/product taxonomy and persist the
result (plus author and topic pages) as markdown documents.  Modules are
split into subpackages:

* :mod:`cmo_importer.extractors` – page fetching, author and taxonomy extraction
* :mod:`cmo_importer.parsers` – HTML rewrites, embed resolution, markdown rendering
* :mod:`cmo_importer.migrators` – document stores, workbooks and redirects
* :mod:`cmo_importer.models` – pydantic models shared across layers
* :mod:`cmo_importer.utils` – logging, reports, errors and small helpers

Orchestration of a single run lives in :mod:`cmo_importer.importer`.
"""

__version__ = "1.0.0"
