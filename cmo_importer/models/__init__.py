"""
Pydantic models shared by the importer layers.
"""

from .result import ImportResult, LedgerRow
from .taxonomy import LanguageMappings, TaxonomyMappings

__all__ = ["ImportResult", "LedgerRow", "LanguageMappings", "TaxonomyMappings"]
