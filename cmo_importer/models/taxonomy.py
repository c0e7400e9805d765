from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_key(value: str) -> str:
    return (value or "").strip().lower()


class LanguageMappings(BaseModel):
    """Legacy label → canonical labels for one language."""

    model_config = ConfigDict(frozen=True)

    categories: Dict[str, List[str]] = Field(default_factory=dict)
    products: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("categories", "products", mode="before")
    @classmethod
    def _clean_table(cls, v: Optional[Dict[str, List[str]]]):
        if not v:
            return {}
        cleaned: Dict[str, List[str]] = {}
        for key, labels in v.items():
            values = [label.strip() for label in labels or [] if label and label.strip()]
            if values:
                cleaned[_normalize_key(key)] = values
        return cleaned

    def category_for(self, label: str) -> Optional[str]:
        values = self.categories.get(_normalize_key(label))
        return values[0] if values else None

    def product_for(self, label: str) -> Optional[str]:
        values = self.products.get(_normalize_key(label))
        return values[0] if values else None


class TaxonomyMappings(BaseModel):
    model_config = ConfigDict(frozen=True)

    languages: Dict[str, LanguageMappings] = Field(default_factory=dict)

    def for_language(self, language: str) -> Optional[LanguageMappings]:
        return self.languages.get(language)
