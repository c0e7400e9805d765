from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LedgerRow(BaseModel):
    """One line of the migration ledger: ``(date, url, imported_at)``."""

    model_config = ConfigDict(frozen=True)

    date: str
    url: str
    imported_at: Optional[str] = None

    @classmethod
    def from_values(cls, values: List[Any]) -> Optional["LedgerRow"]:
        if len(values) < 2:
            return None
        imported_at = values[2] if len(values) > 2 else None
        return cls(
            date=str(values[0] or ""),
            url=str(values[1] or ""),
            imported_at=str(imported_at) if imported_at else None,
        )

    def to_values(self) -> List[str]:
        return [self.date, self.url, self.imported_at or ""]


class ImportResult(BaseModel):
    status: Literal["imported", "skipped", "failed"]
    status_code: int = 200
    body: str
    url: str
    date: Optional[str] = None
    timestamp: str = Field(default_factory=utc_now_iso)
    error: Optional[str] = None

    @property
    def data(self) -> List[str]:
        if self.status != "imported":
            return []
        return [self.date or "", self.url, self.timestamp]

    @property
    def ok(self) -> bool:
        return self.status_code == 200
