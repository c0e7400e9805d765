"""
Configuration of import runs.

:func:`load_config` reads the optional JSON configuration file and fills the
missing credentials from the environment.  :class:`ImportOptions` is the
immutable set of parameters of one run; it validates that a url and a usable
set of store credentials are present.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cmo_importer.models.taxonomy import TaxonomyMappings
from cmo_importer.utils.errors import ConfigurationError

CONFIG_FILE = os.path.join("config", "importer_config.json")


def load_config(config_file: Optional[str] = CONFIG_FILE) -> Dict[str, Any]:
    config: Dict[str, Any] = {}
    if config_file and os.path.exists(config_file):
        with open(config_file, "r", encoding="utf-8") as f:
            config = json.load(f)

    # Ensure essential keys exist to prevent KeyErrors
    config.setdefault("onedrive", {})
    config["onedrive"].setdefault("client_id", os.getenv("AZURE_ONEDRIVE_CLIENT_ID", ""))
    config["onedrive"].setdefault("client_secret", os.getenv("AZURE_ONEDRIVE_CLIENT_SECRET", ""))
    config["onedrive"].setdefault("refresh_token", os.getenv("AZURE_ONEDRIVE_REFRESH_TOKEN", ""))
    config["onedrive"].setdefault("content_link", os.getenv("AZURE_ONEDRIVE_CONTENT_LINK", ""))
    config["onedrive"].setdefault("admin_link", os.getenv("AZURE_ONEDRIVE_ADMIN_LINK", ""))

    config.setdefault("fastly", {})
    config["fastly"].setdefault("service_id", os.getenv("FASTLY_SERVICE_ID", ""))
    config["fastly"].setdefault("token", os.getenv("FASTLY_TOKEN", ""))

    config.setdefault("import", {})
    config["import"].setdefault("local_storage", os.getenv("CMO_IMPORTER_LOCAL_STORAGE", ""))
    config["import"].setdefault("local_workbooks", os.getenv("CMO_IMPORTER_LOCAL_WORKBOOKS", ""))
    config["import"].setdefault("cache", os.getenv("CMO_IMPORTER_CACHE", ""))
    return config


class StoreCredentials(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""
    content_link: str = ""
    admin_link: str = ""
    local_storage: str = ""
    local_workbooks: str = ""

    @property
    def has_onedrive(self) -> bool:
        return all((self.client_id, self.client_secret, self.refresh_token, self.content_link, self.admin_link))

    @property
    def has_local(self) -> bool:
        return bool(self.local_storage and self.local_workbooks)


class FastlyCredentials(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    service_id: str = ""
    token: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.token)


class ImportOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    force: bool = True
    check_if_related_exists: bool = True
    update_ledger: bool = True
    store: StoreCredentials
    fastly: Optional[FastlyCredentials] = None
    mappings: Optional[TaxonomyMappings] = None
    cache_dir: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _require_url(cls, v: Optional[str]):
        if not v or not str(v).strip():
            raise ValueError("Missing url parameter")
        return str(v).strip()

    @field_validator("store")
    @classmethod
    def _require_store(cls, v: StoreCredentials):
        if not (v.has_onedrive or v.has_local):
            raise ValueError("Missing store credentials (OneDrive or local storage and workbooks)")
        return v

    @classmethod
    def build(cls, **params: Any) -> "ImportOptions":
        """Validate ``params``, raising :class:`ConfigurationError` on failure."""
        try:
            return cls(**params)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ConfigurationError(messages) from e

    @classmethod
    def from_config(cls, url: Optional[str], config: Dict[str, Any], **flags: Any) -> "ImportOptions":
        onedrive = config.get("onedrive", {})
        settings = config.get("import", {})
        store = StoreCredentials(
            client_id=onedrive.get("client_id") or "",
            client_secret=onedrive.get("client_secret") or "",
            refresh_token=onedrive.get("refresh_token") or "",
            content_link=onedrive.get("content_link") or "",
            admin_link=onedrive.get("admin_link") or "",
            local_storage=settings.get("local_storage") or "",
            local_workbooks=settings.get("local_workbooks") or "",
        )
        fastly = FastlyCredentials(**{k: v or "" for k, v in config.get("fastly", {}).items()})
        return cls.build(
            url=url,
            store=store,
            fastly=fastly,
            cache_dir=settings.get("cache") or None,
            **flags,
        )
