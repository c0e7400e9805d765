"""
Markdown document store.

Implements the ``exists`` / ``create`` contract used by the transformer on
top of a storage handler (:class:`~cmo_importer.migrators.local.FSHandler`
or :class:`~cmo_importer.migrators.onedrive.OneDriveHandler`).  Documents are
addressed by a logical path and a logical name; the handler receives
``{path}/{name}.md``.
"""

from __future__ import annotations

from typing import Protocol

from cmo_importer.parsers.markdown import html_to_markdown
from cmo_importer.utils.logs import log_message


class StorageHandler(Protocol):
    def exists(self, path: str) -> bool: ...

    def put(self, path: str, content: str) -> None: ...


class DocumentStore(Protocol):
    def exists(self, path: str, name: str) -> bool: ...

    def create(self, path: str, name: str, body: str) -> None: ...


def document_path(path: str, name: str) -> str:
    return f"{path.strip('/')}/{name}.md"


class MarkdownDocumentStore:
    def __init__(self, handler: StorageHandler) -> None:
        self.handler = handler

    def exists(self, path: str, name: str) -> bool:
        return self.handler.exists(document_path(path, name))

    def create(self, path: str, name: str, body: str) -> None:
        target = document_path(path, name)
        self.handler.put(target, html_to_markdown(body))
        log_message(f"Created {target}", level="DEBUG")
