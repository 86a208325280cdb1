"""Interfaces for the remote collaborators the engine depends on.

The concrete implementations live in ``rfcview.fetcher`` and
``rfcview.datatracker``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rfcview.models.datatracker import DatatrackerDocument
    from rfcview.models.document import DocumentId, DocumentKind, FetchedDocument
    from rfcview.models.search import SearchPage


class DocumentSource(Protocol):
    async def fetch_document(self, doc_id: DocumentId) -> FetchedDocument:
        """Fetch the body of a resolved document."""
        ...


class Registry(Protocol):
    async def lookup(self, name: str) -> DatatrackerDocument:
        """Registry record (title, latest revision) for a document name."""
        ...

    async def title_for(self, doc_id: DocumentId) -> str | None:
        """Structured title of a document, if the registry has one."""
        ...


class SearchBackend(Protocol):
    async def search(self, query: str, kind: DocumentKind, limit: int) -> SearchPage:
        """Keyword search over one document kind, hits relevance ordered."""
        ...
