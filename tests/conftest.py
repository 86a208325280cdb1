"""Shared fixtures: in-memory fakes for the remote collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rfcview.cache import CacheStore
from rfcview.documents import DocumentService
from rfcview.errors import ErrorCode, RfcError
from rfcview.models.datatracker import DatatrackerDocument
from rfcview.models.document import DocumentFormat, DocumentKind, FetchedDocument
from rfcview.models.search import SearchPage

if TYPE_CHECKING:
    from pathlib import Path

    from rfcview.models.document import DocumentId
    from rfcview.models.search import SearchHit


class FakeSource:
    """DocumentSource serving canned bodies keyed by cache key."""

    def __init__(self) -> None:
        self.documents: dict[str, FetchedDocument] = {}
        self.calls: list[str] = []

    def add(self, key: str, body: str, fmt: DocumentFormat = DocumentFormat.TEXT) -> None:
        self.documents[key] = FetchedDocument(
            url=f"https://example.test/{key}", body=body, format=fmt
        )

    async def fetch_document(self, doc_id: DocumentId) -> FetchedDocument:
        self.calls.append(doc_id.cache_key)
        try:
            return self.documents[doc_id.cache_key]
        except KeyError:
            raise RfcError(ErrorCode.DOCUMENT_NOT_FOUND, f"Not found: {doc_id}") from None


class FakeRegistry:
    """Registry with canned Datatracker records keyed by name."""

    def __init__(self) -> None:
        self.records: dict[str, DatatrackerDocument] = {}
        self.lookups: list[str] = []

    def add(self, name: str, title: str = "", rev: str = "") -> None:
        self.records[name] = DatatrackerDocument(name=name, title=title, rev=rev)

    async def lookup(self, name: str) -> DatatrackerDocument:
        self.lookups.append(name)
        try:
            return self.records[name]
        except KeyError:
            raise RfcError(ErrorCode.DOCUMENT_NOT_FOUND, f"Not found: {name}") from None

    async def title_for(self, doc_id: DocumentId) -> str | None:
        name = f"rfc{doc_id.number}" if doc_id.kind is DocumentKind.RFC else doc_id.name
        record = await self.lookup(name or "")
        return record.title or None


class FakeSearchBackend:
    """SearchBackend over canned hits; ``totals`` stands in for the registry's count."""

    def __init__(self, hits: dict[DocumentKind, list[SearchHit]] | None = None) -> None:
        self.hits = hits or {}
        self.totals: dict[DocumentKind, int] = {}
        self.next_pages: set[DocumentKind] = set()
        self.calls: list[tuple[str, DocumentKind, int]] = []

    async def search(self, query: str, kind: DocumentKind, limit: int) -> SearchPage:
        self.calls.append((query, kind, limit))
        return SearchPage(
            hits=self.hits.get(kind, [])[:limit],
            total_count=self.totals.get(kind),
            has_next=kind in self.next_pages,
        )


@pytest.fixture()
def store(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "cache")


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture()
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture()
def service(store: CacheStore, source: FakeSource, registry: FakeRegistry) -> DocumentService:
    return DocumentService(store, source, registry)


@pytest.fixture()
def search_backend() -> FakeSearchBackend:
    return FakeSearchBackend()
