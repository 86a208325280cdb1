from __future__ import annotations

from rfcview.models.datatracker import DatatrackerDocument, DatatrackerSearchPage
from rfcview.models.document import (
    CachedDocument,
    CacheEntry,
    CacheInfo,
    CacheMetadata,
    DocumentFormat,
    DocumentId,
    DocumentKind,
    FetchedDocument,
)
from rfcview.models.search import (
    SearchHit,
    SearchKind,
    SearchPage,
    SearchQuery,
    SearchResponse,
    SearchResult,
)

__all__ = [
    # documents
    "DocumentKind",
    "DocumentId",
    "DocumentFormat",
    "FetchedDocument",
    # cache
    "CacheEntry",
    "CacheMetadata",
    "CachedDocument",
    "CacheInfo",
    # search
    "SearchKind",
    "SearchQuery",
    "SearchHit",
    "SearchPage",
    "SearchResult",
    "SearchResponse",
    # datatracker
    "DatatrackerDocument",
    "DatatrackerSearchPage",
]
