"""Fetch policy: decide between the cache and the network for one document.

Every path that reaches the network ends in a single ``CacheStore.put``; the
store is never touched before the fetch, conversion and title lookup have all
succeeded, so a failure anywhere leaves the cache exactly as it was.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from rfcview.cache import title_from_content
from rfcview.errors import RfcError
from rfcview.html import html_to_text
from rfcview.models.document import CacheEntry, DocumentFormat
from rfcview.resolver import VersionResolver

if TYPE_CHECKING:
    from pathlib import Path

    from rfcview.cache import CacheStore
    from rfcview.models.document import DocumentId
    from rfcview.protocols import DocumentSource, Registry

log = structlog.get_logger()


class FetchMode(StrEnum):
    USE_CACHE_OR_FETCH = "use-cache"
    REFRESH = "refresh"
    FETCH_ONLY = "fetch-only"


@dataclass(frozen=True)
class FetchOutcome:
    doc_id: DocumentId  # resolved
    entry: CacheEntry
    path: Path
    from_cache: bool
    open_after: bool


class DocumentService:
    def __init__(
        self,
        store: CacheStore,
        source: DocumentSource,
        registry: Registry,
        resolver: VersionResolver | None = None,
        convert: Callable[[str], str] = html_to_text,
    ) -> None:
        self._store = store
        self._source = source
        self._registry = registry
        self._resolver = resolver or VersionResolver(registry)
        self._convert = convert

    async def get(
        self, doc_id: DocumentId, mode: FetchMode = FetchMode.USE_CACHE_OR_FETCH
    ) -> FetchOutcome:
        """Return the document's content according to ``mode``.

        Unversioned drafts are resolved first, and the result is always cached
        under the resolved id.
        """
        resolved = await self._resolver.resolve(doc_id)
        open_after = mode is not FetchMode.FETCH_ONLY

        if mode is FetchMode.USE_CACHE_OR_FETCH:
            cached = self._store.get(resolved)
            if cached is not None:
                log.info("cache_hit", doc=resolved.cache_key)
                return FetchOutcome(
                    doc_id=resolved,
                    entry=cached,
                    path=self._store.content_path(resolved),
                    from_cache=True,
                    open_after=open_after,
                )
            log.info("cache_miss", doc=resolved.cache_key)

        entry = await self._fetch(resolved)
        self._store.put(resolved, entry)
        return FetchOutcome(
            doc_id=resolved,
            entry=entry,
            path=self._store.content_path(resolved),
            from_cache=False,
            open_after=open_after,
        )

    async def _fetch(self, doc_id: DocumentId) -> CacheEntry:
        fetched = await self._source.fetch_document(doc_id)
        if fetched.format is DocumentFormat.HTML:
            log.info("converting_html", doc=doc_id.cache_key, url=fetched.url)
            content = self._convert(fetched.body)
        else:
            content = fetched.body

        title = await self._title(doc_id) or title_from_content(content)
        return CacheEntry(content=content, title=title, fetched_at=datetime.now(UTC))

    async def _title(self, doc_id: DocumentId) -> str | None:
        # The document itself is already in hand; a missing title is not fatal.
        try:
            return await self._registry.title_for(doc_id)
        except RfcError as exc:
            log.warning("metadata_fetch_failed", doc=doc_id.cache_key, error=exc.message)
            return None
