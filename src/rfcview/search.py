"""Keyword search across RFCs and drafts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from rfcview.errors import ErrorCode, RfcError
from rfcview.models.search import SearchKind, SearchQuery, SearchResponse, SearchResult

if TYPE_CHECKING:
    from rfcview.models.search import SearchHit, SearchPage
    from rfcview.protocols import SearchBackend

log = structlog.get_logger()


class SearchService:
    def __init__(self, backend: SearchBackend, default_limit: int = 25) -> None:
        self._backend = backend
        self._default_limit = default_limit

    async def search(
        self,
        query: str,
        kind: SearchKind = SearchKind.RFC_ONLY,
        limit: int | None = None,
    ) -> SearchResponse:
        """Run ``query`` against the backend, one call per requested kind.

        With ``SearchKind.BOTH`` RFC hits come before draft hits; within each
        kind the backend's relevance order is kept. An empty result is a
        normal response, not an error.

        ``total_count`` is the sum of the registry's per-kind totals, or
        ``None`` when any kind did not report one.
        """
        try:
            request = SearchQuery(
                query=query,
                kind=kind,
                limit=self._default_limit if limit is None else limit,
            )
        except ValidationError as exc:
            message = "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())
            raise RfcError(ErrorCode.INVALID_QUERY, f"Invalid search {query!r}: {message}") from exc

        hits: list[SearchHit] = []
        pages: list[SearchPage] = []
        for doc_kind in request.kind.kinds:
            # One extra row tells us whether the limit cut anything off.
            page = await self._backend.search(request.query, doc_kind, request.limit + 1)
            pages.append(page)
            hits.extend(hit for hit in page.hits if hit.doc_id.kind is doc_kind)

        total_count = None
        if all(page.total_count is not None for page in pages):
            total_count = sum(page.total_count or 0 for page in pages)

        results = [
            SearchResult(id=str(hit.doc_id), title=hit.title, kind=hit.doc_id.kind)
            for hit in hits[: request.limit]
        ]
        log.info("search_complete", query=request.query, kind=request.kind.value, hits=len(hits))
        return SearchResponse(
            query=request.query,
            kind=request.kind,
            results=results,
            has_more=len(hits) > request.limit or any(page.has_next for page in pages),
            total_count=total_count,
        )
