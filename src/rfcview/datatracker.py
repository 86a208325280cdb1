"""Client for the IETF Datatracker JSON API.

Two endpoints are used:

* ``/api/v1/doc/document/<name>/`` for a single document's title and latest
  revision (``rev``), which drives draft version resolution.
* ``/api/v1/doc/document/?title__icontains=...&type=...`` for keyword search.
  The endpoint also returns slides, reviews, charters and so on; anything not
  named ``rfc...`` or ``draft-...`` is dropped here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from rfcview.config import DatatrackerSettings
from rfcview.errors import ErrorCode, RfcError
from rfcview.identifiers import parse_identifier
from rfcview.models.datatracker import DatatrackerDocument, DatatrackerSearchPage
from rfcview.models.document import DocumentId, DocumentKind
from rfcview.models.search import SearchHit, SearchPage

if TYPE_CHECKING:
    from rfcview.fetcher import Fetcher

log = structlog.get_logger()

# The search endpoint mixes in non-RFC/draft documents that are filtered out
# locally, so more rows are requested than will be shown.
_OVERFETCH = 5


class DatatrackerClient:
    """Registry lookup and search backed by datatracker.ietf.org."""

    def __init__(self, fetcher: Fetcher, settings: DatatrackerSettings | None = None) -> None:
        self._fetcher = fetcher
        self._settings = settings or DatatrackerSettings()
        # name -> record, kept for the lifetime of the client
        self._records: dict[str, DatatrackerDocument] = {}

    @property
    def _api(self) -> str:
        return f"{self._settings.base_url.rstrip('/')}/api/v1/doc/document"

    async def lookup(self, name: str) -> DatatrackerDocument:
        """Fetch the registry record for a document name (``rfc9000``, ``draft-...``).

        Records are kept for the lifetime of the client; failures are not.

        Raises:
            RfcError: ``DOCUMENT_NOT_FOUND`` if the registry has no such name,
                ``FETCH_FAILED`` for transport errors or an unreadable reply.
        """
        if name in self._records:
            return self._records[name]
        url = f"{self._api}/{name}/"
        body = await self._fetcher.fetch(url, params={"format": "json"})
        try:
            record = DatatrackerDocument.model_validate_json(body)
        except ValidationError as exc:
            raise RfcError(
                ErrorCode.FETCH_FAILED, f"Unexpected Datatracker response for {name}"
            ) from exc
        self._records[name] = record
        return record

    async def title_for(self, doc_id: DocumentId) -> str | None:
        """Registry title of ``doc_id``, or ``None`` if the registry has none."""
        name = f"rfc{doc_id.number}" if doc_id.kind is DocumentKind.RFC else doc_id.name
        record = await self.lookup(name or "")
        return record.title.strip() or None

    async def search(self, query: str, kind: DocumentKind, limit: int) -> SearchPage:
        """Title keyword search restricted to one document kind.

        Hits keep the registry's order and are capped at ``limit``. The page's
        ``total_count`` and ``has_next`` come from the response's ``meta``.
        """
        params = {
            "title__icontains": query,
            "type": kind.value,
            "limit": str(limit * _OVERFETCH),
            "format": "json",
        }
        body = await self._fetcher.fetch(f"{self._api}/", params=params)
        try:
            page = DatatrackerSearchPage.model_validate_json(body)
        except ValidationError as exc:
            raise RfcError(
                ErrorCode.FETCH_FAILED, f"Unexpected Datatracker search response for {query!r}"
            ) from exc

        hits: list[SearchHit] = []
        for obj in page.objects:
            hit = _to_hit(obj)
            if hit is None or hit.doc_id.kind is not kind:
                continue
            hits.append(hit)
            if len(hits) >= limit:
                break
        log.debug(
            "datatracker_search",
            query=query,
            kind=kind.value,
            returned=len(hits),
            total=page.meta.total_count,
        )
        return SearchPage(
            hits=hits,
            total_count=page.meta.total_count,
            has_next=page.meta.next is not None,
        )


def _to_hit(obj: DatatrackerDocument) -> SearchHit | None:
    name = obj.name.strip().lower()
    if not (name.startswith("rfc") or name.startswith("draft-")):
        return None
    try:
        if name.startswith("draft-"):
            # Registry names never carry the revision; it comes from "rev".
            doc_id = DocumentId.draft(name, obj.latest_version)
        else:
            doc_id = parse_identifier(name)
    except (RfcError, ValidationError):
        log.debug("datatracker_skip_name", name=obj.name)
        return None
    return SearchHit(doc_id=doc_id, title=obj.title.strip())
