"""HTTP transport for document bodies and registry JSON.

RFCs come from the RFC Editor and drafts from the IETF draft archive. Plain
text is preferred; when the text rendition does not exist (404) the HTML one
is fetched instead and the caller converts it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from rfcview.config import FetcherSettings
from rfcview.errors import ErrorCode, RfcError
from rfcview.models.document import DocumentFormat, DocumentKind, FetchedDocument

if TYPE_CHECKING:
    from rfcview.models.document import DocumentId

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings | None = None) -> httpx.AsyncClient:
    """Create the shared httpx client used for every remote call of a run."""
    settings = settings or FetcherSettings()
    return httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
    )


class Fetcher:
    """Fetches URLs and document renditions, mapping failures to ``RfcError``."""

    def __init__(self, client: httpx.AsyncClient, settings: FetcherSettings | None = None) -> None:
        self._client = client
        self._settings = settings or FetcherSettings()

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> str:
        """GET ``url`` and return the decoded body.

        Raises:
            RfcError: ``DOCUMENT_NOT_FOUND`` on 404, ``FETCH_FAILED`` on any
                other HTTP status or transport error.
        """
        try:
            response = await self._client.get(url, params=params)
        except httpx.TooManyRedirects as exc:
            raise RfcError(
                ErrorCode.FETCH_FAILED, f"Too many redirects fetching {url}"
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("fetch_transport_error", url=url, error=str(exc))
            raise RfcError(
                ErrorCode.FETCH_FAILED, f"Could not fetch {url}: {exc}", recoverable=True
            ) from exc

        if response.status_code == 404:
            raise RfcError(ErrorCode.DOCUMENT_NOT_FOUND, f"Not found: {url}")
        if not response.is_success:
            raise RfcError(
                ErrorCode.FETCH_FAILED,
                f"Fetching {url} failed: HTTP {response.status_code}",
                recoverable=response.status_code >= 500,
            )
        log.debug("fetch_ok", url=url, status=response.status_code, size=len(response.content))
        return response.text

    def document_urls(self, doc_id: DocumentId) -> list[tuple[str, DocumentFormat]]:
        """Candidate URLs for ``doc_id``, most preferred first."""
        if doc_id.kind is DocumentKind.RFC:
            base = f"{self._settings.rfc_editor_url.rstrip('/')}/{doc_id.cache_key}"
        else:
            base = f"{self._settings.drafts_url.rstrip('/')}/{doc_id.cache_key}"
        return [(f"{base}.{fmt.value}", fmt) for fmt in (DocumentFormat.TEXT, DocumentFormat.HTML)]

    async def fetch_document(self, doc_id: DocumentId) -> FetchedDocument:
        """Fetch the text rendition of ``doc_id``, falling back to HTML.

        Raises:
            RfcError: ``DOCUMENT_NOT_FOUND`` when no rendition exists,
                ``FETCH_FAILED`` for any other failure.
        """
        for url, fmt in self.document_urls(doc_id):
            try:
                body = await self.fetch(url)
            except RfcError as exc:
                if exc.code is ErrorCode.DOCUMENT_NOT_FOUND:
                    log.debug("rendition_missing", doc=str(doc_id), format=fmt.value)
                    continue
                raise
            return FetchedDocument(url=url, body=body, format=fmt)

        raise RfcError(
            ErrorCode.DOCUMENT_NOT_FOUND,
            f"{doc_id.display_name} is not available as text or HTML",
        )
