"""Unit tests for rfcview.search."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rfcview.errors import ErrorCode, RfcError
from rfcview.models.document import DocumentId, DocumentKind
from rfcview.models.search import SearchHit, SearchKind
from rfcview.search import SearchService

if TYPE_CHECKING:
    from tests.conftest import FakeSearchBackend


def _rfc(n: int, title: str) -> SearchHit:
    return SearchHit(doc_id=DocumentId.rfc(n), title=title)


def _draft(name: str, version: int, title: str) -> SearchHit:
    return SearchHit(doc_id=DocumentId.draft(name, version), title=title)


@pytest.fixture()
def quic_backend(search_backend: FakeSearchBackend) -> FakeSearchBackend:
    search_backend.hits = {
        DocumentKind.RFC: [
            _rfc(9000, "QUIC: A UDP-Based Multiplexed and Secure Transport"),
            _rfc(9001, "Using TLS to Secure QUIC"),
            _rfc(9002, "QUIC Loss Detection and Congestion Control"),
        ],
        DocumentKind.DRAFT: [
            _draft("draft-ietf-quic-multipath", 12, "Multipath Extension for QUIC"),
            _draft("draft-ietf-quic-qlog-main-schema", 9, "qlog: Structured Logging"),
        ],
    }
    return search_backend


async def test_rfc_only_by_default(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic")
    assert response.kind is SearchKind.RFC_ONLY
    assert [r.id for r in response.results] == ["rfc9000", "rfc9001", "rfc9002"]
    assert all(r.kind is DocumentKind.RFC for r in response.results)
    assert response.has_more is False
    assert [kind for _, kind, _ in quic_backend.calls] == [DocumentKind.RFC]


async def test_drafts_only(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic", SearchKind.DRAFTS_ONLY)
    assert [r.id for r in response.results] == [
        "draft-ietf-quic-multipath-12",
        "draft-ietf-quic-qlog-main-schema-09",
    ]


async def test_both_puts_rfcs_first(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic", SearchKind.BOTH, limit=4)
    assert [r.kind for r in response.results] == [
        DocumentKind.RFC,
        DocumentKind.RFC,
        DocumentKind.RFC,
        DocumentKind.DRAFT,
    ]
    assert response.has_more is True


async def test_limit_truncates_and_flags_more(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic", SearchKind.BOTH, limit=2)
    assert [r.id for r in response.results] == ["rfc9000", "rfc9001"]
    assert response.has_more is True


async def test_limit_exact_fit_has_no_more(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic", limit=3)
    assert len(response.results) == 3
    assert response.has_more is False


async def test_backend_asked_for_one_extra(quic_backend: FakeSearchBackend) -> None:
    await SearchService(quic_backend).search("  quic  ", limit=2)
    assert quic_backend.calls == [("quic", DocumentKind.RFC, 3)]


async def test_default_limit(search_backend: FakeSearchBackend) -> None:
    await SearchService(search_backend, default_limit=7).search("bgp")
    assert search_backend.calls == [("bgp", DocumentKind.RFC, 8)]


async def test_empty_result_is_not_an_error(search_backend: FakeSearchBackend) -> None:
    response = await SearchService(search_backend).search("xyzzy-nothing")
    assert response.results == []
    assert response.has_more is False
    assert response.query == "xyzzy-nothing"


async def test_foreign_kind_hits_are_dropped(search_backend: FakeSearchBackend) -> None:
    search_backend.hits = {DocumentKind.RFC: [_draft("draft-x-y", 1, "stray"), _rfc(1, "Host")]}
    response = await SearchService(search_backend).search("host")
    assert [r.id for r in response.results] == ["rfc1"]


@pytest.mark.parametrize("query", ["", "   ", "x" * 501])
async def test_invalid_query(search_backend: FakeSearchBackend, query: str) -> None:
    with pytest.raises(RfcError) as exc_info:
        await SearchService(search_backend).search(query)
    assert exc_info.value.code == ErrorCode.INVALID_QUERY
    assert search_backend.calls == []


async def test_invalid_limit(search_backend: FakeSearchBackend) -> None:
    with pytest.raises(RfcError) as exc_info:
        await SearchService(search_backend).search("quic", limit=0)
    assert exc_info.value.code == ErrorCode.INVALID_QUERY


# ---------------------------------------------------------------------------
# Registry totals
# ---------------------------------------------------------------------------


async def test_total_unknown_by_default(quic_backend: FakeSearchBackend) -> None:
    response = await SearchService(quic_backend).search("quic")
    assert response.total_count is None


async def test_totals_summed_across_kinds(quic_backend: FakeSearchBackend) -> None:
    quic_backend.totals = {DocumentKind.RFC: 40, DocumentKind.DRAFT: 17}
    response = await SearchService(quic_backend).search("quic", SearchKind.BOTH, limit=2)
    assert response.total_count == 57


async def test_total_unknown_when_one_kind_lacks_it(quic_backend: FakeSearchBackend) -> None:
    quic_backend.totals = {DocumentKind.RFC: 40}
    response = await SearchService(quic_backend).search("quic", SearchKind.BOTH)
    assert response.total_count is None


async def test_next_page_means_more(quic_backend: FakeSearchBackend) -> None:
    # Every hit fits, but the registry says there is another page.
    quic_backend.next_pages = {DocumentKind.RFC}
    response = await SearchService(quic_backend).search("quic", limit=10)
    assert len(response.results) == 3
    assert response.has_more is True
