"""Unit tests for rfcview.resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rfcview.errors import ErrorCode, RfcError
from rfcview.models.document import DocumentId
from rfcview.resolver import VersionResolver

if TYPE_CHECKING:
    from tests.conftest import FakeRegistry


async def test_rfc_returned_unchanged(registry: FakeRegistry) -> None:
    doc_id = DocumentId.rfc(9000)
    assert await VersionResolver(registry).resolve(doc_id) == doc_id
    assert registry.lookups == []


async def test_versioned_draft_skips_lookup(registry: FakeRegistry) -> None:
    doc_id = DocumentId.draft("draft-ietf-quic-transport", 29)
    assert await VersionResolver(registry).resolve(doc_id) == doc_id
    assert registry.lookups == []


async def test_unversioned_draft_gets_latest(registry: FakeRegistry) -> None:
    registry.add("draft-ietf-quic-transport", "QUIC", "34")
    resolved = await VersionResolver(registry).resolve(
        DocumentId.draft("draft-ietf-quic-transport")
    )
    assert resolved == DocumentId.draft("draft-ietf-quic-transport", 34)
    assert resolved.cache_key == "draft-ietf-quic-transport-34"


async def test_unknown_draft(registry: FakeRegistry) -> None:
    with pytest.raises(RfcError) as exc_info:
        await VersionResolver(registry).resolve(DocumentId.draft("draft-does-not-exist"))
    assert exc_info.value.code == ErrorCode.DRAFT_NOT_FOUND
    assert "draft-does-not-exist" in exc_info.value.message


@pytest.mark.parametrize("rev", ["", "xx", "rfc"])
async def test_non_numeric_revision(registry: FakeRegistry, rev: str) -> None:
    registry.add("draft-odd", rev=rev)
    with pytest.raises(RfcError) as exc_info:
        await VersionResolver(registry).resolve(DocumentId.draft("draft-odd"))
    assert exc_info.value.code == ErrorCode.DRAFT_NOT_FOUND


async def test_transport_errors_propagate() -> None:
    class BrokenRegistry:
        async def lookup(self, name: str) -> None:
            raise RfcError(ErrorCode.FETCH_FAILED, "boom", recoverable=True)

        async def title_for(self, doc_id: DocumentId) -> None:
            return None

    with pytest.raises(RfcError) as exc_info:
        await VersionResolver(BrokenRegistry()).resolve(DocumentId.draft("draft-x-y"))
    assert exc_info.value.code == ErrorCode.FETCH_FAILED
