"""Resolve unversioned draft names to their latest published revision."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rfcview.errors import ErrorCode, RfcError

if TYPE_CHECKING:
    from rfcview.models.document import DocumentId
    from rfcview.protocols import Registry

log = structlog.get_logger()


class VersionResolver:
    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    async def resolve(self, doc_id: DocumentId) -> DocumentId:
        """Return ``doc_id`` with its version filled in.

        RFCs and drafts that already name a version are returned as-is without
        any network call.

        Raises:
            RfcError: ``DRAFT_NOT_FOUND`` when the registry does not know the
                name or lists no numeric revision for it.
        """
        if doc_id.is_resolved:
            return doc_id

        name = doc_id.name or ""
        try:
            record = await self._registry.lookup(name)
        except RfcError as exc:
            if exc.code is ErrorCode.DOCUMENT_NOT_FOUND:
                raise RfcError(ErrorCode.DRAFT_NOT_FOUND, f"No such draft: {name}") from exc
            raise

        version = record.latest_version
        if version is None:
            raise RfcError(
                ErrorCode.DRAFT_NOT_FOUND, f"{name} has no published revision (rev={record.rev!r})"
            )
        resolved = doc_id.with_version(version)
        log.info("draft_resolved", name=name, version=version)
        return resolved
