from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, field_validator

from rfcview.models.document import DocumentId, DocumentKind


class SearchKind(StrEnum):
    RFC_ONLY = "rfc"
    DRAFTS_ONLY = "draft"
    BOTH = "both"

    @property
    def kinds(self) -> tuple[DocumentKind, ...]:
        """Document kinds to query, in the order their results are merged."""
        if self is SearchKind.RFC_ONLY:
            return (DocumentKind.RFC,)
        if self is SearchKind.DRAFTS_ONLY:
            return (DocumentKind.DRAFT,)
        return (DocumentKind.RFC, DocumentKind.DRAFT)


class SearchQuery(BaseModel):
    query: str
    kind: SearchKind = SearchKind.RFC_ONLY
    limit: int = 25

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be empty")
        if len(v) > 500:
            raise ValueError("query must not exceed 500 characters")
        return v

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("limit must be >= 1")
        return v


class SearchHit(BaseModel):
    """Single hit as reported by the registry, before display mapping."""

    doc_id: DocumentId
    title: str


class SearchPage(BaseModel):
    """Hits for one document kind plus what the registry says about the rest."""

    hits: list[SearchHit]
    total_count: int | None = None  # all matches the registry knows of, when reported
    has_next: bool = False  # the registry holds further result pages


class SearchResult(BaseModel):
    id: str  # copy-paste friendly, e.g. "rfc4271" or "draft-ietf-quic-transport-34"
    title: str
    kind: DocumentKind


class SearchResponse(BaseModel):
    query: str
    kind: SearchKind
    results: list[SearchResult]
    has_more: bool = False
    total_count: int | None = None
