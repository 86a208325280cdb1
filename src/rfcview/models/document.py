from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentKind(StrEnum):
    RFC = "rfc"
    DRAFT = "draft"


class DocumentId(BaseModel):
    """Canonical reference to an RFC or an Internet-Draft.

    A draft without ``version`` is *unresolved*: it means "the latest
    revision" and has no cache key until the version resolver fills it in.
    """

    model_config = ConfigDict(frozen=True)

    kind: DocumentKind
    number: int | None = Field(default=None, gt=0)
    name: str | None = None
    version: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_kind_fields(self) -> DocumentId:
        if self.kind is DocumentKind.RFC:
            if self.number is None or self.name is not None:
                raise ValueError("an RFC id carries a number and no name")
            if self.version is not None:
                raise ValueError("RFCs are not versioned")
        else:
            if self.name is None or self.number is not None:
                raise ValueError("a draft id carries a name and no number")
            if not self.name.startswith("draft-") or len(self.name) <= len("draft-"):
                raise ValueError(f"Invalid draft name: {self.name!r}")
        return self

    @classmethod
    def rfc(cls, number: int) -> DocumentId:
        return cls(kind=DocumentKind.RFC, number=number)

    @classmethod
    def draft(cls, name: str, version: int | None = None) -> DocumentId:
        return cls(kind=DocumentKind.DRAFT, name=name, version=version)

    @property
    def is_resolved(self) -> bool:
        return self.kind is DocumentKind.RFC or self.version is not None

    def with_version(self, version: int) -> DocumentId:
        return self.model_copy(update={"version": version})

    @property
    def cache_key(self) -> str:
        """Storage key; only defined once a draft's version is known."""
        if self.kind is DocumentKind.RFC:
            return f"rfc{self.number}"
        if self.version is None:
            raise ValueError(f"{self.name} has no resolved version")
        return f"{self.name}-{self.version:02d}"

    @property
    def display_name(self) -> str:
        if self.kind is DocumentKind.RFC:
            return f"RFC {self.number}"
        return str(self)

    def __str__(self) -> str:
        if self.is_resolved:
            return self.cache_key
        return self.name or ""


class DocumentFormat(StrEnum):
    TEXT = "txt"
    HTML = "html"


class FetchedDocument(BaseModel):
    """Raw body returned by the document transport."""

    url: str
    body: str
    format: DocumentFormat


class CacheEntry(BaseModel):
    """Cached plain-text body of one resolved document."""

    content: str
    title: str
    fetched_at: datetime


class CacheMetadata(BaseModel):
    """Contents of the ``.meta`` unit written next to each cached document."""

    title: str
    fetched_at: datetime
    # sha256 of the content unit it describes; None for entries written without one
    digest: str | None = None


class CachedDocument(BaseModel):
    """One row of a cache listing."""

    doc_id: DocumentId
    title: str
    size: int  # bytes of the content unit


class CacheInfo(BaseModel):
    root: Path
    total_size: int
    entry_count: int
