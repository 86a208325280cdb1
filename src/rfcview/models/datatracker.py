from __future__ import annotations

from pydantic import BaseModel


class DatatrackerDocument(BaseModel):
    """Subset of a Datatracker ``doc/document`` object that rfcview reads."""

    name: str
    title: str = ""
    rev: str = ""

    @property
    def latest_version(self) -> int | None:
        rev = self.rev.strip()
        if rev.isascii() and rev.isdigit():
            return int(rev)
        return None


class DatatrackerMeta(BaseModel):
    next: str | None = None
    total_count: int | None = None


class DatatrackerSearchPage(BaseModel):
    meta: DatatrackerMeta = DatatrackerMeta()
    objects: list[DatatrackerDocument] = []
