"""Directory-backed document cache.

Layout under the cache root::

    documents/<cache_key>.txt    plain-text body, UTF-8, byte for byte
    documents/<cache_key>.meta   JSON metadata (title, fetched_at, content digest)

Entries never expire; they are replaced by a refresh or removed explicitly.

Unlike a best-effort cache, every storage failure is raised as
``RfcError(CACHE_IO_ERROR)``: callers open the cached file right after a
write, so a write that did not land must not look like success.
"""

from __future__ import annotations

import contextlib
import hashlib
import os
import re
import tempfile
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from rfcview.errors import ErrorCode, RfcError
from rfcview.identifiers import parse_identifier
from rfcview.models.document import (
    CachedDocument,
    CacheEntry,
    CacheInfo,
    CacheMetadata,
    DocumentId,
    DocumentKind,
)

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger()

_CONTENT_SUFFIX = ".txt"
_META_SUFFIX = ".meta"
_TMP_PREFIX = ".tmp-"
_TITLE_MAX = 100
_WS = re.compile(r"\s+")


def title_from_content(content: str, max_len: int = _TITLE_MAX) -> str:
    """First non-blank line of ``content``, whitespace-collapsed and truncated."""
    for line in content.splitlines():
        line = _WS.sub(" ", line).strip()
        if line:
            return truncate_title(line, max_len)
    return ""


def truncate_title(title: str, max_len: int | None) -> str:
    """Shorten ``title`` to ``max_len`` characters ending in ``...``.

    ``None`` means no limit.
    """
    if max_len is None or len(title) <= max_len:
        return title
    return title[: max(max_len - 3, 0)] + "..."


class CacheStore:
    """Cache of fetched documents keyed by resolved :class:`DocumentId`."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._docs = root / "documents"

    @property
    def root(self) -> Path:
        return self._root

    def content_path(self, doc_id: DocumentId) -> Path:
        return self._docs / f"{doc_id.cache_key}{_CONTENT_SUFFIX}"

    def _meta_path(self, doc_id: DocumentId) -> Path:
        return self._docs / f"{doc_id.cache_key}{_META_SUFFIX}"

    # ------------------------------------------------------------------
    # Single entries
    # ------------------------------------------------------------------

    def get(self, doc_id: DocumentId) -> CacheEntry | None:
        """Return the cached entry, or ``None`` if the document is not cached.

        Metadata whose digest does not match the content (a refresh caught
        between its two replaces) is ignored like missing metadata.
        """
        path = self.content_path(doc_id)
        try:
            raw = path.read_bytes()
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise _io_error("read", doc_id.cache_key, exc) from exc

        content = raw.decode("utf-8", errors="replace")
        meta = self._read_meta(doc_id)
        if meta is not None and meta.digest is not None and meta.digest != _digest(raw):
            log.debug("cache_metadata_stale", key=doc_id.cache_key)
            meta = None
        if meta is None:
            return CacheEntry(
                content=content,
                title=title_from_content(content),
                fetched_at=datetime.fromtimestamp(mtime, UTC),
            )
        return CacheEntry(content=content, title=meta.title, fetched_at=meta.fetched_at)

    def put(self, doc_id: DocumentId, entry: CacheEntry) -> None:
        """Replace both units for ``doc_id``, or neither.

        Both units are staged as temporary files first. Metadata is replaced
        before content, so a new entry becomes visible only once its metadata
        is in place; if the content replace then fails, the previous metadata
        is put back (or removed, for a new entry).
        """
        data = entry.content.encode("utf-8")
        meta = CacheMetadata(title=entry.title, fetched_at=entry.fetched_at, digest=_digest(data))
        meta_path = self._meta_path(doc_id)
        content_path = self.content_path(doc_id)
        staged: list[str] = []
        try:
            self._docs.mkdir(parents=True, exist_ok=True)
            previous_meta = _read_optional(meta_path)
            staged.append(_stage(meta_path, meta.model_dump_json(indent=2).encode()))
            staged.append(_stage(content_path, data))
            os.replace(staged[0], meta_path)
            try:
                os.replace(staged[1], content_path)
            except OSError:
                _restore(meta_path, previous_meta)
                raise
        except OSError as exc:
            raise _io_error("write", doc_id.cache_key, exc) from exc
        finally:
            for tmp_name in staged:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
        log.debug("cache_write", key=doc_id.cache_key, size=len(entry.content))

    def delete(self, doc_id: DocumentId) -> bool:
        """Remove content and metadata. Returns whether anything existed."""
        removed = False
        for path in (self.content_path(doc_id), self._meta_path(doc_id)):
            try:
                path.unlink()
                removed = True
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise _io_error("delete", doc_id.cache_key, exc) from exc
        if removed:
            log.debug("cache_delete", key=doc_id.cache_key)
        return removed

    def _read_meta(self, doc_id: DocumentId) -> CacheMetadata | None:
        path = self._meta_path(doc_id)
        try:
            return CacheMetadata.model_validate_json(path.read_bytes())
        except FileNotFoundError:
            return None
        except ValidationError:
            log.warning("cache_metadata_invalid", key=doc_id.cache_key)
            return None
        except OSError as exc:
            raise _io_error("read", doc_id.cache_key, exc) from exc

    # ------------------------------------------------------------------
    # Whole cache
    # ------------------------------------------------------------------

    def list(self) -> list[CachedDocument]:
        """All cached documents, ordered by cache key."""
        rows = []
        for doc_id, path in self._scan():
            try:
                size = path.stat().st_size
            except FileNotFoundError:
                # Removed by a concurrent run between scan and stat.
                continue
            except OSError as exc:
                raise _io_error("stat", doc_id.cache_key, exc) from exc
            meta = self._read_meta(doc_id)
            if meta is not None:
                title = meta.title
            else:
                entry = self.get(doc_id)
                title = entry.title if entry is not None else ""
            rows.append(CachedDocument(doc_id=doc_id, title=title, size=size))
        return rows

    def revisions(self, name: str) -> list[DocumentId]:
        """Cached revisions of the draft ``name``, oldest first."""
        found = [
            doc_id
            for doc_id, _ in self._scan()
            if doc_id.kind is DocumentKind.DRAFT and doc_id.name == name
        ]
        return sorted(found, key=lambda d: d.version or 0)

    def clear(self) -> int:
        """Remove every entry. Returns the number of documents removed."""
        entries = self._scan()
        try:
            if self._docs.exists():
                for path in self._docs.iterdir():
                    if path.is_file():
                        path.unlink()
        except OSError as exc:
            raise _io_error("clear", str(self._docs), exc) from exc
        log.info("cache_cleared", removed=len(entries))
        return len(entries)

    def info(self) -> CacheInfo:
        total = 0
        try:
            if self._root.exists():
                for dirpath, _, filenames in os.walk(self._root):
                    for filename in filenames:
                        with contextlib.suppress(FileNotFoundError):
                            total += os.path.getsize(os.path.join(dirpath, filename))
        except OSError as exc:
            raise _io_error("stat", str(self._root), exc) from exc
        return CacheInfo(root=self._root, total_size=total, entry_count=len(self._scan()))

    def _scan(self) -> list[tuple[DocumentId, Path]]:
        """(id, content path) for every parseable content unit, sorted by key."""
        try:
            if not self._docs.exists():
                return []
            paths = sorted(self._docs.iterdir())
        except OSError as exc:
            raise _io_error("list", str(self._docs), exc) from exc

        found = []
        for path in paths:
            if path.name.startswith(_TMP_PREFIX) or path.suffix != _CONTENT_SUFFIX:
                continue
            try:
                doc_id = parse_identifier(path.stem)
            except RfcError:
                log.debug("cache_skip_unknown_file", path=str(path))
                continue
            if not doc_id.is_resolved:
                continue
            found.append((doc_id, path))
        found.sort(key=lambda item: item[0].cache_key)
        return found


def _digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _read_optional(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def _stage(target: Path, data: bytes) -> str:
    """Write ``data`` to a synced temporary file beside ``target``; return its name."""
    fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
    return tmp_name


def _restore(path: Path, previous: bytes | None) -> None:
    if previous is None:
        path.unlink(missing_ok=True)
        return
    tmp_name = _stage(path, previous)
    try:
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def _io_error(action: str, key: str, exc: OSError) -> RfcError:
    log.error("cache_io_error", action=action, key=key, error=str(exc))
    return RfcError(ErrorCode.CACHE_IO_ERROR, f"Cache {action} failed for {key}: {exc}")
