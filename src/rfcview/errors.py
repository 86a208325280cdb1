"""Error taxonomy shared by every layer of rfcview.

Infrastructure exceptions (``httpx.HTTPError``, ``OSError``, validation errors)
are translated into :class:`RfcError` at the module that talks to the
infrastructure. Callers above that line only ever see ``RfcError``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_QUERY = "INVALID_QUERY"
    DRAFT_NOT_FOUND = "DRAFT_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    FETCH_FAILED = "FETCH_FAILED"
    CACHE_IO_ERROR = "CACHE_IO_ERROR"
    VIEWER_LAUNCH_FAILED = "VIEWER_LAUNCH_FAILED"


class RfcError(Exception):
    """Raised for every user-reportable failure.

    ``recoverable`` is True when repeating the same command later may succeed
    (transient network trouble); it is informational only, nothing retries.
    """

    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def __repr__(self) -> str:
        return f"RfcError(code={self.code.value!r}, message={self.message!r})"
