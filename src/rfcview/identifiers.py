"""Turn user-typed tokens into canonical :class:`DocumentId` values.

Accepted forms::

    9000   rfc9000   RFC9000   rfc 9000
    draft-ietf-quic-transport
    draft-ietf-quic-transport-34

Parsing is pure: it never touches the network or the cache.
"""

from __future__ import annotations

import re

from rfcview.errors import ErrorCode, RfcError
from rfcview.models.document import DocumentId

_RFC_NUMBER = re.compile(r"[1-9][0-9]*")
_DRAFT_NAME = re.compile(r"draft-[a-z0-9._+-]+")
_VERSION_SUFFIX = re.compile(r"-([0-9]{1,2})$")
_DRAFT_PREFIX = "draft-"


def _invalid(token: str, reason: str) -> RfcError:
    return RfcError(
        ErrorCode.INVALID_IDENTIFIER, f"Invalid document identifier {token!r}: {reason}"
    )


def parse_identifier(raw: str) -> DocumentId:
    """Parse an RFC number, ``rfc<N>`` or draft name into a :class:`DocumentId`.

    Raises:
        RfcError: with ``INVALID_IDENTIFIER`` for anything else.
    """
    token = raw.strip().lower()
    if not token:
        raise _invalid(raw, "empty identifier")

    if token.startswith(_DRAFT_PREFIX):
        return _parse_draft(raw, token)

    number = token[3:].lstrip() if token.startswith("rfc") else token
    if not number:
        raise _invalid(raw, "missing RFC number")
    if not _RFC_NUMBER.fullmatch(number):
        if number.isascii() and number.isdigit():
            raise _invalid(raw, "RFC numbers are positive and have no leading zeros")
        raise _invalid(raw, "expected an RFC number or a draft-... name")
    return DocumentId.rfc(int(number))


def _parse_draft(raw: str, token: str) -> DocumentId:
    if not _DRAFT_NAME.fullmatch(token):
        raise _invalid(raw, "draft names contain only letters, digits, '.', '_', '+' and '-'")

    match = _VERSION_SUFFIX.search(token)
    if match is not None:
        name = token[: match.start()]
        # "draft-01" has no room for a name, so the digits belong to the name.
        if len(name) > len(_DRAFT_PREFIX) and not name.endswith("-"):
            return DocumentId.draft(name, int(match.group(1)))
    return DocumentId.draft(token)
