"""Canadian postal code normalization."""

from __future__ import annotations

import re

from ...errors import InvalidPostalCodeError
from ...models.domain import PostalCode

# Canada Post never issues D, F, I, O, Q or U; W and Z are also unused as the
# first (province) letter.
_FIRST_LETTER = "ABCEGHJ-NPRSTVXY"
_LETTER = "ABCEGHJ-NPRSTV-Z"

_FSA_PATTERN = re.compile(rf"^[{_FIRST_LETTER}][0-9][{_LETTER}]$")
_POSTAL_CODE_PATTERN = re.compile(rf"^[{_FIRST_LETTER}][0-9][{_LETTER}][0-9][{_LETTER}][0-9]$")
_WHITESPACE = re.compile(r"\s+")


def _clean(raw: str) -> str:
    return _WHITESPACE.sub("", raw).upper()


def normalize_postal_code(raw: str | PostalCode) -> PostalCode:
    """Return the canonical ``A1A 1A1`` form of ``raw``.

    Whitespace anywhere in the input is ignored and letters are uppercased, so
    ``"v6b1a1"``, ``" V6B  1A1 "`` and ``"V6B 1A1"`` all normalize to the same
    value. Raises :class:`InvalidPostalCodeError` for anything else.
    """
    if isinstance(raw, PostalCode):
        return raw
    if not isinstance(raw, str):
        raise InvalidPostalCodeError(str(raw))

    cleaned = _clean(raw)
    if not _POSTAL_CODE_PATTERN.match(cleaned):
        raise InvalidPostalCodeError(raw)
    return PostalCode(f"{cleaned[:3]} {cleaned[3:]}")


def postal_code_prefix(code: PostalCode) -> str:
    """Forward sortation area (first three characters)."""
    return code.fsa


def normalize_prefix(raw: str) -> str:
    """Validate and uppercase a bare three character FSA such as ``v6b``."""
    cleaned = _clean(raw)
    if not _FSA_PATTERN.match(cleaned):
        raise InvalidPostalCodeError(raw, f"Invalid postal code prefix '{raw}'")
    return cleaned


def is_valid_postal_code(raw: str) -> bool:
    try:
        normalize_postal_code(raw)
    except InvalidPostalCodeError:
        return False
    return True
