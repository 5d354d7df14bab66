"""Item identifier forms.

Three textual forms circulate:

- canonical: ``5ED521788F0649BE9D4CF191E650189E`` (comparison, deduplication)
- hyphenated: ``5ED52178-8F06-49BE-9D4C-F191E650189E`` (display, authoring queries)
- braced: ``{5ED52178-8F06-49BE-9D4C-F191E650189E}`` (live path lookups)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

type ItemIdentifier = str

CANONICAL_LENGTH: Final[int] = 32
_HYPHEN_OFFSETS: Final[tuple[int, ...]] = (8, 12, 16, 20)

_GUID_BODY = (
    r"[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}"
)
_GUID_PATTERN = re.compile(rf"^\{{?{_GUID_BODY}\}}?$")
_GUID_SEARCH_PATTERN = re.compile(rf"\{{?{_GUID_BODY}\}}?")
_COMPACT_PATTERN = re.compile(r"^\{?[0-9A-Fa-f]{32}\}?$")


def to_canonical(raw: str) -> ItemIdentifier:
    """Strip braces and hyphens and uppercase. Never fails; garbage passes through."""

    return raw.replace("{", "").replace("}", "").replace("-", "").upper()


def to_hyphenated(raw: str) -> str:
    canonical = to_canonical(raw)
    if len(canonical) != CANONICAL_LENGTH:
        return raw
    parts: list[str] = []
    start = 0
    for offset in (*_HYPHEN_OFFSETS, CANONICAL_LENGTH):
        parts.append(canonical[start:offset])
        start = offset
    return "-".join(parts)


def to_braced(raw: str) -> str:
    if len(to_canonical(raw)) != CANONICAL_LENGTH:
        return raw
    return f"{{{to_hyphenated(raw)}}}"


def is_guid_like(raw: object) -> bool:
    """Match the 8-4-4-4-12 hex pattern, braces optional."""

    return isinstance(raw, str) and _GUID_PATTERN.match(raw) is not None


def is_item_identifier(raw: object) -> bool:
    """Accept any well-formed identifier form: hyphenated, braced or compact."""

    if not isinstance(raw, str):
        return False
    return is_guid_like(raw) or _COMPACT_PATTERN.match(raw) is not None


def find_guids(text: str) -> list[ItemIdentifier]:
    """Return canonical identifiers for every GUID literal in ``text``, first-seen order."""

    return unique_identifiers(match.group(0) for match in _GUID_SEARCH_PATTERN.finditer(text))


def unique_identifiers(values: Iterable[str]) -> list[ItemIdentifier]:
    seen: dict[ItemIdentifier, None] = {}
    for value in values:
        seen.setdefault(to_canonical(value))
    return list(seen)
