"""Parsing of rendering datasource expressions into identifiers and symbolic paths."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .identifiers import find_guids, is_guid_like, to_canonical

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .identifiers import ItemIdentifier
    from .model import AuthoringRecord

log = getLogger(__name__)

LOCAL_PREFIX: Final[str] = "local:/"
CONTENT_ROOT_PREFIX: Final[str] = "/sitecore/"
QUERY_PREFIX: Final[str] = "query:"
DATA_FOLDER: Final[str] = "Data/"
SEGMENT_SEPARATOR: Final[str] = "|"


@dataclass(frozen=True, slots=True)
class DatasourceReferences:
    """Direct identifiers and still-unresolved symbolic paths, each in first-seen order."""

    item_ids: tuple[ItemIdentifier, ...] = ()
    symbolic_paths: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.item_ids and not self.symbolic_paths


def parse_datasource(raw: object) -> DatasourceReferences:
    """Split a raw datasource field value into identifiers and symbolic paths.

    Segments are matched in precedence order: GUID literal, ``local:/`` path,
    absolute ``/sitecore/`` path. ``query:`` expressions and anything else are
    dropped with a log record; nothing here raises.
    """

    if not isinstance(raw, str):
        return DatasourceReferences()

    item_ids: dict[ItemIdentifier, None] = {}
    symbolic_paths: dict[str, None] = {}
    for segment in (part.strip() for part in raw.split(SEGMENT_SEPARATOR)):
        if not segment:
            continue
        if is_guid_like(segment):
            item_ids.setdefault(to_canonical(segment))
        elif segment.startswith(LOCAL_PREFIX):
            name = relative_datasource_name(segment.removeprefix(LOCAL_PREFIX))
            if name:
                symbolic_paths.setdefault(name)
        elif segment.startswith(CONTENT_ROOT_PREFIX):
            symbolic_paths.setdefault(segment)
        elif segment.startswith(QUERY_PREFIX):
            log.info("Skipping unsupported query datasource: %s", segment)
        else:
            log.warning("Skipping unrecognised datasource segment: %r", segment)

    return DatasourceReferences(item_ids=tuple(item_ids), symbolic_paths=tuple(symbolic_paths))


def relative_datasource_name(path: str) -> str:
    """``/Data/Text 1`` and ``Data/Text 1`` both become ``Text 1``."""

    name = path.lstrip("/")
    return name.removeprefix(DATA_FOLDER)


def merge_references(references: Iterable[DatasourceReferences]) -> DatasourceReferences:
    item_ids: dict[ItemIdentifier, None] = {}
    symbolic_paths: dict[str, None] = {}
    for reference in references:
        for item_id in reference.item_ids:
            item_ids.setdefault(item_id)
        for path in reference.symbolic_paths:
            symbolic_paths.setdefault(path)
    return DatasourceReferences(item_ids=tuple(item_ids), symbolic_paths=tuple(symbolic_paths))


def extract_field_references(record: AuthoringRecord) -> tuple[ItemIdentifier, ...]:
    """Identifiers referenced from the record's field values, excluding the record itself."""

    own_id = to_canonical(record.item_id) if record.item_id else None
    found: dict[ItemIdentifier, None] = {}
    for field in record.fields:
        for item_id in find_guids(field.value):
            if item_id != own_id:
                found.setdefault(item_id)
    return tuple(found)
