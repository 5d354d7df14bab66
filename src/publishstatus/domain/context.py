"""Discovery of the items a page context refers to.

The page context is an externally owned document with no contractual shape. It
is only ever read through the lookups below, each of which answers ``None``
instead of raising when a field is absent or has an unexpected type.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

from .datasources import DatasourceReferences, merge_references, parse_datasource
from .identifiers import is_item_identifier, to_canonical

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .identifiers import ItemIdentifier

log = getLogger(__name__)

type Document = Mapping[str, object]

PAGE_INFO_KEY: Final[str] = "pageInfo"
SITE_INFO_KEY: Final[str] = "siteInfo"
PATH_KEY: Final[str] = "path"
PRESENTATION_KEY: Final[str] = "presentationDetails"
IDENTIFIER_KEYS: Final[tuple[str, ...]] = ("itemId", "id", "pageId")
DATASOURCE_KEYS: Final[tuple[str, ...]] = ("dataSource", "datasource")


@dataclass(frozen=True, slots=True)
class ContextExtraction:
    """Everything discovered in one page context.

    ``item_ids`` always starts with the current item when it is non-empty.
    """

    item_ids: tuple[ItemIdentifier, ...] = ()
    symbolic_paths: tuple[str, ...] = ()
    current_page_path: str = ""

    @property
    def current_item_id(self) -> ItemIdentifier | None:
        return self.item_ids[0] if self.item_ids else None

    @property
    def is_empty(self) -> bool:
        return not self.item_ids


def walk_page_context(context: object) -> ContextExtraction:
    root = _as_document(context)
    if root is None:
        log.warning("Invalid page context provided: %s", type(context).__name__)
        return ContextExtraction()

    page_info = _as_document(root.get(PAGE_INFO_KEY))
    if page_info is None:
        log.warning("Page context has no page info section")
        return ContextExtraction()

    current_page_path = _string_field(page_info, PATH_KEY) or ""
    current_item = (
        _first_identifier(page_info)
        or _first_identifier(_as_document(root.get(SITE_INFO_KEY)))
        or _first_identifier(root)
    )
    if current_item is None:
        log.warning("Could not extract current item ID from page context")
        return ContextExtraction()

    current_item_id = to_canonical(current_item)
    references = merge_references(_iter_presentation_references(page_info.get(PRESENTATION_KEY)))
    item_ids = (
        current_item_id,
        *(item_id for item_id in references.item_ids if item_id != current_item_id),
    )
    log.debug(
        "Extracted %d item(s) and %d symbolic path(s) from page %s",
        len(item_ids),
        len(references.symbolic_paths),
        current_page_path or current_item_id,
    )
    return ContextExtraction(
        item_ids=item_ids,
        symbolic_paths=references.symbolic_paths,
        current_page_path=current_page_path,
    )


def extract_context_token(application_context: object) -> str | None:
    """Pick the context token from an application-context document.

    Preference: first resource's preview context, then its live context, then a
    top-level ``sitecoreContextId``.
    """

    root = _as_document(application_context)
    if root is None:
        return None

    resources = root.get("resourceAccess")
    if isinstance(resources, list) and resources:
        resource = _as_document(cast(list[object], resources)[0])
        contexts = _as_document(resource.get("context")) if resource is not None else None
        if contexts is not None:
            token = _string_field(contexts, "preview") or _string_field(contexts, "live")
            if token:
                return token

    return _string_field(root, "sitecoreContextId")


def _iter_presentation_references(payload: object) -> Iterator[DatasourceReferences]:
    details = _load_presentation(payload)
    if details is None:
        return
    # devices -> renderings, and devices -> placeholders -> renderings; no deeper.
    for device in _documents(details.get("devices")):
        for rendering in _documents(device.get("renderings")):
            yield parse_datasource(_datasource_value(rendering))
        for placeholder in _documents(device.get("placeholders")):
            for rendering in _documents(placeholder.get("renderings")):
                yield parse_datasource(_datasource_value(rendering))


def _load_presentation(payload: object) -> Document | None:
    if payload is None:
        return None
    if isinstance(payload, str):
        if not payload.strip():
            return None
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            log.warning("Ignoring malformed presentation details: %s", exc)
            return None
    details = _as_document(payload)
    if details is None:
        log.warning("Ignoring presentation details of type %s", type(payload).__name__)
    return details


def _datasource_value(rendering: Document) -> str | None:
    for key in DATASOURCE_KEYS:
        value = _string_field(rendering, key)
        if value:
            return value
    return None


def _first_identifier(document: Document | None) -> str | None:
    if document is None:
        return None
    for key in IDENTIFIER_KEYS:
        value = _string_field(document, key)
        if value is None:
            continue
        if is_item_identifier(value):
            return value
        log.debug("Ignoring non-GUID %s value %r", key, value)
    return None


def _string_field(document: Document, key: str) -> str | None:
    value = document.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_document(value: object) -> Document | None:
    if isinstance(value, Mapping):
        return cast(Document, value)
    return None


def _documents(value: object) -> Iterator[Document]:
    if not isinstance(value, list | tuple):
        return
    for entry in cast(list[object], value):
        document = _as_document(entry)
        if document is not None:
            yield document
