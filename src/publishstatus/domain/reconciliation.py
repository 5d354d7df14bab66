"""Merge authoring and published snapshots into per-item publish status.

Both envelopes are treated purely as ordinal-indexed lookup tables: the record for
``item_ids[i]`` is whatever each endpoint returned under ``item{i}``. Either side
may be missing, partially filled or failed without affecting the other.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .identifiers import to_canonical
from .model import DEFAULT_LANGUAGE, UNKNOWN_ITEM_NAME, DataSource, ItemType, ProcessedItem
from .ports.fetching import item_alias

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .identifiers import ItemIdentifier
    from .model import AuthoringRecord, LiveRecord
    from .ports.fetching import QueryEnvelope

log = getLogger(__name__)

type ItemTypeClassifier = Callable[[ItemIdentifier, ItemIdentifier | None], ItemType]


@dataclass(frozen=True, slots=True)
class EnvelopeValidation[TPayload]:
    """Outcome of checking one envelope.

    ``is_valid`` only reflects whether diagnostics were raised; ``data`` is
    populated whenever the endpoint answered with a data section at all.
    """

    is_valid: bool
    diagnostics: tuple[str, ...] = ()
    data: Mapping[str, TPayload | None] | None = None


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    items: tuple[ProcessedItem, ...] = ()
    diagnostics: tuple[str, ...] = ()


def validate_envelope[TPayload](
    envelope: QueryEnvelope[TPayload] | None,
    *,
    label: str,
) -> EnvelopeValidation[TPayload]:
    if envelope is None or (envelope.response is None and envelope.error is None):
        return _invalid(label, "No response")
    if envelope.error is not None:
        return _invalid(label, f"Response error: {envelope.error}")

    response = envelope.response
    if response is None or response.data is None:
        return _invalid(label, "No data in response")

    diagnostics = tuple(f"{label}: GraphQL error: {message}" for message in response.errors)
    for diagnostic in diagnostics:
        log.warning(diagnostic)
    return EnvelopeValidation(is_valid=not diagnostics, diagnostics=diagnostics, data=response.data)


def determine_item_type(
    item_id: ItemIdentifier,
    current_item_id: ItemIdentifier | None,
) -> ItemType:
    """Classify an item relative to the current page.

    Only the current/reference split is decided here. Distinguishing datasource
    and link references needs relationship data the snapshots do not carry;
    callers that have it can pass their own classifier to ``reconcile_items``.
    """

    if current_item_id is not None and to_canonical(item_id) == to_canonical(current_item_id):
        return ItemType.CURRENT
    return ItemType.REFERENCE


def reconcile_items(
    authoring: QueryEnvelope[AuthoringRecord] | None,
    published: QueryEnvelope[LiveRecord] | None,
    item_ids: Sequence[ItemIdentifier],
    current_item_id: ItemIdentifier | None = None,
    *,
    published_source: DataSource = DataSource.LIVE,
    classify: ItemTypeClassifier = determine_item_type,
) -> ReconciliationResult:
    authoring_check = validate_envelope(authoring, label=DataSource.AUTHORING)
    published_check = validate_envelope(published, label=published_source)
    authoring_data = authoring_check.data or {}
    published_data = published_check.data or {}

    items: list[ProcessedItem] = []
    for index, item_id in enumerate(item_ids):
        alias = item_alias(index)
        items.append(
            build_processed_item(
                item_id,
                authoring_record=authoring_data.get(alias),
                live_record=published_data.get(alias),
                item_type=classify(item_id, current_item_id),
            )
        )

    return ReconciliationResult(
        items=tuple(items),
        diagnostics=authoring_check.diagnostics + published_check.diagnostics,
    )


def build_processed_item(
    item_id: ItemIdentifier,
    *,
    authoring_record: AuthoringRecord | None,
    live_record: LiveRecord | None,
    item_type: ItemType,
) -> ProcessedItem:
    latest_version = 0
    if authoring_record is not None and authoring_record.version is not None:
        latest_version = authoring_record.version
    published_version = live_record.version if live_record is not None else None

    name = (
        (authoring_record.name if authoring_record else None)
        or (live_record.name if live_record else None)
        or UNKNOWN_ITEM_NAME
    )
    language = (
        (authoring_record.language if authoring_record else None)
        or (live_record.language if live_record else None)
        or DEFAULT_LANGUAGE
    )

    return ProcessedItem(
        item_id=to_canonical(item_id),
        name=name,
        path=(authoring_record.path if authoring_record else None) or "",
        latest_version=latest_version,
        published_version=published_version,
        item_type=item_type,
        template=authoring_record.template if authoring_record else None,
        language=language,
    )


def authoring_records(
    envelope: QueryEnvelope[AuthoringRecord] | None,
) -> tuple[AuthoringRecord, ...]:
    """Records present in an authoring envelope, in alias order."""

    if envelope is None or envelope.response is None or envelope.response.data is None:
        return ()
    return tuple(record for record in envelope.response.data.values() if record is not None)


def _invalid[TPayload](label: str, reason: str) -> EnvelopeValidation[TPayload]:
    diagnostic = f"{label}: {reason}"
    log.error("Response validation failed: %s", diagnostic)
    return EnvelopeValidation(is_valid=False, diagnostics=(diagnostic,))
