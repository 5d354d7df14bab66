"""Value objects produced by one fetch cycle.

Nothing here is mutated after construction; every refetch rebuilds the whole set.
Derived status (published, outdated, version difference, summary counts) is
computed from the stored versions so it can never drift from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .identifiers import ItemIdentifier

UNKNOWN_ITEM_ID: Final[str] = "unknown"
UNKNOWN_ITEM_NAME: Final[str] = "Unknown Item"
DEFAULT_LANGUAGE: Final[str] = "en"


class DataSource(StrEnum):
    AUTHORING = "authoring"
    LIVE = "live"
    PREVIEW = "preview"


class ItemType(StrEnum):
    CURRENT = "current"
    DATASOURCE = "datasource"
    LINK = "link"
    REFERENCE = "reference"

    @property
    def label(self) -> str:
        return _ITEM_TYPE_LABELS[self]


_ITEM_TYPE_LABELS: Final[dict[ItemType, str]] = {
    ItemType.CURRENT: "Current Item",
    ItemType.DATASOURCE: "Datasource",
    ItemType.LINK: "Link",
    ItemType.REFERENCE: "Reference",
}


class PublishStatus(StrEnum):
    NOT_PUBLISHED = "not_published"
    OUTDATED = "outdated"
    UP_TO_DATE = "up_to_date"


@dataclass(frozen=True, slots=True)
class FieldValue:
    name: str
    value: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthoringRecord:
    """Draft projection of an item, as the authoring endpoint reports it."""

    item_id: str | None = None
    name: str | None = None
    path: str | None = None
    version: int | None = None
    template: str | None = None
    language: str | None = None
    # Only used to discover further references, never for reconciliation.
    fields: tuple[FieldValue, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class LiveRecord:
    """Published projection of an item. The live endpoint knows no path, template or fields."""

    item_id: str | None = None
    name: str | None = None
    version: int | None = None
    language: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessedItem:
    item_id: ItemIdentifier
    name: str
    path: str
    latest_version: int
    published_version: int | None
    item_type: ItemType
    template: str | None = None
    language: str | None = None

    @property
    def is_published(self) -> bool:
        return self.published_version is not None

    @property
    def is_outdated(self) -> bool:
        return self.published_version is not None and self.published_version < self.latest_version

    @property
    def version_difference(self) -> int:
        if self.published_version is None:
            return self.latest_version
        return self.latest_version - self.published_version

    @property
    def status(self) -> PublishStatus:
        if not self.is_published:
            return PublishStatus.NOT_PUBLISHED
        if self.is_outdated:
            return PublishStatus.OUTDATED
        return PublishStatus.UP_TO_DATE

    @property
    def is_placeholder(self) -> bool:
        """True only for the reserved stand-in used when a report has no items."""

        return self.item_id == UNKNOWN_ITEM_ID

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.item_id,
            "name": self.name,
            "path": self.path,
            "latestVersion": self.latest_version,
            "publishedVersion": self.published_version,
            "isPublished": self.is_published,
            "isOutdated": self.is_outdated,
            "versionDifference": self.version_difference,
            "status": str(self.status),
            "itemType": str(self.item_type),
            "template": self.template,
            "language": self.language,
        }


def placeholder_item() -> ProcessedItem:
    return ProcessedItem(
        item_id=UNKNOWN_ITEM_ID,
        name="No Current Item",
        path="",
        latest_version=0,
        published_version=None,
        item_type=ItemType.CURRENT,
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class ReportSummary:
    total: int = 0
    published: int = 0
    unpublished: int = 0
    outdated: int = 0
    up_to_date: int = 0

    @classmethod
    def from_items(cls, items: Iterable[ProcessedItem]) -> ReportSummary:
        item_list = list(items)
        return cls(
            total=len(item_list),
            published=sum(1 for item in item_list if item.is_published),
            unpublished=sum(1 for item in item_list if not item.is_published),
            outdated=sum(1 for item in item_list if item.is_outdated),
            up_to_date=sum(1 for item in item_list if item.status is PublishStatus.UP_TO_DATE),
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "totalItems": self.total,
            "publishedItems": self.published,
            "unpublishedItems": self.unpublished,
            "outdatedItems": self.outdated,
            "upToDateItems": self.up_to_date,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class Report:
    current_item: ProcessedItem
    referenced_items: tuple[ProcessedItem, ...] = ()
    diagnostics: tuple[str, ...] = field(default_factory=tuple)

    @property
    def items(self) -> tuple[ProcessedItem, ...]:
        if self.current_item.is_placeholder:
            return self.referenced_items
        return (self.current_item, *self.referenced_items)

    @property
    def summary(self) -> ReportSummary:
        return ReportSummary.from_items(self.items)

    def as_dict(self) -> dict[str, object]:
        return {
            "currentItem": self.current_item.as_dict(),
            "referencedItems": [item.as_dict() for item in self.referenced_items],
            "summary": self.summary.as_dict(),
            "diagnostics": list(self.diagnostics),
        }
