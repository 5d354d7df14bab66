from __future__ import annotations

import pytest

from publishstatus.domain.model import (
    UNKNOWN_ITEM_ID,
    ItemType,
    ProcessedItem,
    PublishStatus,
    ReportSummary,
)
from publishstatus.domain.report import assemble_report, summarize


def _item(
    item_id: str,
    *,
    latest: int = 1,
    published: int | None = 1,
    item_type: ItemType = ItemType.REFERENCE,
) -> ProcessedItem:
    return ProcessedItem(
        item_id=item_id,
        name=item_id,
        path=f"/sitecore/content/{item_id}",
        latest_version=latest,
        published_version=published,
        item_type=item_type,
    )


def test_empty_item_list_produces_placeholder_report() -> None:
    report = assemble_report([])

    assert report.current_item.item_id == UNKNOWN_ITEM_ID
    assert report.current_item.is_placeholder
    assert report.current_item.latest_version == 0
    assert report.current_item.published_version is None
    assert not report.current_item.is_published
    assert report.referenced_items == ()
    assert report.summary == ReportSummary()


def test_current_item_is_split_from_references() -> None:
    reference = _item("A")
    current = _item("B", item_type=ItemType.CURRENT)

    report = assemble_report([reference, current], diagnostics=["live: No response"])

    assert report.current_item is current
    assert report.referenced_items == (reference,)
    assert report.diagnostics == ("live: No response",)


def test_first_item_stands_in_when_none_is_current() -> None:
    first, second = _item("A"), _item("B")

    report = assemble_report([first, second])

    assert report.current_item is first
    assert report.referenced_items == (second,)


def test_summary_is_computed_from_items() -> None:
    items = [
        _item("A", latest=3, published=3, item_type=ItemType.CURRENT),
        _item("B", latest=5, published=2),
        _item("C", latest=2, published=None),
    ]

    report = assemble_report(items)

    assert report.summary == ReportSummary(
        total=3, published=2, unpublished=1, outdated=1, up_to_date=1
    )
    assert summarize(items) == report.summary
    assert report.as_dict()["summary"] == {
        "totalItems": 3,
        "publishedItems": 2,
        "unpublishedItems": 1,
        "outdatedItems": 1,
        "upToDateItems": 1,
    }


@pytest.mark.parametrize(
    ("latest", "published", "status", "difference"),
    [
        (4, None, PublishStatus.NOT_PUBLISHED, 4),
        (0, None, PublishStatus.NOT_PUBLISHED, 0),
        (6, 6, PublishStatus.UP_TO_DATE, 0),
        (8, 5, PublishStatus.OUTDATED, 3),
        (2, 3, PublishStatus.UP_TO_DATE, -1),
    ],
)
def test_derived_status(
    latest: int,
    published: int | None,
    status: PublishStatus,
    difference: int,
) -> None:
    item = _item("A", latest=latest, published=published)

    assert item.status is status
    assert item.version_difference == difference
    if item.is_outdated:
        assert item.is_published
    if not item.is_published:
        assert item.version_difference == item.latest_version


def test_item_serialization_uses_display_keys() -> None:
    item = _item("A", latest=8, published=5, item_type=ItemType.CURRENT)

    payload = item.as_dict()

    assert payload["latestVersion"] == 8
    assert payload["publishedVersion"] == 5
    assert payload["isOutdated"] is True
    assert payload["status"] == "outdated"
    assert payload["itemType"] == "current"
    assert ItemType.CURRENT.label == "Current Item"
