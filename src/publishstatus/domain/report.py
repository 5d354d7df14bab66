"""Assembly of reconciled items into a report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .model import ItemType, Report, ReportSummary, placeholder_item

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import ProcessedItem


def assemble_report(
    items: Sequence[ProcessedItem],
    *,
    diagnostics: Iterable[str] = (),
) -> Report:
    """Split items into the current item and everything it references.

    Without an item flagged current, the first one stands in for it. With no
    items at all the current item is the reserved ``unknown`` placeholder.
    """

    if not items:
        return Report(current_item=placeholder_item(), diagnostics=tuple(diagnostics))

    current = next((item for item in items if item.item_type is ItemType.CURRENT), items[0])
    return Report(
        current_item=current,
        referenced_items=tuple(item for item in items if item is not current),
        diagnostics=tuple(diagnostics),
    )


def summarize(items: Iterable[ProcessedItem]) -> ReportSummary:
    return ReportSummary.from_items(items)
