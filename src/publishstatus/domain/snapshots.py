"""Concurrent retrieval of the authoring and published snapshots of an item set."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .model import DataSource
from .ports.fetching import QueryEnvelope

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from .identifiers import ItemIdentifier
    from .model import AuthoringRecord, LiveRecord
    from .ports.fetching import AuthoringItemQuery, PublishedItemQuery

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SnapshotPair:
    authoring: QueryEnvelope[AuthoringRecord]
    published: QueryEnvelope[LiveRecord]

    @property
    def failed(self) -> bool:
        """Both endpoints failed at the transport level."""

        return self.authoring.failed and self.published.failed


async def fetch_snapshots(
    item_ids: Sequence[ItemIdentifier],
    *,
    authoring: AuthoringItemQuery,
    published: PublishedItemQuery,
    context_token: str | None = None,
    published_source: DataSource = DataSource.LIVE,
) -> SnapshotPair:
    """Query both endpoints for ``item_ids`` at once and wait for both to settle.

    Never raises for endpoint failures: a failing call becomes an error envelope
    and does not cancel the other one.
    """

    if not item_ids:
        return SnapshotPair(authoring=QueryEnvelope.empty(), published=QueryEnvelope.empty())

    requested = tuple(item_ids)
    log.info(
        "Querying %s and %s data for %d item(s)",
        DataSource.AUTHORING,
        published_source,
        len(requested),
    )
    authoring_envelope, published_envelope = await asyncio.gather(
        _settle(
            authoring.query_items(requested, context_token=context_token),
            label=DataSource.AUTHORING,
        ),
        _settle(
            published.query_items(requested, context_token=context_token),
            label=published_source,
        ),
    )
    return SnapshotPair(authoring=authoring_envelope, published=published_envelope)


async def _settle[TPayload](
    call: Awaitable[QueryEnvelope[TPayload]],
    *,
    label: str,
) -> QueryEnvelope[TPayload]:
    try:
        return await call
    except Exception as exc:  # noqa: BLE001
        log.error("Error querying %s endpoint: %s", label, exc)
        return QueryEnvelope.failure(exc)
