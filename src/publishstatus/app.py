"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from publishstatus.adapters.sitecore import (
    AuthoringClient,
    ClientHandle,
    EdgeClient,
    PreviewClient,
    should_cache_published_body,
)
from publishstatus.config import get_authoring_config, get_edge_config
from publishstatus.domain.context import extract_context_token, walk_page_context
from publishstatus.domain.datasources import extract_field_references
from publishstatus.domain.errors import (
    ContextUnavailableError,
    FetchFailedError,
    NoCurrentItemError,
)
from publishstatus.domain.identifiers import is_item_identifier, to_canonical
from publishstatus.domain.local_paths import resolve_local_paths
from publishstatus.domain.model import DataSource
from publishstatus.domain.reconciliation import authoring_records, reconcile_items
from publishstatus.domain.report import assemble_report
from publishstatus.domain.snapshots import fetch_snapshots

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Sequence

    from publishstatus.adapters.sitecore.handle import ClientFactory
    from publishstatus.config import AuthoringConfig, ClientInitConfig, EdgeConfig
    from publishstatus.domain.identifiers import ItemIdentifier
    from publishstatus.domain.model import ProcessedItem, Report
    from publishstatus.domain.ports import (
        AuthoringItemQuery,
        ContextSource,
        PathLookup,
        PublishedItemQuery,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class ReportService:
    """Runs fetch cycles against one authoring and one published endpoint.

    Every call owns its identifier list, snapshots and items; nothing is shared
    between cycles, so a superseded cycle can simply be discarded by the caller.
    """

    authoring: AuthoringItemQuery
    published: PublishedItemQuery
    path_lookup: PathLookup | None = None
    published_source: DataSource = DataSource.LIVE

    async def page_report(
        self,
        context_source: ContextSource,
        *,
        context_token: str | None = None,
        include_field_references: bool = False,
    ) -> Report:
        try:
            page_context = await context_source.query_context()
        except Exception as exc:
            raise ContextUnavailableError(f"Could not obtain page context: {exc}") from exc

        extraction = walk_page_context(page_context)
        if extraction.is_empty:
            raise NoCurrentItemError("No item IDs found in current context")

        item_ids = list(extraction.item_ids)
        if extraction.symbolic_paths:
            item_ids = await self._with_resolved_paths(
                item_ids,
                extraction.symbolic_paths,
                base_path=extraction.current_page_path,
                context_token=context_token,
            )

        return await self._report_for(
            item_ids,
            current_item_id=item_ids[0],
            context_token=context_token,
            include_field_references=include_field_references,
        )

    async def items_report(
        self,
        item_ids: Iterable[str],
        *,
        context_token: str | None = None,
        include_field_references: bool = False,
    ) -> Report:
        """Report on an explicit identifier list; the first identifier is the current item."""

        selected = select_item_ids(item_ids)
        if not selected:
            raise NoCurrentItemError("No valid item IDs supplied")
        return await self._report_for(
            selected,
            current_item_id=selected[0],
            context_token=context_token,
            include_field_references=include_field_references,
        )

    async def _with_resolved_paths(
        self,
        item_ids: list[ItemIdentifier],
        symbolic_paths: Sequence[str],
        *,
        base_path: str,
        context_token: str | None,
    ) -> list[ItemIdentifier]:
        if self.path_lookup is None or not context_token:
            log.warning(
                "Skipping resolution of %d local datasource path(s): no context token",
                len(symbolic_paths),
            )
            return item_ids

        log.info("Resolving local datasource paths: %s", list(symbolic_paths))
        resolved = await resolve_local_paths(
            self.path_lookup,
            symbolic_paths,
            base_path,
            context_token=context_token,
        )
        known = set(item_ids)
        for symbolic_path, item_id in resolved.items():
            if item_id is not None and item_id not in known:
                log.info("Adding resolved datasource item %s (%s)", item_id, symbolic_path)
                known.add(item_id)
                item_ids.append(item_id)
        return item_ids

    async def _report_for(
        self,
        item_ids: Sequence[ItemIdentifier],
        *,
        current_item_id: ItemIdentifier,
        context_token: str | None,
        include_field_references: bool,
    ) -> Report:
        snapshots = await fetch_snapshots(
            item_ids,
            authoring=self.authoring,
            published=self.published,
            context_token=context_token,
            published_source=self.published_source,
        )
        if snapshots.failed:
            raise FetchFailedError(
                f"Both endpoints failed: {snapshots.authoring.error}; {snapshots.published.error}"
            )

        result = reconcile_items(
            snapshots.authoring,
            snapshots.published,
            item_ids,
            current_item_id,
            published_source=self.published_source,
        )
        items: list[ProcessedItem] = list(result.items)
        diagnostics: list[str] = list(result.diagnostics)

        if include_field_references:
            known = set(item_ids)
            referenced = [
                item_id
                for record in authoring_records(snapshots.authoring)
                for item_id in extract_field_references(record)
            ]
            extra_ids = [item_id for item_id in dict.fromkeys(referenced) if item_id not in known]
            if extra_ids:
                log.info("Following %d field reference(s)", len(extra_ids))
                extra_snapshots = await fetch_snapshots(
                    extra_ids,
                    authoring=self.authoring,
                    published=self.published,
                    context_token=context_token,
                    published_source=self.published_source,
                )
                extra = reconcile_items(
                    extra_snapshots.authoring,
                    extra_snapshots.published,
                    extra_ids,
                    current_item_id,
                    published_source=self.published_source,
                )
                items.extend(extra.items)
                diagnostics.extend(extra.diagnostics)

        report = assemble_report(items, diagnostics=diagnostics)
        summary = report.summary
        log.info(
            "Processed %d item(s): current=%s, published=%d, unpublished=%d, outdated=%d",
            summary.total,
            report.current_item.item_id,
            summary.published,
            summary.unpublished,
            summary.outdated,
        )
        return report


def select_item_ids(values: Iterable[str]) -> list[ItemIdentifier]:
    """Canonical, de-duplicated identifiers; anything not identifier-shaped is rejected."""

    selected: dict[ItemIdentifier, None] = {}
    for value in values:
        candidate = value.strip() if isinstance(value, str) else value
        if not is_item_identifier(candidate):
            log.warning("Ignoring invalid item ID: %r", value)
            continue
        selected.setdefault(to_canonical(candidate))
    return list(selected)


async def resolve_context_token(source: ContextSource | None) -> str | None:
    if source is None:
        return None
    try:
        document = await source.query_context()
    except Exception as exc:  # noqa: BLE001
        log.error("Failed to get application context: %s", exc)
        return None
    token = extract_context_token(document)
    if token is None:
        log.error("Context token not found in application context")
    return token


@asynccontextmanager
async def open_report_service(
    *,
    compare_with: DataSource = DataSource.LIVE,
    authoring_config: AuthoringConfig | None = None,
    edge_config: EdgeConfig | None = None,
    init: ClientInitConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> AsyncIterator[ReportService]:
    """Wire a ``ReportService`` to Sitecore and close its clients on exit."""

    if compare_with is DataSource.AUTHORING:
        raise ValueError("Authoring data cannot be compared against itself")

    authoring_settings = authoring_config or get_authoring_config()
    async with AsyncExitStack() as stack:
        authoring_handle = ClientHandle(
            authoring_settings.resilience,
            init=init,
            client_factory=client_factory,
        )
        stack.push_async_callback(authoring_handle.aclose)
        authoring_client = AuthoringClient(config=authoring_settings, handle=authoring_handle)

        published: PublishedItemQuery
        if compare_with is DataSource.PREVIEW:
            published = PreviewClient(config=authoring_settings, handle=authoring_handle)
        else:
            edge_settings = edge_config or get_edge_config(
                cache_predicate=should_cache_published_body
            )
            edge_handle = ClientHandle(
                edge_settings.resilience,
                init=init,
                client_factory=client_factory,
            )
            stack.push_async_callback(edge_handle.aclose)
            published = EdgeClient(config=edge_settings, handle=edge_handle)

        yield ReportService(
            authoring=authoring_client,
            published=published,
            path_lookup=authoring_client,
            published_source=compare_with,
        )


def build_page_report(
    context_source: ContextSource,
    *,
    application_context: ContextSource | None = None,
    context_token: str | None = None,
    compare_with: DataSource = DataSource.LIVE,
    include_field_references: bool = False,
    authoring_config: AuthoringConfig | None = None,
    edge_config: EdgeConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> Report:
    """Build the publish-status report for the page described by ``context_source``."""

    async def run() -> Report:
        token = context_token or await resolve_context_token(application_context)
        async with open_report_service(
            compare_with=compare_with,
            authoring_config=authoring_config,
            edge_config=edge_config,
            client_factory=client_factory,
        ) as service:
            return await service.page_report(
                context_source,
                context_token=token,
                include_field_references=include_field_references,
            )

    return asyncio.run(run())


def build_items_report(
    item_ids: Sequence[str],
    *,
    context_token: str | None = None,
    compare_with: DataSource = DataSource.LIVE,
    include_field_references: bool = False,
    authoring_config: AuthoringConfig | None = None,
    edge_config: EdgeConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> Report:
    """Build the publish-status report for an explicit identifier list."""

    async def run() -> Report:
        async with open_report_service(
            compare_with=compare_with,
            authoring_config=authoring_config,
            edge_config=edge_config,
            client_factory=client_factory,
        ) as service:
            return await service.items_report(
                item_ids,
                context_token=context_token,
                include_field_references=include_field_references,
            )

    return asyncio.run(run())
