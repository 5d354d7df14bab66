from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from publishstatus.app import (
    ReportService,
    build_items_report,
    build_page_report,
    open_report_service,
    resolve_context_token,
    select_item_ids,
)
from publishstatus.config import AuthoringConfig, EdgeConfig, ResilienceConfig, RetryPolicy
from publishstatus.domain.errors import (
    ContextUnavailableError,
    FetchFailedError,
    NoCurrentItemError,
)
from publishstatus.domain.model import DataSource, FieldValue, ItemType, Report
from tests.helpers.sitecore import (
    AUTHORING_URL,
    EDGE_URL,
    IMAGE_ID,
    LINK_ID,
    PAGE_ID,
    PREVIEW_URL,
    TEXT_ID,
    FakeAuthoringQuery,
    FakeContextSource,
    FakePathLookup,
    FakePublishedQuery,
    Handler,
    authoring_record,
    canonical,
    live_record,
    make_client_factory,
    page_context,
    presentation_with,
)


def _service(
    *,
    authoring: FakeAuthoringQuery | None = None,
    published: FakePublishedQuery | None = None,
    path_lookup: FakePathLookup | None = None,
) -> ReportService:
    return ReportService(
        authoring=authoring or FakeAuthoringQuery(),
        published=published or FakePublishedQuery(),
        path_lookup=path_lookup,
    )


def test_page_report_resolves_local_paths_before_fetching() -> None:
    authoring = FakeAuthoringQuery(
        {
            PAGE_ID: authoring_record(PAGE_ID, version=3, name="Home"),
            TEXT_ID: authoring_record(TEXT_ID, version=5),
            IMAGE_ID: authoring_record(IMAGE_ID, version=1),
        }
    )
    published = FakePublishedQuery(
        {
            PAGE_ID: live_record(PAGE_ID, version=3),
            TEXT_ID: live_record(TEXT_ID, version=2),
        }
    )
    lookup = FakePathLookup({"/sitecore/content/Home/Data/Text 1": IMAGE_ID})
    context = FakeContextSource(
        page_context(presentation=presentation_with(f"{{{TEXT_ID}}}|local:/Data/Text 1"))
    )

    report = asyncio.run(
        _service(authoring=authoring, published=published, path_lookup=lookup).page_report(
            context,
            context_token="ctx-token",
        )
    )

    expected_ids = (canonical(PAGE_ID), canonical(TEXT_ID), canonical(IMAGE_ID))
    assert tuple(item.item_id for item in report.items) == expected_ids
    assert lookup.calls == [(("/sitecore/content/Home/Data/Text 1",), "ctx-token")]
    assert authoring.calls == [(expected_ids, "ctx-token")]
    assert published.calls == [(expected_ids, "ctx-token")]
    assert report.current_item.name == "Home"
    assert report.current_item.item_type is ItemType.CURRENT
    assert report.summary.total == 3
    assert report.summary.up_to_date == 1
    assert report.summary.outdated == 1
    assert report.summary.unpublished == 1


def test_local_paths_are_skipped_without_context_token(caplog: pytest.LogCaptureFixture) -> None:
    lookup = FakePathLookup({"/sitecore/content/Home/Data/Text 1": IMAGE_ID})
    context = FakeContextSource(page_context(presentation=presentation_with("local:/Data/Text 1")))

    with caplog.at_level(logging.WARNING):
        report = asyncio.run(_service(path_lookup=lookup).page_report(context))

    assert lookup.calls == []
    assert [item.item_id for item in report.items] == [canonical(PAGE_ID)]
    assert "no context token" in caplog.text


def test_resolved_id_already_known_is_not_duplicated() -> None:
    lookup = FakePathLookup({"/sitecore/content/Home/Data/Text 1": TEXT_ID})
    context = FakeContextSource(
        page_context(presentation=presentation_with(f"{TEXT_ID}|local:/Data/Text 1"))
    )

    report = asyncio.run(
        _service(path_lookup=lookup).page_report(context, context_token="ctx-token")
    )

    assert [item.item_id for item in report.items] == [canonical(PAGE_ID), canonical(TEXT_ID)]


def test_unavailable_context_raises() -> None:
    context = FakeContextSource(error=OSError("host went away"))

    with pytest.raises(ContextUnavailableError, match="host went away"):
        asyncio.run(_service().page_report(context))


def test_context_without_anchor_raises() -> None:
    context = FakeContextSource(page_context(None))

    with pytest.raises(NoCurrentItemError):
        asyncio.run(_service().page_report(context))


def test_total_transport_failure_raises() -> None:
    service = _service(
        authoring=FakeAuthoringQuery(error=ConnectionError("cm down")),
        published=FakePublishedQuery(error=ConnectionError("edge down")),
    )

    with pytest.raises(FetchFailedError, match="cm down"):
        asyncio.run(service.items_report([PAGE_ID]))


def test_published_failure_degrades_to_partial_report() -> None:
    service = _service(
        authoring=FakeAuthoringQuery({PAGE_ID: authoring_record(PAGE_ID, version=4)}),
        published=FakePublishedQuery(error=ConnectionError("edge down")),
    )

    report = asyncio.run(service.items_report([PAGE_ID, TEXT_ID]))

    assert [item.is_published for item in report.items] == [False, False]
    assert report.current_item.latest_version == 4
    assert report.diagnostics == ("live: Response error: ConnectionError: edge down",)


def test_items_report_validates_and_deduplicates() -> None:
    authoring = FakeAuthoringQuery()

    report = asyncio.run(
        _service(authoring=authoring).items_report(
            [f"{{{TEXT_ID}}}", "not-an-id", canonical(TEXT_ID), PAGE_ID],
        )
    )

    assert authoring.calls == [((canonical(TEXT_ID), canonical(PAGE_ID)), None)]
    assert report.current_item.item_id == canonical(TEXT_ID)
    assert [item.item_id for item in report.referenced_items] == [canonical(PAGE_ID)]


def test_items_report_without_valid_ids_raises() -> None:
    with pytest.raises(NoCurrentItemError):
        asyncio.run(_service().items_report(["", "nope"]))


def test_field_references_add_a_second_pass() -> None:
    authoring = FakeAuthoringQuery(
        {
            PAGE_ID: authoring_record(
                PAGE_ID,
                fields=(
                    FieldValue(name="Link", value=f'<link id="{{{LINK_ID}}}" />'),
                    FieldValue(name="Teaser", value=TEXT_ID),
                ),
            ),
            TEXT_ID: authoring_record(TEXT_ID),
            LINK_ID: authoring_record(LINK_ID, version=2),
        }
    )
    published = FakePublishedQuery({LINK_ID: live_record(LINK_ID, version=2)})

    report = asyncio.run(
        _service(authoring=authoring, published=published).items_report(
            [PAGE_ID, TEXT_ID],
            include_field_references=True,
        )
    )

    assert [call[0] for call in authoring.calls] == [
        (canonical(PAGE_ID), canonical(TEXT_ID)),
        (canonical(LINK_ID),),
    ]
    link = report.referenced_items[-1]
    assert link.item_id == canonical(LINK_ID)
    assert link.item_type is ItemType.REFERENCE
    assert link.status == "up_to_date"


def test_select_item_ids() -> None:
    assert select_item_ids([f" {PAGE_ID} ", "x", PAGE_ID.lower()]) == [canonical(PAGE_ID)]


def test_resolve_context_token() -> None:
    app_context = FakeContextSource({"resourceAccess": [{"context": {"live": "live-token"}}]})

    assert asyncio.run(resolve_context_token(app_context)) == "live-token"
    assert asyncio.run(resolve_context_token(FakeContextSource({}))) is None
    assert asyncio.run(resolve_context_token(FakeContextSource(error=OSError()))) is None
    assert asyncio.run(resolve_context_token(None)) is None


def test_authoring_cannot_be_compared_with_itself() -> None:
    async def run() -> None:
        async with open_report_service(compare_with=DataSource.AUTHORING):
            pass

    with pytest.raises(ValueError, match="itself"):
        asyncio.run(run())


def _configs() -> tuple[AuthoringConfig, EdgeConfig]:
    authoring = AuthoringConfig(
        resilience=ResilienceConfig(
            name="authoring",
            base_url=AUTHORING_URL,
            retry=RetryPolicy(total=0),
        ),
        preview_url=PREVIEW_URL,
    )
    edge = EdgeConfig(
        resilience=ResilienceConfig(
            name="edge",
            base_url=EDGE_URL,
            retry=RetryPolicy(total=0),
            default_headers={"sc_apikey": "edge-key"},
        ),
    )
    return authoring, edge


def _sitecore_handler(seen: list[str]) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        query = json.loads(request.content)["query"]
        seen.append(query.split(" ", 2)[1])
        if url.startswith(EDGE_URL) or url.startswith(PREVIEW_URL):
            return httpx.Response(
                200,
                json={"data": {"item0": {"id": PAGE_ID, "version": 2}, "item1": None}},
            )
        if "ResolveLocalDatasourcePaths" in query:
            return httpx.Response(200, json={"data": {"path0": {"itemId": TEXT_ID}}})
        return httpx.Response(
            200,
            json={
                "data": {
                    "item0": {"itemId": PAGE_ID, "name": "Home", "version": 3},
                    "item1": {"itemId": TEXT_ID, "name": "Text 1", "version": 1},
                }
            },
        )

    return handler


def test_build_items_report_against_mocked_endpoints() -> None:
    seen: list[str] = []
    authoring_config, edge_config = _configs()

    report = build_items_report(
        [PAGE_ID, TEXT_ID],
        context_token="ctx-token",
        authoring_config=authoring_config,
        edge_config=edge_config,
        client_factory=make_client_factory(_sitecore_handler(seen)),
    )

    assert isinstance(report, Report)
    assert sorted(seen) == ["GetAuthoringItems", "GetLiveItems"]
    assert report.current_item.is_outdated
    assert report.current_item.version_difference == 1
    assert not report.referenced_items[0].is_published


def test_build_page_report_with_preview_and_app_context() -> None:
    seen: list[str] = []
    authoring_config, edge_config = _configs()

    report = build_page_report(
        FakeContextSource(page_context(presentation=presentation_with("local:/Data/Text 1"))),
        application_context=FakeContextSource({"sitecoreContextId": "ctx-token"}),
        compare_with=DataSource.PREVIEW,
        authoring_config=authoring_config,
        edge_config=edge_config,
        client_factory=make_client_factory(_sitecore_handler(seen)),
    )

    assert seen[0] == "ResolveLocalDatasourcePaths"
    assert sorted(seen[1:]) == ["GetAuthoringItems", "GetPreviewItems"]
    assert [item.item_id for item in report.items] == [canonical(PAGE_ID), canonical(TEXT_ID)]
    assert report.current_item.published_version == 2
