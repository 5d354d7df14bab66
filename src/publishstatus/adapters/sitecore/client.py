"""GraphQL clients for the Sitecore authoring, preview and live (Edge) endpoints."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from publishstatus.domain.ports.fetching import QueryEnvelope

from .queries import (
    build_authoring_items_query,
    build_path_lookup_query,
    build_published_items_query,
)
from .schema import GraphQLResponseBody
from .translator import (
    translate_authoring_response,
    translate_path_lookup_response,
    translate_published_response,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from publishstatus.config.authoring import AuthoringConfig
    from publishstatus.config.edge import EdgeConfig
    from publishstatus.domain.model import AuthoringRecord, LiveRecord

    from .handle import ClientHandle

log = getLogger(__name__)

CONTEXT_TOKEN_PARAM = "sitecoreContextId"


class SitecoreAPIError(RuntimeError):
    """Raised when a Sitecore endpoint cannot be queried or answers with a non-GraphQL body."""


async def execute_query(
    handle: ClientHandle,
    url: str | None,
    query: str,
    *,
    params: dict[str, str] | None = None,
) -> GraphQLResponseBody:
    if not url:
        raise SitecoreAPIError(f"Missing endpoint URL for {handle.resilience.name} queries")

    client = await handle.acquire()
    log.debug("Executing %s query:\n%s", handle.resilience.name, query)
    response = await client.post_json(url, {"query": query}, params=params)
    response.raise_for_status()

    try:
        payload = response.json()
    except ValueError as exc:
        raise SitecoreAPIError(f"Non-JSON response from {handle.resilience.name}") from exc
    if not isinstance(payload, dict):
        raise SitecoreAPIError(f"Unexpected {handle.resilience.name} response payload")

    return GraphQLResponseBody.model_validate(payload)


def _token_params(endpoint: str, context_token: str | None) -> dict[str, str]:
    if not context_token:
        raise SitecoreAPIError(f"{CONTEXT_TOKEN_PARAM} is required for {endpoint} queries")
    return {CONTEXT_TOKEN_PARAM: context_token}


class AuthoringClient:
    """Draft item lookups and path resolution against the master database."""

    def __init__(self, *, config: AuthoringConfig, handle: ClientHandle) -> None:
        self._config = config
        self._handle = handle

    async def query_items(
        self,
        item_ids: Sequence[str],
        *,
        context_token: str | None = None,
    ) -> QueryEnvelope[AuthoringRecord]:
        if not item_ids:
            return QueryEnvelope.empty()
        query = build_authoring_items_query(
            item_ids,
            database=self._config.database,
            language=self._config.language,
        )
        body = await execute_query(
            self._handle,
            self._config.resilience.base_url,
            query,
            params=_token_params("authoring", context_token),
        )
        return translate_authoring_response(body)

    async def resolve_paths(
        self,
        paths: Sequence[str],
        *,
        context_token: str,
    ) -> QueryEnvelope[str]:
        if not paths:
            return QueryEnvelope.empty()
        query = build_path_lookup_query(
            paths,
            database=self._config.database,
            language=self._config.language,
        )
        body = await execute_query(
            self._handle,
            self._config.resilience.base_url,
            query,
            params=_token_params("authoring", context_token),
        )
        return translate_path_lookup_response(body)


class PreviewClient:
    """Live-shaped lookups served through the authoring transport."""

    def __init__(self, *, config: AuthoringConfig, handle: ClientHandle) -> None:
        self._config = config
        self._handle = handle

    async def query_items(
        self,
        item_ids: Sequence[str],
        *,
        context_token: str | None = None,
    ) -> QueryEnvelope[LiveRecord]:
        if not item_ids:
            return QueryEnvelope.empty()
        query = build_published_items_query(
            item_ids,
            language=self._config.language,
            operation_name="GetPreviewItems",
        )
        body = await execute_query(
            self._handle,
            self._config.preview_url,
            query,
            params=_token_params("preview", context_token),
        )
        return translate_published_response(body)


class EdgeClient:
    """Published item lookups against Experience Edge.

    Edge is reached on its own transport with its own API key; the context token
    of the authoring side is not used here.
    """

    def __init__(self, *, config: EdgeConfig, handle: ClientHandle) -> None:
        self._config = config
        self._handle = handle

    async def query_items(
        self,
        item_ids: Sequence[str],
        *,
        context_token: str | None = None,  # noqa: ARG002
    ) -> QueryEnvelope[LiveRecord]:
        if not item_ids:
            return QueryEnvelope.empty()
        query = build_published_items_query(item_ids, language=self._config.language)
        body = await execute_query(self._handle, self._config.resilience.base_url, query)
        return translate_published_response(body)


def should_cache_published_body(payload: object) -> bool:
    """Only error-free GraphQL bodies are worth keeping in the Edge response cache."""

    return isinstance(payload, dict) and not payload.get("errors")
