"""Resilient async transport shared by the Sitecore clients.

Layers, outermost first: rate limiter, optional hishel response cache,
httpx-retries retry transport, then the network (or an injected transport).
"""

from __future__ import annotations

import json
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from publishstatus.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from publishstatus.config.http_resilience import (
        CacheConfig,
        RateLimit,
        ResilienceConfig,
        RetryPolicy,
        ShouldCacheHook,
    )

# Every query is POSTed to the same URL; cached entries are told apart by body.
BODY_KEYED_CACHE: dict[str, object] = {"hishel_body_key": True}


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """POSTs JSON bodies with retries, optional rate limiting and optional caching.

    ``transport`` replaces the network underneath the retry layer; tests pass an
    ``httpx.MockTransport`` here.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = _build_limiter(config.ratelimit)

        retry_transport = RetryTransport(transport=transport, retry=build_retry(config.retry))
        base_url = config.base_url or ""
        headers = dict(config.default_headers or {})

        cache = _build_cache_components(config.cache)
        if cache is None:
            self._extensions: dict[str, object] | None = None
            self._client = httpx.AsyncClient(
                base_url=base_url,
                headers=headers,
                timeout=config.timeout_seconds,
                transport=retry_transport,
            )
        else:
            storage, policy = cache
            self._extensions = dict(BODY_KEYED_CACHE)
            self._client = AsyncCacheClient(
                base_url=base_url,
                headers=headers,
                timeout=config.timeout_seconds,
                transport=retry_transport,
                storage=storage,
                policy=policy,
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        params: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        async with self._throttle():
            return await self._client.post(
                url,
                json=payload,
                params=params,
                extensions=self._extensions,
            )

    def _throttle(self) -> AbstractAsyncContextManager[object]:
        if self._limiter is None:
            return nullcontext()
        return self._limiter


class _JsonBodyFilter(BaseFilter[HishelCacheResponse]):
    """Hishel response filter that hands the decoded JSON body to a predicate."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return False
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False
        return bool(self._predicate(payload))


def _build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


def _build_cache_components(
    config: CacheConfig | None,
) -> tuple[AsyncSqliteStorage, FilterPolicy] | None:
    if config is None:
        return None

    if config.backend == "memory":
        database_path = ":memory:"
    elif config.backend == "sqlite":
        database_path = str(config.sqlite_path or get_storage_config().http_cache_path())
    else:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)

    # A cache hit must not extend the life of stale published content.
    storage = AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.ttl_seconds,
        refresh_ttl_on_access=False,
    )
    # Without a filter policy hishel follows HTTP caching rules, which never store POST.
    response_filters: list[BaseFilter[HishelCacheResponse]] = []
    if config.should_cache is not None:
        response_filters.append(_JsonBodyFilter(config.should_cache))
    policy = FilterPolicy(response_filters=response_filters)
    return storage, policy
