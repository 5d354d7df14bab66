"""Transport settings for the Sitecore GraphQL clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ShouldCacheHook = Callable[[object], bool]

RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retries on throttling, gateway errors and dropped connections.

    Every GraphQL query travels as a side-effect free POST, so POST is retried.
    """

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = frozenset({"POST"})
    status_forcelist: frozenset[int] = RETRYABLE_STATUS_CODES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache for published content; authoring responses are never cached.

    ``sqlite_path`` defaults to the cache file in the data directory.
    """

    ttl_seconds: float
    backend: Literal["sqlite", "memory"] = "sqlite"
    sqlite_path: Path | None = None
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None


@dataclass(slots=True, frozen=True)
class ClientInitConfig:
    """How often and how patiently a lazily created client is (re)built."""

    attempts: int = 3
    delay_seconds: float = 1.0
    backoff_factor: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return self.delay_seconds * self.backoff_factor ** (attempt - 1)
