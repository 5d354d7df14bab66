"""Sitecore Experience Edge (live/published) endpoint configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    ShouldCacheHook,
)

DEFAULT_EDGE_URL = "https://edge.sitecorecloud.io/api/graphql/v1"
EDGE_TIMEOUT_SECONDS = 10.0
DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True, slots=True)
class EdgeConfig:
    resilience: ResilienceConfig
    language: str = DEFAULT_LANGUAGE


def get_edge_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> EdgeConfig:
    values = require_env_vars(("SITECORE_EDGE_API_KEY",))
    cache_ttl = optional_float_env_var("SITECORE_EDGE_CACHE_TTL")
    cache = CacheConfig(ttl_seconds=cache_ttl, should_cache=cache_predicate) if cache_ttl else None

    return EdgeConfig(
        resilience=resilience
        or ResilienceConfig(
            name="edge",
            base_url=optional_env_var("SITECORE_EDGE_URL") or DEFAULT_EDGE_URL,
            timeout_seconds=EDGE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            retry=RetryPolicy(total=4),
            cache=cache,
            default_headers={"sc_apikey": values["SITECORE_EDGE_API_KEY"]},
        ),
    )
