"""Sitecore authoring (draft/master) endpoint configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

AUTHORING_TIMEOUT_SECONDS = 20.0
DEFAULT_DATABASE = "master"
DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True, slots=True)
class AuthoringConfig:
    """Authoring and preview endpoints share one transport and one context token."""

    resilience: ResilienceConfig
    preview_url: str | None = None
    database: str = DEFAULT_DATABASE
    language: str = DEFAULT_LANGUAGE


def get_authoring_config(*, resilience: ResilienceConfig | None = None) -> AuthoringConfig:
    values = require_env_vars(("SITECORE_AUTHORING_URL",))
    access_token = optional_env_var("SITECORE_ACCESS_TOKEN")
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else None

    return AuthoringConfig(
        resilience=resilience
        or ResilienceConfig(
            name="authoring",
            base_url=values["SITECORE_AUTHORING_URL"],
            timeout_seconds=AUTHORING_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            retry=RetryPolicy(total=3),
            default_headers=headers,
        ),
        preview_url=optional_env_var("SITECORE_PREVIEW_URL"),
    )
