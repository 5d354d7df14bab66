"""Sitecore GraphQL adapter package."""

from __future__ import annotations

from .client import (
    AuthoringClient,
    EdgeClient,
    PreviewClient,
    SitecoreAPIError,
    should_cache_published_body,
)
from .handle import ClientHandle, ClientInitializationError
from .queries import (
    build_authoring_items_query,
    build_path_lookup_query,
    build_published_items_query,
)
from .translator import (
    translate_authoring_response,
    translate_path_lookup_response,
    translate_published_response,
)

__all__ = [
    "AuthoringClient",
    "ClientHandle",
    "ClientInitializationError",
    "EdgeClient",
    "PreviewClient",
    "SitecoreAPIError",
    "build_authoring_items_query",
    "build_path_lookup_query",
    "build_published_items_query",
    "should_cache_published_body",
    "translate_authoring_response",
    "translate_path_lookup_response",
    "translate_published_response",
]
