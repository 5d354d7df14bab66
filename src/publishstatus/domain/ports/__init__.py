"""Domain port definitions for adapters."""

from __future__ import annotations

from .context import ContextSource
from .fetching import (
    AuthoringItemQuery,
    GraphQLResult,
    PathLookup,
    PublishedItemQuery,
    QueryEnvelope,
    item_alias,
    path_alias,
)

__all__ = [
    "AuthoringItemQuery",
    "ContextSource",
    "GraphQLResult",
    "PathLookup",
    "PublishedItemQuery",
    "QueryEnvelope",
    "item_alias",
    "path_alias",
]
