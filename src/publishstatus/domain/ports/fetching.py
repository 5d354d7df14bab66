"""Ports and result envelopes for bulk item queries.

Bulk queries alias the item at ordinal ``i`` as ``item{i}`` (``path{i}`` for path
lookups). The requested identifier list is the only source of ordinal truth; the
payloads are never used to re-derive identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from publishstatus.domain.model import AuthoringRecord, LiveRecord


def item_alias(index: int) -> str:
    return f"item{index}"


def path_alias(index: int) -> str:
    return f"path{index}"


@dataclass(frozen=True, slots=True)
class GraphQLResult[TPayload]:
    """Body of an answered query: alias-keyed payloads plus GraphQL error messages."""

    data: Mapping[str, TPayload | None] | None = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class QueryEnvelope[TPayload]:
    """Either an answered query (``response``) or a transport failure (``error``)."""

    response: GraphQLResult[TPayload] | None = None
    error: str | None = None

    @classmethod
    def success(
        cls,
        data: Mapping[str, TPayload | None],
        errors: Sequence[str] = (),
    ) -> QueryEnvelope[TPayload]:
        return cls(response=GraphQLResult(data=data, errors=tuple(errors)))

    @classmethod
    def failure(cls, error: BaseException | str) -> QueryEnvelope[TPayload]:
        if isinstance(error, BaseException):
            message = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
        else:
            message = error
        return cls(error=message)

    @classmethod
    def empty(cls) -> QueryEnvelope[TPayload]:
        return cls.success({})

    @property
    def failed(self) -> bool:
        return self.error is not None


@runtime_checkable
class AuthoringItemQuery(Protocol):
    """Bulk lookup of draft item projections."""

    async def query_items(
        self,
        item_ids: Sequence[str],
        *,
        context_token: str | None = None,
    ) -> QueryEnvelope[AuthoringRecord]: ...


@runtime_checkable
class PublishedItemQuery(Protocol):
    """Bulk lookup of published (live or preview) item projections."""

    async def query_items(
        self,
        item_ids: Sequence[str],
        *,
        context_token: str | None = None,
    ) -> QueryEnvelope[LiveRecord]: ...


@runtime_checkable
class PathLookup(Protocol):
    """Batched content-path to item-identifier lookup against the authoring source."""

    async def resolve_paths(
        self,
        paths: Sequence[str],
        *,
        context_token: str,
    ) -> QueryEnvelope[str]: ...


__all__ = [
    "AuthoringItemQuery",
    "GraphQLResult",
    "PathLookup",
    "PublishedItemQuery",
    "QueryEnvelope",
    "item_alias",
    "path_alias",
]
