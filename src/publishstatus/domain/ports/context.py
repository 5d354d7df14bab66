"""Port for obtaining externally owned context documents."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContextSource(Protocol):
    """Returns an opaque document (page context or application context).

    The shape is not contractual; consumers read it defensively.
    """

    async def query_context(self) -> object: ...


__all__ = ["ContextSource"]
