"""Context documents loaded from JSON files."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class JsonContextSource:
    """Serves a page- or application-context document stored as JSON.

    Read and decode errors propagate; the caller decides whether a missing
    document is fatal.
    """

    path: Path

    async def query_context(self) -> object:
        return await asyncio.to_thread(self._load)

    def _load(self) -> object:
        with self.path.open(encoding="utf-8") as handle:
            return json.load(handle)
