"""Owned, lazily initialised HTTP client handles."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from publishstatus.adapters.http_resilience import ResilientClient
from publishstatus.config.http_resilience import ClientInitConfig

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from publishstatus.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


class ClientInitializationError(RuntimeError):
    """Raised when a client could not be created within the configured attempts."""


class ClientHandle:
    """Creates its client on first use and keeps it until ``aclose``.

    Creation is retried with exponential backoff. Concurrent first users share
    one creation attempt. After ``aclose`` the next ``acquire`` builds a fresh
    client.
    """

    def __init__(
        self,
        resilience: ResilienceConfig,
        *,
        init: ClientInitConfig | None = None,
        client_factory: ClientFactory | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.resilience = resilience
        self._init = init or ClientInitConfig()
        self._client_factory = client_factory or ResilientClient
        self._sleep = sleep
        self._client: ResilientClient | None = None
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def acquire(self) -> ResilientClient:
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                self._client = await self._initialize()
            return self._client

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def __aenter__(self) -> ClientHandle:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _initialize(self) -> ResilientClient:
        attempts = max(1, self._init.attempts)
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                client = self._client_factory(self.resilience)
            except Exception as exc:  # noqa: BLE001
                last_error = exc
                log.warning(
                    "Creating %s client failed (attempt %d/%d): %s",
                    self.resilience.name,
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    await self._sleep(self._init.delay_for(attempt))
                continue
            log.debug("Initialised %s client", self.resilience.name)
            return client

        msg = f"Failed to initialise {self.resilience.name} client after {attempts} attempt(s)"
        raise ClientInitializationError(msg) from last_error
