from __future__ import annotations

import asyncio

import httpx
import pytest

from publishstatus.adapters.http_resilience import ResilientClient
from publishstatus.adapters.sitecore import ClientHandle, ClientInitializationError
from publishstatus.config import ClientInitConfig, ResilienceConfig

RESILIENCE = ResilienceConfig(name="edge", base_url="https://edge.example.test")


def _mock_client(resilience: ResilienceConfig) -> ResilientClient:
    return ResilientClient(
        resilience,
        transport=httpx.MockTransport(lambda _: httpx.Response(200, json={})),
    )


def test_client_is_created_once_and_shared() -> None:
    created: list[ResilientClient] = []

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = _mock_client(resilience)
        created.append(client)
        return client

    async def run() -> tuple[ResilientClient, ...]:
        async with ClientHandle(RESILIENCE, client_factory=factory) as handle:
            return tuple(await asyncio.gather(*(handle.acquire() for _ in range(5))))

    clients = asyncio.run(run())

    assert len(created) == 1
    assert all(client is created[0] for client in clients)
    assert created[0].is_closed


def test_creation_is_retried_with_backoff() -> None:
    delays: list[float] = []
    attempts = 0

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    def flaky_factory(resilience: ResilienceConfig) -> ResilientClient:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise OSError("not yet")
        return _mock_client(resilience)

    async def run() -> bool:
        handle = ClientHandle(
            RESILIENCE,
            init=ClientInitConfig(attempts=3, delay_seconds=0.5, backoff_factor=2.0),
            client_factory=flaky_factory,
            sleep=fake_sleep,
        )
        await handle.acquire()
        initialized = handle.is_initialized
        await handle.aclose()
        return initialized

    assert asyncio.run(run())
    assert attempts == 3
    assert delays == [0.5, 1.0]


def test_exhausted_attempts_raise() -> None:
    async def fake_sleep(_: float) -> None:
        return None

    def broken_factory(_: ResilienceConfig) -> ResilientClient:
        raise OSError("never")

    handle = ClientHandle(
        RESILIENCE,
        init=ClientInitConfig(attempts=2),
        client_factory=broken_factory,
        sleep=fake_sleep,
    )

    with pytest.raises(ClientInitializationError, match="after 2 attempt"):
        asyncio.run(handle.acquire())
    assert not handle.is_initialized


def test_closed_handle_builds_a_fresh_client() -> None:
    created: list[ResilientClient] = []

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = _mock_client(resilience)
        created.append(client)
        return client

    async def run() -> None:
        handle = ClientHandle(RESILIENCE, client_factory=factory)
        await handle.acquire()
        await handle.aclose()
        await handle.acquire()
        await handle.aclose()

    asyncio.run(run())

    assert len(created) == 2


def test_init_delay_schedule() -> None:
    config = ClientInitConfig(delay_seconds=1.0, backoff_factor=2.0)

    assert [config.delay_for(attempt) for attempt in (1, 2, 3)] == [1.0, 2.0, 4.0]
