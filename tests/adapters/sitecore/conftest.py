"""Shared fixtures for Sitecore adapter tests."""

from __future__ import annotations

import pytest

from publishstatus.config import AuthoringConfig, EdgeConfig, ResilienceConfig, RetryPolicy
from tests.helpers.sitecore import AUTHORING_URL, EDGE_URL, PREVIEW_URL


@pytest.fixture
def authoring_config() -> AuthoringConfig:
    return AuthoringConfig(
        resilience=ResilienceConfig(
            name="authoring",
            base_url=AUTHORING_URL,
            retry=RetryPolicy(total=0),
            default_headers={"Authorization": "Bearer secret"},
        ),
        preview_url=PREVIEW_URL,
    )


@pytest.fixture
def edge_config() -> EdgeConfig:
    return EdgeConfig(
        resilience=ResilienceConfig(
            name="edge",
            base_url=EDGE_URL,
            retry=RetryPolicy(total=0),
            default_headers={"sc_apikey": "edge-key"},
        ),
    )
