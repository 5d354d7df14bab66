from __future__ import annotations

import asyncio

from publishstatus.domain.local_paths import build_absolute_path, resolve_local_paths
from tests.helpers.sitecore import IMAGE_ID, TEXT_ID, FakePathLookup, canonical

BASE = "/sitecore/content/Home"


def test_build_absolute_path() -> None:
    assert build_absolute_path("Text 1", BASE) == f"{BASE}/Data/Text 1"
    assert build_absolute_path("Data/Text 1", f"{BASE}/") == f"{BASE}/Data/Text 1"
    assert build_absolute_path("/sitecore/content/Shared", BASE) == "/sitecore/content/Shared"
    assert build_absolute_path("Text 1", "") is None


def test_resolves_in_one_batched_call() -> None:
    lookup = FakePathLookup(
        {
            f"{BASE}/Data/Text 1": TEXT_ID,
            "/sitecore/content/Shared/Footer": f"{{{IMAGE_ID.lower()}}}",
        }
    )

    resolved = asyncio.run(
        resolve_local_paths(
            lookup,
            ["Text 1", "/sitecore/content/Shared/Footer", "Missing"],
            BASE,
            context_token="token",
        )
    )

    assert resolved == {
        "Text 1": canonical(TEXT_ID),
        "/sitecore/content/Shared/Footer": canonical(IMAGE_ID),
        "Missing": None,
    }
    assert lookup.calls == [
        (
            (f"{BASE}/Data/Text 1", "/sitecore/content/Shared/Footer", f"{BASE}/Data/Missing"),
            "token",
        )
    ]


def test_lookup_failure_maps_every_path_to_none() -> None:
    lookup = FakePathLookup(error=RuntimeError("unreachable"))

    resolved = asyncio.run(
        resolve_local_paths(lookup, ["Text 1", "Image"], BASE, context_token="token")
    )

    assert resolved == {"Text 1": None, "Image": None}


def test_relative_paths_without_base_are_not_looked_up() -> None:
    lookup = FakePathLookup()

    resolved = asyncio.run(resolve_local_paths(lookup, ["Text 1"], "", context_token="token"))

    assert resolved == {"Text 1": None}
    assert lookup.calls == []
