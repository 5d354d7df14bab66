"""Resolution of symbolic datasource paths into item identifiers."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from .datasources import CONTENT_ROOT_PREFIX, DATA_FOLDER, relative_datasource_name
from .identifiers import to_canonical
from .model import DataSource
from .ports.fetching import path_alias
from .reconciliation import validate_envelope

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .identifiers import ItemIdentifier
    from .ports.fetching import PathLookup

log = getLogger(__name__)

RESOLUTION_LABEL: Final[str] = f"{DataSource.AUTHORING} path resolution"


def build_absolute_path(symbolic_path: str, base_path: str) -> str | None:
    """Place a datasource-relative name under the base item's ``Data`` folder.

    Absolute content paths are returned unchanged. Relative names need a base
    path; without one there is nothing to anchor them to.
    """

    if symbolic_path.startswith(CONTENT_ROOT_PREFIX):
        return symbolic_path
    base = base_path.rstrip("/")
    if not base:
        return None
    return f"{base}/{DATA_FOLDER}{relative_datasource_name(symbolic_path)}"


async def resolve_local_paths(
    lookup: PathLookup,
    symbolic_paths: Sequence[str],
    base_path: str,
    *,
    context_token: str,
) -> dict[str, ItemIdentifier | None]:
    """Map each symbolic path to its item identifier, or ``None`` when unresolved.

    Issues at most one batched lookup. Failures never propagate: every path the
    lookup could not answer maps to ``None`` and the caller carries on with the
    identifiers it already knows.
    """

    resolved: dict[str, ItemIdentifier | None] = dict.fromkeys(symbolic_paths)
    targets: list[tuple[str, str]] = []
    for symbolic_path in resolved:
        absolute_path = build_absolute_path(symbolic_path, base_path)
        if absolute_path is None:
            log.warning("Cannot resolve %r without a base path", symbolic_path)
            continue
        targets.append((symbolic_path, absolute_path))

    if not targets:
        return resolved

    try:
        envelope = await lookup.resolve_paths(
            [absolute_path for _, absolute_path in targets],
            context_token=context_token,
        )
    except Exception as exc:  # noqa: BLE001
        log.error("Local datasource path resolution failed: %s", exc)
        return resolved

    data = validate_envelope(envelope, label=RESOLUTION_LABEL).data or {}
    for index, (symbolic_path, absolute_path) in enumerate(targets):
        item_id = data.get(path_alias(index))
        if item_id:
            resolved[symbolic_path] = to_canonical(item_id)
        else:
            log.warning("No item found at %s", absolute_path)
    return resolved
