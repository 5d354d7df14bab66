"""GraphQL query text for the authoring, preview and live endpoints.

Every value is interpolated as an escaped GraphQL string literal, so a quote or
backslash in a path cannot break out of its argument.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from publishstatus.domain.identifiers import to_braced, to_hyphenated
from publishstatus.domain.ports.fetching import item_alias, path_alias

if TYPE_CHECKING:
    from collections.abc import Sequence

AUTHORING_ITEM_SELECTION = """
    itemId
    name
    path
    version
    template {
      name
    }
    language {
      name
    }
    fields {
      nodes {
        name
        value
      }
    }"""

PUBLISHED_ITEM_SELECTION = """
    id
    name
    version
    language {
      name
    }"""


def graphql_string(value: str) -> str:
    """Render ``value`` as a GraphQL string literal (JSON escaping is a valid subset)."""

    return json.dumps(value, ensure_ascii=False)


def build_authoring_items_query(
    item_ids: Sequence[str],
    *,
    database: str,
    language: str,
) -> str:
    fragments = [
        f"  {item_alias(index)}: item(where: {{"
        f" database: {graphql_string(database)}"
        f" itemId: {graphql_string(to_hyphenated(item_id))}"
        f" language: {graphql_string(language)}"
        f" }}) {{{AUTHORING_ITEM_SELECTION}\n  }}"
        for index, item_id in enumerate(item_ids)
    ]
    return _operation("GetAuthoringItems", fragments)


def build_published_items_query(
    item_ids: Sequence[str],
    *,
    language: str,
    operation_name: str = "GetLiveItems",
) -> str:
    """Live-shaped lookup: items are addressed by braced identifier path."""

    fragments = [
        f"  {item_alias(index)}: item("
        f"path: {graphql_string(to_braced(item_id))}, "
        f"language: {graphql_string(language)}) {{{PUBLISHED_ITEM_SELECTION}\n  }}"
        for index, item_id in enumerate(item_ids)
    ]
    return _operation(operation_name, fragments)


def build_path_lookup_query(
    paths: Sequence[str],
    *,
    database: str,
    language: str,
) -> str:
    fragments = [
        f"  {path_alias(index)}: item(where: {{"
        f" database: {graphql_string(database)}"
        f" path: {graphql_string(path)}"
        f" language: {graphql_string(language)}"
        " }) {\n    itemId\n  }"
        for index, path in enumerate(paths)
    ]
    return _operation("ResolveLocalDatasourcePaths", fragments)


def _operation(name: str, fragments: Sequence[str]) -> str:
    body = "\n".join(fragments)
    return f"query {name} {{\n{body}\n}}"
