"""Pydantic models describing Sitecore GraphQL payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


def _coerce_errors(value: object) -> object:
    if value is None:
        return []
    if isinstance(value, list):
        return [{"message": entry} if isinstance(entry, str) else entry for entry in value]
    return value


class SitecoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NamedRef(SitecoreBaseModel):
    name: str | None = None


class FieldNode(SitecoreBaseModel):
    name: str
    value: str = ""

    _normalize_value = field_validator("value", mode="before")(_none_to_blank)


class FieldConnection(SitecoreBaseModel):
    nodes: list[FieldNode] = Field(default_factory=list["FieldNode"])


class AuthoringItemPayload(SitecoreBaseModel):
    item_id: str | None = Field(default=None, alias="itemId")
    name: str | None = None
    path: str | None = None
    version: int | None = None
    template: NamedRef | None = None
    language: NamedRef | None = None
    fields: FieldConnection | None = None


class PublishedItemPayload(SitecoreBaseModel):
    id: str | None = None
    name: str | None = None
    version: int | None = None
    language: NamedRef | None = None


class PathLookupPayload(SitecoreBaseModel):
    item_id: str | None = Field(default=None, alias="itemId")


class GraphQLErrorLocation(SitecoreBaseModel):
    line: int
    column: int


class GraphQLErrorPayload(SitecoreBaseModel):
    message: str = "Unknown GraphQL error"
    locations: list[GraphQLErrorLocation] | None = None
    path: list[str | int] | None = None


class GraphQLResponseBody(SitecoreBaseModel):
    """Top-level GraphQL body; slot payloads stay raw until translated one by one."""

    data: dict[str, object] | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list["GraphQLErrorPayload"])

    _normalize_errors = field_validator("errors", mode="before")(_coerce_errors)
