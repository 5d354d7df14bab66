"""Translation of Sitecore GraphQL bodies into domain envelopes."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from publishstatus.domain.model import AuthoringRecord, FieldValue, LiveRecord
from publishstatus.domain.ports.fetching import GraphQLResult, QueryEnvelope

from .schema import (
    AuthoringItemPayload,
    GraphQLResponseBody,
    PathLookupPayload,
    PublishedItemPayload,
)

if TYPE_CHECKING:
    from .schema import NamedRef

log = getLogger(__name__)


def translate_authoring_item(payload: AuthoringItemPayload) -> AuthoringRecord:
    nodes = payload.fields.nodes if payload.fields is not None else []
    return AuthoringRecord(
        item_id=payload.item_id,
        name=payload.name,
        path=payload.path,
        version=payload.version,
        template=_name_of(payload.template),
        language=_name_of(payload.language),
        fields=tuple(FieldValue(name=node.name, value=node.value) for node in nodes),
    )


def translate_published_item(payload: PublishedItemPayload) -> LiveRecord:
    return LiveRecord(
        item_id=payload.id,
        name=payload.name,
        version=payload.version,
        language=_name_of(payload.language),
    )


def translate_path_lookup(payload: PathLookupPayload) -> str | None:
    return payload.item_id or None


def translate_authoring_response(body: GraphQLResponseBody) -> QueryEnvelope[AuthoringRecord]:
    return _translate_body(body, AuthoringItemPayload, translate_authoring_item)


def translate_published_response(body: GraphQLResponseBody) -> QueryEnvelope[LiveRecord]:
    return _translate_body(body, PublishedItemPayload, translate_published_item)


def translate_path_lookup_response(body: GraphQLResponseBody) -> QueryEnvelope[str]:
    return _translate_body(body, PathLookupPayload, translate_path_lookup)


def _translate_body[TModel: BaseModel, TRecord](
    body: GraphQLResponseBody,
    model: type[TModel],
    translate: Callable[[TModel], TRecord | None],
) -> QueryEnvelope[TRecord]:
    errors = [error.message for error in body.errors]
    if body.data is None:
        return QueryEnvelope(response=GraphQLResult(data=None, errors=tuple(errors)))

    slots: dict[str, TRecord | None] = {}
    for alias, raw in body.data.items():
        if raw is None:
            slots[alias] = None
            continue
        try:
            payload = model.model_validate(raw)
        except ValidationError as exc:
            log.warning("Dropping malformed %s payload: %s", alias, exc)
            errors.append(f"{alias}: malformed payload ({exc.error_count()} validation error(s))")
            slots[alias] = None
            continue
        slots[alias] = translate(payload)

    return QueryEnvelope.success(slots, errors)


def _name_of(ref: NamedRef | None) -> str | None:
    if ref is None:
        return None
    return ref.name or None
