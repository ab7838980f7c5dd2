"""
Constructor conveniences for schema nodes.

    from schema_to_openapi.schema_ast import builder as s

    s.object_({"id": s.number().integer().required(), "name": s.string()})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .nodes import Kind, Match, SchemaNode


def any_() -> SchemaNode:
    return SchemaNode(kind=Kind.ANY)


def string() -> SchemaNode:
    return SchemaNode(kind=Kind.STRING)


def number() -> SchemaNode:
    return SchemaNode(kind=Kind.NUMBER)


def binary() -> SchemaNode:
    return SchemaNode(kind=Kind.BINARY)


def date() -> SchemaNode:
    return SchemaNode(kind=Kind.DATE)


def boolean() -> SchemaNode:
    return SchemaNode(kind=Kind.BOOLEAN)


def array(*items: SchemaNode) -> SchemaNode:
    return SchemaNode(kind=Kind.ARRAY, item_schemas=list(items))


def object_(keys: Mapping[str, Any] | None = None) -> SchemaNode:
    """Build an object node; ``keys`` maps each key to its child schema."""
    node = SchemaNode(kind=Kind.OBJECT)
    if keys is not None:
        node = node.keys(dict(keys))
    return node


def alternatives(*schemas: SchemaNode) -> SchemaNode:
    return SchemaNode(kind=Kind.ALTERNATIVES, matches=[Match(schema=schema) for schema in schemas])


def when(
    ref: str,
    *,
    is_: SchemaNode | None = None,
    then: SchemaNode | None = None,
    otherwise: SchemaNode | None = None,
    base: SchemaNode | None = None,
) -> SchemaNode:
    """Build a conditional alternatives node keyed on the field ``ref``.

    ``base`` is the type used when the condition is not selected and no
    ``otherwise`` branch is given.
    """
    node = SchemaNode(kind=Kind.ALTERNATIVES, base_type=base)
    return node.conditional(ref, is_=is_, then=then, otherwise=otherwise)


def link(ref: str) -> SchemaNode:
    return SchemaNode(kind=Kind.LINK, link_ref=ref)
