"""
Schema AST module.

Contains the schema node definitions, constructor conveniences and the
parser for serialized schema descriptions.
"""

from __future__ import annotations

from .nodes import (
    Flags,
    Kind,
    Match,
    ObjectKey,
    Presence,
    Rule,
    SchemaNode,
    WhenBranch,
)
from .parser import SchemaDescriptionError, SchemaParser

__all__ = [
    "SchemaNode",
    "Kind",
    "Presence",
    "Rule",
    "Flags",
    "ObjectKey",
    "Match",
    "WhenBranch",
    "SchemaParser",
    "SchemaDescriptionError",
]
