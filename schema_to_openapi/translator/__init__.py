"""
Translator module.

Converts schema nodes into OpenAPI schema objects, collecting named
components in a ComponentRegistry.
"""

from __future__ import annotations

from .errors import InvalidInput, TranslationError, UnrecognizedKind, UnrecognizedSchema
from .registry import ComponentRegistry, reference
from .translator import (
    PATTERNS,
    SchemaTranslator,
    TranslationBatch,
    TranslationResult,
    translate,
)

__all__ = [
    "SchemaTranslator",
    "TranslationResult",
    "TranslationBatch",
    "translate",
    "ComponentRegistry",
    "reference",
    "PATTERNS",
    "TranslationError",
    "InvalidInput",
    "UnrecognizedSchema",
    "UnrecognizedKind",
]
