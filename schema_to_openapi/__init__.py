"""Validation Schema to OpenAPI

A Python package for translating validation schemas (typed constraint
trees with rules and meta tags) into OpenAPI schema objects, promoting
named sub-schemas to shared components.
"""

__version__ = "1.0.0"

from .config import TranslatorConfig
from .schema_ast import SchemaDescriptionError, SchemaNode, SchemaParser
from .translator import (
    ComponentRegistry,
    InvalidInput,
    SchemaTranslator,
    TranslationBatch,
    TranslationError,
    TranslationResult,
    UnrecognizedKind,
    UnrecognizedSchema,
    translate,
)

__all__ = [
    "translate",
    "SchemaTranslator",
    "TranslationResult",
    "TranslationBatch",
    "TranslatorConfig",
    "ComponentRegistry",
    "SchemaNode",
    "SchemaParser",
    "SchemaDescriptionError",
    "TranslationError",
    "InvalidInput",
    "UnrecognizedSchema",
    "UnrecognizedKind",
]
