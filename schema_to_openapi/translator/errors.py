"""
Errors raised by the translator.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for errors that abort a translation."""

    pass


class InvalidInput(TranslationError, ValueError):
    """Raised when no schema was supplied."""

    pass


class UnrecognizedSchema(TranslationError, TypeError):
    """Raised when the supplied value is neither a schema node nor a mapping of keys."""

    pass


class UnrecognizedKind(TranslationError, TypeError):
    """Raised when a schema node's kind has no conversion rule."""

    pass
