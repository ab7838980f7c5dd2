"""
Node definitions for validation schemas.

These nodes describe the input of the translator: a tree of typed
constraints carrying rules, flags and out-of-band meta tags. Nodes are
treated as immutable once built; every fluent modifier returns a
modified copy and leaves the receiver untouched.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Kind(str, Enum):
    """Kinds of schema nodes the translator knows about."""

    NUMBER = "number"
    STRING = "string"
    BINARY = "binary"
    DATE = "date"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ALTERNATIVES = "alternatives"
    ANY = "any"
    LINK = "link"


class Presence(str, Enum):
    """Presence flag of a node inside its parent."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


@dataclass
class Rule:
    """A named constraint, e.g. ``min`` with a ``limit`` argument."""

    name: str = ""
    args: dict[str, Any] = field(default_factory=dict)


@dataclass
class Flags:
    """Scalar node-level properties."""

    presence: Presence | None = None
    description: str | None = None
    label: str | None = None  # rendered as "title"
    default: Any = None
    has_default: bool = False
    encoding: str | None = None  # binary only, e.g. "base64"
    unknown: bool | None = None  # object only, None = not set


@dataclass
class ObjectKey:
    """A declared key of an object node."""

    key: str = ""
    schema: Any = None  # SchemaNode, or a plain mapping of key -> SchemaNode


@dataclass
class WhenBranch:
    """A conditional branch keyed on an external field reference."""

    ref: str = ""
    is_: SchemaNode | None = None
    then: SchemaNode | None = None
    otherwise: SchemaNode | None = None


@dataclass
class Match:
    """A candidate of an alternatives node.

    Either a plain ``schema`` or a conditional ``then``/``otherwise`` pair
    keyed on ``ref``.
    """

    schema: SchemaNode | None = None
    ref: str | None = None
    is_: SchemaNode | None = None
    then: SchemaNode | None = None
    otherwise: SchemaNode | None = None

    @property
    def is_conditional(self) -> bool:
        return self.ref is not None


@dataclass
class SchemaNode:
    """One node of a validation schema tree."""

    kind: Kind | str = Kind.ANY

    # Ordered constraints; later entries of the same name win
    rules: list[Rule] = field(default_factory=list)

    # Literal values the field may take (None marks "nullable")
    allowed_values: list[Any] = field(default_factory=list)

    flags: Flags = field(default_factory=Flags)

    # Meta tags in attachment order; later entries win on key conflict
    metas: list[dict[str, Any]] = field(default_factory=list)

    examples: list[Any] = field(default_factory=list)

    # Type conversion preference; False means strict mode
    convert: bool | None = None

    # Object keys (None = no keys declared)
    object_keys: list[ObjectKey] | None = None

    # Candidate array item schemas
    item_schemas: list[SchemaNode] = field(default_factory=list)

    # Alternatives candidates and the base type used by conditionals
    matches: list[Match] = field(default_factory=list)
    base_type: SchemaNode | None = None

    # Conditional branches attached to a non-alternatives node
    whens: list[WhenBranch] = field(default_factory=list)

    # Identifier of this node, and the target of a link node
    schema_id: str | None = None
    link_ref: str | None = None

    # ---- lookups -------------------------------------------------------

    def get_meta(self, key: str, default: Any = None) -> Any:
        """Look up a meta tag, later tags overriding earlier ones."""
        flattened: dict[str, Any] = {}
        for tags in self.metas:
            flattened.update(tags)
        return flattened.get(key, default)

    def find_rule(self, name: str) -> Rule | None:
        """Return the last rule with the given name, if any."""
        for rule in reversed(self.rules):
            if rule.name == name:
                return rule
        return None

    def has_rule(self, name: str) -> bool:
        return self.find_rule(name) is not None

    @property
    def presence(self) -> Presence | None:
        return self.flags.presence

    @property
    def is_strict(self) -> bool:
        return self.convert is False

    # ---- fluent modifiers ----------------------------------------------

    def _copy(self) -> SchemaNode:
        return dataclasses.replace(
            self,
            rules=list(self.rules),
            allowed_values=list(self.allowed_values),
            flags=dataclasses.replace(self.flags),
            metas=list(self.metas),
            examples=list(self.examples),
            object_keys=None if self.object_keys is None else list(self.object_keys),
            item_schemas=list(self.item_schemas),
            matches=list(self.matches),
            whens=list(self.whens),
        )

    def rule(self, name: str, **args: Any) -> SchemaNode:
        clone = self._copy()
        clone.rules.append(Rule(name=name, args=args))
        return clone

    def min(self, limit: int | float) -> SchemaNode:
        return self.rule("min", limit=limit)

    def max(self, limit: int | float) -> SchemaNode:
        return self.rule("max", limit=limit)

    def length(self, limit: int) -> SchemaNode:
        return self.rule("length", limit=limit)

    def integer(self) -> SchemaNode:
        return self.rule("integer")

    def precision(self, limit: int) -> SchemaNode:
        return self.rule("precision", limit=limit)

    def positive(self) -> SchemaNode:
        return self.rule("sign", sign="positive")

    def negative(self) -> SchemaNode:
        return self.rule("sign", sign="negative")

    def pattern(self, regex: Any) -> SchemaNode:
        return self.rule("pattern", regex=regex)

    regex = pattern

    def alphanum(self) -> SchemaNode:
        return self.rule("alphanum")

    def token(self) -> SchemaNode:
        return self.rule("token")

    def lowercase(self) -> SchemaNode:
        return self.rule("case", direction="lower")

    def uppercase(self) -> SchemaNode:
        return self.rule("case", direction="upper")

    def email(self) -> SchemaNode:
        return self.rule("email")

    def iso_date(self) -> SchemaNode:
        return self.rule("isoDate")

    def unique(self) -> SchemaNode:
        return self.rule("unique")

    def _with_flags(self, **changes: Any) -> SchemaNode:
        clone = self._copy()
        clone.flags = dataclasses.replace(clone.flags, **changes)
        return clone

    def required(self) -> SchemaNode:
        return self._with_flags(presence=Presence.REQUIRED)

    def optional(self) -> SchemaNode:
        return self._with_flags(presence=Presence.OPTIONAL)

    def forbidden(self) -> SchemaNode:
        return self._with_flags(presence=Presence.FORBIDDEN)

    def description(self, text: str) -> SchemaNode:
        return self._with_flags(description=text)

    def label(self, text: str) -> SchemaNode:
        return self._with_flags(label=text)

    def default(self, value: Any) -> SchemaNode:
        return self._with_flags(default=value, has_default=True)

    def encoding(self, name: str) -> SchemaNode:
        return self._with_flags(encoding=name)

    def unknown(self, allow: bool = True) -> SchemaNode:
        return self._with_flags(unknown=allow)

    def strict(self, enabled: bool = True) -> SchemaNode:
        clone = self._copy()
        clone.convert = not enabled
        return clone

    def allow(self, *values: Any) -> SchemaNode:
        clone = self._copy()
        for value in values:
            # 1 and True compare equal but are distinct literals
            if not any(type(v) is type(value) and v == value for v in clone.allowed_values):
                clone.allowed_values.append(value)
        return clone

    valid = allow

    def example(self, value: Any) -> SchemaNode:
        clone = self._copy()
        clone.examples.append(value)
        return clone

    def meta(self, tags: dict[str, Any] | None = None, **kwargs: Any) -> SchemaNode:
        clone = self._copy()
        clone.metas.append({**(tags or {}), **kwargs})
        return clone

    def id(self, value: str) -> SchemaNode:
        clone = self._copy()
        clone.schema_id = value
        return clone

    def keys(self, mapping: dict[str, Any] | None = None) -> SchemaNode:
        """Declare (or extend) the keys of an object node."""
        clone = self._copy()
        existing = {child.key: i for i, child in enumerate(clone.object_keys or [])}
        clone.object_keys = list(clone.object_keys or [])
        for key, schema in (mapping or {}).items():
            if key in existing:
                clone.object_keys[existing[key]] = ObjectKey(key=key, schema=schema)
            else:
                clone.object_keys.append(ObjectKey(key=key, schema=schema))
        return clone

    def items(self, *schemas: SchemaNode) -> SchemaNode:
        clone = self._copy()
        clone.item_schemas.extend(schemas)
        return clone

    def try_(self, *schemas: SchemaNode) -> SchemaNode:
        clone = self._copy()
        clone.matches.extend(Match(schema=schema) for schema in schemas)
        return clone

    def conditional(
        self,
        ref: str,
        *,
        is_: SchemaNode | None = None,
        then: SchemaNode | None = None,
        otherwise: SchemaNode | None = None,
    ) -> SchemaNode:
        """Add a conditional candidate to an alternatives node."""
        clone = self._copy()
        clone.matches.append(Match(ref=ref, is_=is_, then=then, otherwise=otherwise))
        return clone

    def when(
        self,
        ref: str,
        *,
        is_: SchemaNode | None = None,
        then: SchemaNode | None = None,
        otherwise: SchemaNode | None = None,
    ) -> SchemaNode:
        """Attach a conditional branch keyed on another field."""
        clone = self._copy()
        clone.whens.append(WhenBranch(ref=ref, is_=is_, then=then, otherwise=otherwise))
        return clone
