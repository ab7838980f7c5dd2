"""
Recursive translator from validation schema nodes to OpenAPI schema objects.

The translator walks the schema tree depth-first. Each call receives the
components known so far and returns its fragment together with the
components it discovered; parents merge those into their own delta so that
later siblings can reference components defined by earlier ones.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..config import TranslatorConfig
from ..schema_ast import builder
from ..schema_ast.nodes import Kind, Presence, SchemaNode
from .errors import InvalidInput, UnrecognizedKind, UnrecognizedSchema
from .registry import ComponentRegistry, reference

logger = logging.getLogger(__name__)

# Character classes synthesized from alphanum/token rules
PATTERNS = {
    "alphanum": "^[a-zA-Z0-9]*$",
    "alphanum_lower": "^[a-z0-9]*$",
    "alphanum_upper": "^[A-Z0-9]*$",
    "token": "^[a-zA-Z0-9_]*$",
    "token_lower": "^[a-z0-9_]*$",
    "token_upper": "^[A-Z0-9_]*$",
}

Fragment = dict[str, Any]


@dataclass
class Translation:
    """Outcome of translating a single node.

    ``fragment`` is None when the node is absent (forbidden). ``is_required``
    carries the requiredness of a selected alternatives branch up to the
    enclosing object.
    """

    fragment: Fragment | None = None
    components: ComponentRegistry = field(default_factory=ComponentRegistry)
    is_required: bool = False


@dataclass
class TranslationResult:
    """Public result of a top-level translation."""

    fragment: Fragment | None = None
    components: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"schema": self.fragment, "components": self.components}


@dataclass
class TranslationBatch:
    """Result of translating several named schemas against one registry."""

    fragments: dict[str, Fragment | None] = field(default_factory=dict)
    components: dict[str, dict[str, Any]] = field(default_factory=dict)


def regex_source(regex: Any) -> str:
    """Return the source of a pattern, without /.../flags delimiters."""
    if isinstance(regex, re.Pattern):
        return regex.pattern
    source = str(regex)
    end = source.rfind("/")
    if source.startswith("/") and end > 0:
        return source[1:end]
    return source


def extract_example_value(example: Any) -> Any:
    if isinstance(example, Mapping) and "value" in example:
        return example["value"]
    return example


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _presence(schema: Any) -> Presence | None:
    return schema.presence if isinstance(schema, SchemaNode) else None


class SchemaTranslator:
    """Translates schema nodes into OpenAPI schema objects."""

    def __init__(self, config: TranslatorConfig | None = None):
        self.config = config or TranslatorConfig()

    def translate(
        self,
        schema: Any,
        existing_components: ComponentRegistry | Mapping[str, Mapping[str, Any]] | None = None,
    ) -> TranslationResult:
        """
        Translate a schema into an OpenAPI fragment.

        Args:
            schema: A SchemaNode, or a plain mapping of key -> SchemaNode
                which is treated as an object node
            existing_components: Components already defined (bucket -> name
                -> fragment); only read, never modified

        Returns:
            TranslationResult with the fragment (None if the schema is
            forbidden) and the newly discovered components
        """
        known = ComponentRegistry.from_dict(existing_components)
        translation = self._translate(schema, known)
        return TranslationResult(fragment=translation.fragment, components=translation.components.to_dict())

    def translate_components(
        self,
        named_schemas: Mapping[str, Any],
        existing_components: ComponentRegistry | Mapping[str, Mapping[str, Any]] | None = None,
    ) -> TranslationBatch:
        """Translate several schemas, sharing discovered components between them."""
        known = ComponentRegistry.from_dict(existing_components)
        discovered = ComponentRegistry()
        batch = TranslationBatch()
        for name, schema in named_schemas.items():
            translation = self._translate(schema, known.merged(discovered))
            discovered.update(translation.components)
            batch.fragments[name] = translation.fragment
        batch.components = discovered.to_dict()
        return batch

    def _reference(self, bucket: str, name: str) -> Fragment:
        return reference(bucket, name, self.config.ref_prefix)

    def _translate(self, schema: Any, known: ComponentRegistry) -> Translation:
        if schema is None:
            raise InvalidInput("No schema was passed.")

        if isinstance(schema, Mapping):
            schema = builder.object_(schema)

        if not isinstance(schema, SchemaNode):
            raise UnrecognizedSchema(f"Passed schema does not appear to be a schema node: {schema!r}")

        override = schema.get_meta("swagger")
        if override and schema.get_meta("swaggerOverride"):
            logger.debug("Using swagger override verbatim for %s node", schema.kind)
            return Translation(fragment=copy.deepcopy(dict(override)))

        class_name = schema.get_meta("className")
        class_target = schema.get_meta("classTarget") or self.config.default_class_target

        # Already translated named schema: just point at it
        if class_name and known.has(class_target, class_name):
            logger.debug("Reusing component %s/%s", class_target, class_name)
            return Translation(fragment=self._reference(class_target, class_name))

        if schema.presence == Presence.FORBIDDEN:
            return Translation()

        discovered = ComponentRegistry()
        fragment, is_required = self._dispatch(schema, known, discovered)

        if fragment is None:
            return Translation(components=discovered)

        self._annotate(fragment, schema)

        if class_name:
            discovered.define(class_target, class_name, fragment)
            logger.debug("Defined component %s/%s", class_target, class_name)
            return Translation(
                fragment=self._reference(class_target, class_name),
                components=discovered,
                is_required=is_required,
            )

        if override:
            fragment.update(override)

        return Translation(fragment=fragment, components=discovered, is_required=is_required)

    def _dispatch(
        self,
        node: SchemaNode,
        known: ComponentRegistry,
        discovered: ComponentRegistry,
    ) -> tuple[Fragment | None, bool]:
        match node.kind:
            case Kind.NUMBER:
                return self._translate_number(node), False
            case Kind.STRING:
                return self._translate_string(node), False
            case Kind.BINARY:
                return self._translate_binary(node), False
            case Kind.DATE:
                return {"type": "string", "format": "date-time"}, False
            case Kind.BOOLEAN:
                return {"type": "boolean"}, False
            case Kind.ARRAY:
                return self._translate_array(node, known, discovered), False
            case Kind.OBJECT:
                return self._translate_object(node, known, discovered), False
            case Kind.ALTERNATIVES:
                return self._translate_alternatives(node, known, discovered)
            case Kind.ANY:
                return self._translate_any(node, known, discovered), False
            case Kind.LINK:
                # Recursive references are not expanded
                return {}, False
            case _:
                raise UnrecognizedKind(f"{node.kind} is not a recognized schema kind.")

    def _annotate(self, fragment: Fragment, node: SchemaNode) -> None:
        """Attach description, examples, title and default."""
        flags = node.flags
        if flags.description:
            fragment["description"] = flags.description

        if len(node.examples) == 1:
            fragment["example"] = extract_example_value(node.examples[0])
        elif node.examples:
            fragment["examples"] = [extract_example_value(example) for example in node.examples]

        if flags.label:
            fragment["title"] = flags.label

        # Generated defaults (callables) have no static value
        if flags.has_default and flags.default is not None and not callable(flags.default):
            fragment["default"] = flags.default

    @staticmethod
    def _apply_length_rules(fragment: Fragment, node: SchemaNode, min_key: str, max_key: str) -> None:
        for rule in node.rules:
            limit = rule.args.get("limit")
            if rule.name == "min":
                fragment[min_key] = limit
            elif rule.name == "max":
                fragment[max_key] = limit
            elif rule.name == "length":
                fragment[min_key] = limit
                fragment[max_key] = limit

    def _translate_number(self, node: SchemaNode) -> Fragment:
        if node.has_rule("integer"):
            fragment: Fragment = {"type": "integer"}
        elif node.has_rule("precision"):
            fragment = {"type": "number", "format": "double"}
        else:
            fragment = {"type": "number", "format": "float"}

        sign = node.find_rule("sign")
        if sign:
            if sign.args.get("sign") == "positive":
                fragment["minimum"] = 1
            elif sign.args.get("sign") == "negative":
                fragment["maximum"] = -1

        # Explicit bounds override the sign bound whatever the rule order
        minimum = node.find_rule("min")
        if minimum:
            fragment["minimum"] = minimum.args.get("limit")
        maximum = node.find_rule("max")
        if maximum:
            fragment["maximum"] = maximum.args.get("limit")

        values = [value for value in node.allowed_values if _is_number(value)]
        if values:
            fragment["enum"] = values

        return fragment

    def _translate_string(self, node: SchemaNode) -> Fragment:
        fragment: Fragment = {"type": "string"}

        pattern = node.find_rule("pattern")
        if pattern:
            fragment["pattern"] = regex_source(pattern.args.get("regex"))

        case = node.find_rule("case")
        direction = case.args.get("direction") if case else None

        if node.has_rule("alphanum"):
            # Case is only enforced when values are not converted
            if node.is_strict and direction in ("lower", "upper"):
                fragment["pattern"] = PATTERNS[f"alphanum_{direction}"]
            else:
                fragment["pattern"] = PATTERNS["alphanum"]

        if node.has_rule("token"):
            # Token case is enforced in both strict and converting mode
            if direction in ("lower", "upper"):
                fragment["pattern"] = PATTERNS[f"token_{direction}"]
            else:
                fragment["pattern"] = PATTERNS["token"]

        if node.has_rule("email"):
            fragment["format"] = "email"
            fragment.pop("pattern", None)

        if node.has_rule("isoDate"):
            fragment["format"] = "date-time"
            fragment.pop("pattern", None)

        self._apply_length_rules(fragment, node, "minLength", "maxLength")

        values = [value for value in node.allowed_values if isinstance(value, str)]
        if values:
            fragment["enum"] = values

        return fragment

    def _translate_binary(self, node: SchemaNode) -> Fragment:
        fragment: Fragment = {"type": "string", "format": "binary"}
        if node.flags.encoding == "base64":
            fragment["format"] = "byte"

        self._apply_length_rules(fragment, node, "minLength", "maxLength")
        return fragment

    def _translate_array(
        self,
        node: SchemaNode,
        known: ComponentRegistry,
        discovered: ComponentRegistry,
    ) -> Fragment:
        index = node.get_meta("swaggerIndex") or 0
        item_schema = node.item_schemas[index] if 0 <= index < len(node.item_schemas) else None

        if item_schema is None:
            return {"type": "array"}

        items = self._translate(item_schema, known.merged(discovered))
        discovered.update(items.components)

        fragment: Fragment = {"type": "array"}
        self._apply_length_rules(fragment, node, "minItems", "maxItems")

        if node.has_rule("unique"):
            fragment["uniqueItems"] = True

        if items.fragment is not None:
            fragment["items"] = items.fragment
        return fragment

    def _translate_object(
        self,
        node: SchemaNode,
        known: ComponentRegistry,
        discovered: ComponentRegistry,
    ) -> Fragment:
        required: list[str] = []
        properties: dict[str, Fragment] = {}

        for child in node.object_keys or []:
            if child.schema is None:
                continue

            prop = self._translate(child.schema, known.merged(discovered))
            if prop.fragment is None:
                logger.debug("Omitting forbidden key %r", child.key)
                continue

            discovered.update(prop.components)
            properties[child.key] = prop.fragment

            if _presence(child.schema) == Presence.REQUIRED or prop.is_required:
                required.append(child.key)

        fragment: Fragment = {"type": "object"}
        if required:
            fragment["required"] = required
        fragment["properties"] = properties

        if isinstance(node.flags.unknown, bool):
            fragment["additionalProperties"] = node.flags.unknown

        return fragment

    def _select_branch(self, node: SchemaNode) -> SchemaNode | None:
        index = node.get_meta("swaggerIndex") or 0
        if not node.matches:
            return None

        first = node.matches[0]
        if first.is_conditional:
            if node.base_type is not None and first.otherwise is None:
                return first.then if index else node.base_type
            return first.otherwise if index else first.then

        if index:
            return node.matches[index].schema if 0 <= index < len(node.matches) else None
        return first.schema

    def _translate_alternatives(
        self,
        node: SchemaNode,
        known: ComponentRegistry,
        discovered: ComponentRegistry,
    ) -> tuple[Fragment | None, bool]:
        selected = self._select_branch(node)
        if selected is None:
            return None, False

        branch = self._translate(selected, known.merged(discovered))
        discovered.update(branch.components)
        if branch.fragment is None:
            return None, False

        return branch.fragment, branch.is_required or _presence(selected) == Presence.REQUIRED

    def _literal_schema(self, value: Any) -> Any:
        """Schema for one allowed value of an any node."""
        if isinstance(value, bool):
            return builder.boolean()
        if isinstance(value, int):
            return builder.number().integer().valid(value)
        if isinstance(value, float):
            return builder.number().valid(value)
        if isinstance(value, str):
            return builder.string().valid(value)
        return value

    def _translate_any(
        self,
        node: SchemaNode,
        known: ComponentRegistry,
        discovered: ComponentRegistry,
    ) -> Fragment:
        fragment: Fragment = {}
        self._apply_length_rules(fragment, node, "minLength", "maxLength")

        values = [value for value in node.allowed_values if value is not None]
        if values:
            branches = [self._literal_schema(value) for value in values]
        else:
            branches = [when.then if when.then is not None else when.otherwise for when in node.whens]
            branches = [branch for branch in branches if branch is not None]

        one_of = []
        for branch_schema in branches:
            branch = self._translate(branch_schema, known.merged(discovered))
            discovered.update(branch.components)
            if branch.fragment is not None:
                one_of.append(branch.fragment)
        if one_of:
            fragment["oneOf"] = one_of

        # File uploads are flagged out of band
        if node.get_meta("swaggerType") == "file":
            fragment["type"] = "file"
            fragment["in"] = "formData"

        if "type" not in fragment:
            fragment["type"] = "string"

        if node.flags.description:
            fragment["description"] = node.flags.description

        return fragment


def translate(
    schema: Any,
    existing_components: ComponentRegistry | Mapping[str, Mapping[str, Any]] | None = None,
    config: TranslatorConfig | None = None,
) -> TranslationResult:
    """Translate ``schema`` into an OpenAPI fragment plus discovered components."""
    return SchemaTranslator(config).translate(schema, existing_components)
