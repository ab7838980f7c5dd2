"""
Parser for serialized schema descriptions.

Builds a SchemaNode tree from a description document, the JSON shape a
validation library emits when asked to describe a schema:

    {
        "type": "string",
        "flags": {"presence": "required", "description": "..."},
        "rules": [{"name": "min", "args": {"limit": 1}}],
        "allow": ["a", "b"],
        "metas": [{"className": "Name"}]
    }

A mapping without a "type" key is read as the keys of an object.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .nodes import Flags, Kind, Match, ObjectKey, Presence, Rule, SchemaNode, WhenBranch


class SchemaDescriptionError(ValueError):
    """Raised when a schema description cannot be parsed."""

    pass


class SchemaParser:
    """Parses schema descriptions into SchemaNode trees."""

    def parse(self, description: Any) -> SchemaNode:
        """
        Parse a schema description.

        Args:
            description: The description mapping (as loaded from JSON)

        Returns:
            The root SchemaNode
        """
        return self._parse_node(description, "#")

    def _parse_node(self, description: Any, path: str) -> SchemaNode:
        if not isinstance(description, Mapping):
            raise SchemaDescriptionError(f"{path}: expected a mapping, got {type(description).__name__}")

        # Implicit object: a plain mapping of keys
        if "type" not in description:
            return SchemaNode(kind=Kind.OBJECT, object_keys=self._parse_keys(description, path))

        flags_description = description.get("flags") or {}
        preferences = description.get("preferences") or {}

        node = SchemaNode(
            kind=self._parse_kind(description["type"]),
            rules=self._parse_rules(description.get("rules") or [], path),
            allowed_values=list(description.get("allow") or []),
            flags=self._parse_flags(flags_description, path),
            metas=[dict(tags) for tags in description.get("metas") or []],
            examples=list(description.get("examples") or []),
            convert=preferences.get("convert"),
            schema_id=flags_description.get("id"),
        )

        if "keys" in description:
            node.object_keys = self._parse_keys(description["keys"] or {}, f"{path}/keys")

        node.item_schemas = [self._parse_node(item, f"{path}/items/{i}") for i, item in enumerate(description.get("items") or [])]

        node.matches = [self._parse_match(match, f"{path}/matches/{i}") for i, match in enumerate(description.get("matches") or [])]

        if description.get("base") is not None:
            node.base_type = self._parse_node(description["base"], f"{path}/base")

        node.whens = [self._parse_when(when, f"{path}/whens/{i}") for i, when in enumerate(description.get("whens") or [])]

        link = description.get("link")
        if link is not None:
            node.link_ref = self._parse_ref(link.get("ref") if isinstance(link, Mapping) else link)

        return node

    def _parse_kind(self, value: Any) -> Kind | str:
        # Unknown kinds are kept as-is; the translator reports them
        try:
            return Kind(value)
        except ValueError:
            return str(value)

    def _parse_rules(self, rules: list[Any], path: str) -> list[Rule]:
        parsed = []
        for i, rule in enumerate(rules):
            if isinstance(rule, str):
                parsed.append(Rule(name=rule))
                continue
            if not isinstance(rule, Mapping) or "name" not in rule:
                raise SchemaDescriptionError(f"{path}/rules/{i}: a rule needs a name")
            parsed.append(Rule(name=rule["name"], args=dict(rule.get("args") or {})))
        return parsed

    def _parse_flags(self, flags: Mapping[str, Any], path: str) -> Flags:
        presence = flags.get("presence")
        if presence is not None:
            try:
                presence = Presence(presence)
            except ValueError as e:
                raise SchemaDescriptionError(f"{path}/flags/presence: unknown presence {presence!r}") from e

        return Flags(
            presence=presence,
            description=flags.get("description"),
            label=flags.get("label"),
            default=flags.get("default"),
            has_default="default" in flags,
            encoding=flags.get("encoding"),
            unknown=flags.get("unknown"),
        )

    def _parse_keys(self, keys: Mapping[str, Any], path: str) -> list[ObjectKey]:
        return [
            ObjectKey(key=key, schema=None if child is None else self._parse_node(child, f"{path}/{key}"))
            for key, child in keys.items()
        ]

    def _parse_optional(self, description: Mapping[str, Any], key: str, path: str) -> SchemaNode | None:
        value = description.get(key)
        if value is None:
            return None
        return self._parse_node(value, f"{path}/{key}")

    def _parse_match(self, match: Any, path: str) -> Match:
        if not isinstance(match, Mapping):
            raise SchemaDescriptionError(f"{path}: expected a mapping")

        if "ref" in match:
            return Match(
                ref=self._parse_ref(match["ref"]),
                is_=self._parse_optional(match, "is", path),
                then=self._parse_optional(match, "then", path),
                otherwise=self._parse_optional(match, "otherwise", path),
            )
        return Match(schema=self._parse_optional(match, "schema", path))

    def _parse_when(self, when: Any, path: str) -> WhenBranch:
        if not isinstance(when, Mapping):
            raise SchemaDescriptionError(f"{path}: expected a mapping")

        return WhenBranch(
            ref=self._parse_ref(when.get("ref")),
            is_=self._parse_optional(when, "is", path),
            then=self._parse_optional(when, "then", path),
            otherwise=self._parse_optional(when, "otherwise", path),
        )

    def _parse_ref(self, ref: Any) -> str:
        """References are either a string or a {"path": [...]} mapping."""
        if isinstance(ref, Mapping):
            return ".".join(str(part) for part in ref.get("path") or [])
        return "" if ref is None else str(ref)
