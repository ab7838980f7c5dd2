"""
Component registry shared through a translation.

Maps a bucket ("schemas", "requestBodies", ...) to the named fragments
filed under it. A registry is an explicit accumulator: the translator
reads the components known so far and collects the newly discovered
ones in a separate registry that the caller merges on return.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from ..config import DEFAULT_REF_PREFIX

logger = logging.getLogger(__name__)


def reference(bucket: str, name: str, prefix: str = DEFAULT_REF_PREFIX) -> dict[str, str]:
    """Build a reference object pointing at a component."""
    return {"$ref": f"{prefix}/{bucket}/{name}"}


class ComponentRegistry:
    """Mapping of bucket -> component name -> fragment."""

    def __init__(self, buckets: Mapping[str, Mapping[str, Any]] | None = None):
        self._buckets: dict[str, dict[str, Any]] = {}
        for bucket, entries in (buckets or {}).items():
            self._buckets[bucket] = dict(entries)

    @classmethod
    def from_dict(cls, components: ComponentRegistry | Mapping[str, Mapping[str, Any]] | None) -> ComponentRegistry:
        """Build a registry from a components mapping, copying the input."""
        if isinstance(components, ComponentRegistry):
            return components.merged()
        return cls(components)

    def get(self, bucket: str, name: str, default: Any = None) -> Any:
        return self._buckets.get(bucket, {}).get(name, default)

    def has(self, bucket: str, name: str) -> bool:
        return name in self._buckets.get(bucket, {})

    def define(self, bucket: str, name: str, fragment: Any) -> bool:
        """File a fragment under (bucket, name).

        A pair is defined at most once: returns False and keeps the
        existing fragment if the pair is already present.
        """
        entries = self._buckets.setdefault(bucket, {})
        if name in entries:
            logger.debug("Component %s/%s already defined, keeping the first definition", bucket, name)
            return False
        entries[name] = fragment
        return True

    def update(self, other: ComponentRegistry) -> None:
        """Merge the components of ``other`` into this registry."""
        for bucket, name, fragment in other.items():
            self.define(bucket, name, fragment)

    def merged(self, *others: ComponentRegistry) -> ComponentRegistry:
        """Return a new registry holding these components and those of ``others``."""
        registry = ComponentRegistry(self._buckets)
        for other in others:
            registry.update(other)
        return registry

    def items(self) -> Iterator[tuple[str, str, Any]]:
        for bucket, entries in self._buckets.items():
            for name, fragment in entries.items():
                yield bucket, name, fragment

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {bucket: dict(entries) for bucket, entries in self._buckets.items() if entries}

    def __contains__(self, key: tuple[str, str]) -> bool:
        bucket, name = key
        return self.has(bucket, name)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._buckets.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ComponentRegistry):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ComponentRegistry({self.to_dict()!r})"
