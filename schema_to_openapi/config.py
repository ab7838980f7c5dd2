"""
Configuration for the schema translator.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_REF_PREFIX = "#/components"


@dataclass
class TranslatorConfig:
    """Configuration options for translation and output."""

    # Bucket used for className components without a classTarget tag
    default_class_target: str = "schemas"

    # Prefix of $ref values, followed by /<bucket>/<name>
    ref_prefix: str = DEFAULT_REF_PREFIX

    # JSON output formatting (command line only)
    indent: int = 2
    sort_keys: bool = False

    @staticmethod
    def from_dict(d: dict) -> TranslatorConfig:
        """Create a config from a dictionary."""
        config = TranslatorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "default_class_target": self.default_class_target,
            "ref_prefix": self.ref_prefix,
            "indent": self.indent,
            "sort_keys": self.sort_keys,
        }
