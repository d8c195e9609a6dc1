"""
Flat configuration parameters.

Components are configured with a flat mapping of dotted keys to string values
(``connection.region``, ``options.connect_timeout``). Nested mappings loaded
from YAML are flattened on the way in, and sections can be cut back out by
prefix.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


class ConfigParams(dict):
    """Flat string-to-string configuration map with typed accessors."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        super().__init__()
        if values:
            for key, value in values.items():
                self._flatten(value, str(key))

    @classmethod
    def from_tuples(cls, *tuples: Any) -> "ConfigParams":
        """
        Create parameters from a flat sequence of key, value pairs.

        Args:
            tuples: Alternating keys and values

        Returns:
            New ConfigParams instance
        """
        if len(tuples) % 2 != 0:
            raise ValueError("ConfigParams.from_tuples expects an even number of arguments")

        return cls(dict(zip(tuples[0::2], tuples[1::2])))

    @classmethod
    def from_value(cls, value: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Create parameters from a nested mapping, flattening it into dotted keys."""
        result = cls()
        if value:
            result._flatten(value, "")
        return result

    @classmethod
    def from_string(cls, line: Optional[str]) -> "ConfigParams":
        """Create parameters from a ``key1=value1;key2=value2`` string."""
        result = cls()
        for item in (line or "").split(";"):
            if not item.strip():
                continue
            key, _, value = item.partition("=")
            result[key.strip()] = value.strip()
        return result

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ConfigParams":
        """
        Read parameters from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Flattened ConfigParams; empty when the file holds no document
        """
        with open(path, "r", encoding="utf-8") as stream:
            document = yaml.safe_load(stream)

        if document is None:
            return cls()
        if not isinstance(document, Mapping):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        return cls.from_value(document)

    def _flatten(self, value: Any, prefix: str) -> None:
        if isinstance(value, Mapping):
            for key, item in value.items():
                self._flatten(item, f"{prefix}.{key}" if prefix else str(key))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                self._flatten(item, f"{prefix}.{index}" if prefix else str(index))
        elif value is not None:
            if isinstance(value, bool):
                value = "true" if value else "false"
            self[prefix] = str(value)

    def get_as_nullable_string(self, key: str) -> Optional[str]:
        value = self.get(key)
        return value if value not in (None, "") else None

    def get_as_string_with_default(self, key: str, default: Optional[str]) -> Optional[str]:
        value = self.get_as_nullable_string(key)
        return value if value is not None else default

    def get_as_integer_with_default(self, key: str, default: int) -> int:
        value = self.get_as_nullable_string(key)
        if value is None:
            return default
        try:
            return int(float(value))
        except ValueError:
            return default

    def get_as_float_with_default(self, key: str, default: float) -> float:
        value = self.get_as_nullable_string(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            return default

    def get_as_boolean_with_default(self, key: str, default: bool) -> bool:
        value = self.get_as_nullable_string(key)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in ("true", "1", "yes", "y", "t"):
            return True
        if lowered in ("false", "0", "no", "n", "f"):
            return False
        return default

    def get_section(self, name: str) -> "ConfigParams":
        """
        Get all parameters under a section with the prefix removed.

        Args:
            name: Section name, e.g. ``connection``

        Returns:
            New ConfigParams with keys relative to the section
        """
        prefix = name + "."
        return ConfigParams({
            key[len(prefix):]: value
            for key, value in self.items()
            if key.startswith(prefix)
        })

    def add_section(self, name: str, section: Mapping[str, Any]) -> None:
        """Add parameters under a section prefix."""
        for key, value in section.items():
            if value is not None:
                self[f"{name}.{key}" if name else str(key)] = str(value)

    def set_defaults(self, defaults: Mapping[str, Any]) -> "ConfigParams":
        """Return new parameters where missing keys are filled from defaults."""
        result = type(self)(defaults)
        result.update(self)
        return result

    def override(self, values: Mapping[str, Any]) -> "ConfigParams":
        """Return new parameters where keys are replaced by the given values."""
        result = type(self)(self)
        for key, value in values.items():
            if value is not None:
                result[str(key)] = str(value)
        return result

    @staticmethod
    def merge(*configs: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Merge configs left to right; later values win."""
        result = ConfigParams()
        for config in configs:
            if config:
                result = result.override(config)
        return result
