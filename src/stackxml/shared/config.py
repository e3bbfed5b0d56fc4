"""Configuration classes for stackxml.

Each component has its own dataclass that validates itself in
``__post_init__``. :class:`DocumentConfig` bundles them and can be loaded
from, or saved to, JSON.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_NEWLINES = ["\n", "\r\n"]


@dataclass
class ReaderConfig:
    """Configuration for loading documents from files."""

    strip_bom: bool = True
    validate_utf8: bool = True


@dataclass
class WriterConfig:
    """Configuration for document output layout."""

    indent: str = "  "
    newline: str = "\n"
    encoding_label: str = "UTF-8"

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if any(c not in " \t" for c in self.indent):
            raise ValueError("indent must only contain spaces or tabs")
        if self.newline not in VALID_NEWLINES:
            raise ValueError("newline must be '\\n' or '\\r\\n'")
        if not self.encoding_label:
            raise ValueError("encoding_label cannot be empty")
        if any(c in "\"<>&" for c in self.encoding_label):
            raise ValueError("encoding_label cannot contain markup characters")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = {
    "reader": ReaderConfig,
    "writer": WriterConfig,
}


@dataclass(frozen=True)
class DocumentConfig:
    """Configuration for reading and writing documents.

    Frozen, so one instance can be shared between readers and writers.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)
    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )
        for name, component_class in _COMPONENTS.items():
            if not isinstance(getattr(self, name), component_class):
                raise ConfigValidationError(
                    f"{name} must be a {component_class.__name__}",
                    field_name=name,
                )

    def override(self, **kwargs: Any) -> "DocumentConfig":
        """Create a new configuration with specific overrides.

        Nested fields use a double underscore:

            >>> config = DocumentConfig().override(writer__indent="\\t")
            >>> config.writer.indent
            '\\t'
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for name in _COMPONENTS:
            component = getattr(self, name)
            result[name] = {
                field_name: getattr(component, field_name)
                for field_name in component.__dataclass_fields__
            }
        result["logging_level"] = self.logging_level
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos in configuration files are noticed.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration must be a JSON object")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _COMPONENTS:
                component_class = _COMPONENTS[key]
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{key} must be an object", field_name=key
                    )
                unknown = set(value) - set(component_class.__dataclass_fields__)
                if unknown:
                    raise ConfigValidationError(
                        f"Unknown {key} settings: {', '.join(sorted(unknown))}",
                        field_name=key,
                        suggestions=sorted(component_class.__dataclass_fields__),
                    )
                try:
                    kwargs[key] = component_class(**value)
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key == "logging_level":
                kwargs[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}", field_name=key
                )

        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "DocumentConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)
