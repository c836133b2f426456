"""Configuration classes for datafile reading and writing.

This module provides configuration objects for the formatting parameters
consumed by the tree, and for the reader, writer and logging layers.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .errors import DatafileError

if TYPE_CHECKING:
    from robust_datafile.tree.node import Node

DEFAULT_LIST_SEPARATOR = ","
DEFAULT_INDENTATION = "\t"

# Characters with structural meaning in the line grammar. Space is reserved
# because the writer follows each separator with one.
RESERVED_SEPARATORS = frozenset('"={}#\r\n ')

VALID_LINE_ENDINGS = ("\n", "\r\n")
VALID_LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_DECODE_ERRORS = ("strict", "replace", "ignore", "surrogateescape")

_COMPONENTS = ("format", "reader", "writer", "global_")


def validate_list_separator(separator: str) -> None:
    """Raise ValueError unless ``separator`` can delimit values on a line."""
    if not isinstance(separator, str) or len(separator) != 1:
        raise ValueError("list_separator must be a single character")
    if separator in RESERVED_SEPARATORS:
        raise ValueError(f"list_separator cannot be {separator!r}")


def validate_indentation(indentation: str) -> None:
    """Raise ValueError unless ``indentation`` is a whitespace-only unit."""
    if not isinstance(indentation, str):
        raise ValueError("indentation must be a string")
    if indentation and (indentation.strip() or "\n" in indentation or "\r" in indentation):
        raise ValueError("indentation must consist of spaces or tabs")


@dataclass
class FormatConfig:
    """Formatting parameters copied into every node at creation time."""

    list_separator: str = DEFAULT_LIST_SEPARATOR
    indentation: str = DEFAULT_INDENTATION

    def __post_init__(self) -> None:
        """Validate formatting parameters."""
        validate_list_separator(self.list_separator)
        validate_indentation(self.indentation)


@dataclass
class ReaderConfig:
    """Configuration for turning a backing source into lines."""

    encoding: str = "utf-8"
    errors: str = "strict"
    strip_bom: bool = True

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        if self.errors not in VALID_DECODE_ERRORS:
            raise ValueError(f"errors must be one of {list(VALID_DECODE_ERRORS)}")


@dataclass
class WriterConfig:
    """Configuration for writing the serialized buffer."""

    encoding: str = "utf-8"
    line_ending: str = "\n"

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        if self.line_ending not in VALID_LINE_ENDINGS:
            raise ValueError("line_ending must be '\\n' or '\\r\\n'")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_diagnostics: bool = True
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(VALID_LOGGING_LEVELS)}")


class ConfigError(DatafileError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class DatafileConfig:
    """Complete configuration for reading, building and writing datafiles.

    Immutable; use :meth:`override` to derive a modified copy.
    """

    format: FormatConfig = field(default_factory=FormatConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        for component in _COMPONENTS:
            value = getattr(self, component)
            try:
                value.__post_init__()
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=component) from e

    def override(self, **kwargs: Any) -> "DatafileConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``component__field``

        Returns:
            New DatafileConfig instance with overrides applied

        Example:
            >>> config = DatafileConfig()
            >>> config.override(format__list_separator=";").format.list_separator
            ';'
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" not in key:
                top_level[key] = value
                continue
            # "global___x" belongs to "global_", so match on known prefixes
            component = next((c for c in _COMPONENTS if key.startswith(f"{c}__")), None)
            if component is None:
                component, field_name = key.split("__", 1)
                raise ConfigValidationError(
                    f"Unknown configuration component: {component}",
                    field_name=key,
                    suggestions=[f"{name}__{field_name}" for name in _COMPONENTS],
                )
            nested.setdefault(component, {})[key[len(component) + 2:]] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, overrides in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def create_root(self) -> "Node":
        """Create an empty root node carrying this configuration's format."""
        from robust_datafile.tree.node import Node

        return Node(
            list_separator=self.format.list_separator,
            indentation=self.format.indentation,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if is_dataclass(value):
                value = {f.name: getattr(value, f.name) for f in fields(value)}
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatafileConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        pass silently.
        """
        component_types = {
            "format": FormatConfig,
            "reader": ReaderConfig,
            "writer": WriterConfig,
            "global_": GlobalConfig,
        }
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Configuration section {key!r} must be an object",
                        field_name=key,
                    )
                try:
                    values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                values[key] = value
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "DatafileConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DatafileConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {config_path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def canonical(cls) -> "DatafileConfig":
        """Comma-separated lists, one tab per nesting level."""
        return cls(name="canonical", description="Comma separator, tab indentation")

    @classmethod
    def space_indented(cls, width: int = 4) -> "DatafileConfig":
        """Comma-separated lists, ``width`` spaces per nesting level."""
        if width < 0:
            raise ConfigValidationError("width must be >= 0", field_name="format")
        return cls(
            format=FormatConfig(indentation=" " * width),
            name="space_indented",
            description=f"Comma separator, {width} space indentation",
        )
