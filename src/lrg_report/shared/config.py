"""Configuration classes for LRG report processing.

This module provides configuration objects for the tokenizer, the tree
builder and the XML writer, aggregated into an immutable ParserConfig.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class ContentMode(Enum):
    """How repeated text runs inside the same element are stored."""

    OVERWRITE = auto()     # Last run wins (legacy report behaviour)
    CONCATENATE = auto()   # Runs are appended in document order


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class TokenizationConfig:
    """Configuration for markup flattening and tag tokenization."""

    skip_declaration_lines: bool = True
    skip_markup_declarations: bool = True
    legacy_quote_stripping: bool = False

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        for name in (
            "skip_declaration_lines",
            "skip_markup_declarations",
            "legacy_quote_stripping",
        ):
            if not isinstance(getattr(self, name), bool):
                raise ConfigValidationError(f"{name} must be a boolean", field_name=name)


@dataclass
class TreeConfig:
    """Configuration for tree building from the token stream."""

    content_mode: ContentMode = ContentMode.OVERWRITE
    strict_close_names: bool = False
    allow_unclosed: bool = True

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if isinstance(self.content_mode, str):
            try:
                self.content_mode = ContentMode[self.content_mode.upper()]
            except KeyError as e:
                raise ConfigValidationError(
                    f"Unknown content_mode: {self.content_mode}",
                    field_name="content_mode",
                    suggestions=[mode.name for mode in ContentMode],
                ) from e
        if not isinstance(self.content_mode, ContentMode):
            raise ConfigValidationError(
                "content_mode must be a ContentMode", field_name="content_mode"
            )


@dataclass
class WriterConfig:
    """Configuration for XML serialization."""

    encoding: str = "UTF-8"
    indent: int = 2
    data_mode: bool = True
    include_stylesheet: bool = True
    stylesheet_type: str = "text/xsl"
    stylesheet_href: str = "lrg2html.xsl"

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if not self.encoding:
            raise ConfigValidationError("encoding cannot be empty", field_name="encoding")
        if self.indent < 0:
            raise ConfigValidationError("indent must be >= 0", field_name="indent")
        if self.include_stylesheet and not self.stylesheet_href:
            raise ConfigValidationError(
                "stylesheet_href cannot be empty when include_stylesheet is set",
                field_name="stylesheet_href",
                suggestions=["Set include_stylesheet=False", "Provide a stylesheet path"],
            )

    @property
    def stylesheet_data(self) -> str:
        """Pseudo-attribute string for the xml-stylesheet processing instruction."""
        return f'type="{self.stylesheet_type}" href="{self.stylesheet_href}"'


_COMPONENTS = ("tokenization", "tree", "writer")


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for reading and writing LRG reports.

    Immutable; use override() to derive a modified copy.
    """

    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)

    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate component types."""
        expected = {
            "tokenization": TokenizationConfig,
            "tree": TreeConfig,
            "writer": WriterConfig,
        }
        for component, component_class in expected.items():
            if not isinstance(getattr(self, component), component_class):
                raise ConfigValidationError(
                    f"{component} must be a {component_class.__name__}",
                    field_name=component,
                )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> new_config = config.override(
            ...     writer__indent=4,
            ...     tree__content_mode=ContentMode.CONCATENATE
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        silently fall back to defaults.
        """
        components = {
            "tokenization": TokenizationConfig,
            "tree": TreeConfig,
            "writer": WriterConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in components:
                try:
                    values[key] = components[key](**value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("correlation_id", "name"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=list(components) + ["correlation_id", "name"],
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def legacy(cls) -> "ParserConfig":
        """Create configuration reproducing the historical report tooling.

        Every quote character is removed from attribute values and repeated
        text runs overwrite each other.
        """
        return cls(
            tokenization=TokenizationConfig(legacy_quote_stripping=True),
            tree=TreeConfig(content_mode=ContentMode.OVERWRITE),
            name="legacy",
        )
