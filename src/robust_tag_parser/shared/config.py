"""Configuration classes for robust tag extraction.

This module provides configuration objects for the extraction engine, the
diagnostic channel and result output, with validation, presets and
dictionary/JSON round-tripping.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .logging import VALID_LOGGING_LEVELS

VALID_STREAMS = ["stdout", "stderr"]
VALID_OUTPUT_FORMATS = ["text", "json", "csv"]
COMPONENT_FIELDS = ["extraction", "diagnostics", "output"]


@dataclass
class ExtractionConfig:
    """Configuration for the marker values written into result records."""

    malformed_tag: str = "MALFORMED"
    missing_close_content: str = "MALFORMED - Missing closing tag"
    pending_content: str = "Pending - awaiting closing tag"

    def __post_init__(self) -> None:
        """Validate extraction configuration."""
        if not self.malformed_tag:
            raise ValueError("malformed_tag cannot be empty")
        if not self.missing_close_content:
            raise ValueError("missing_close_content cannot be empty")
        if not self.pending_content:
            raise ValueError("pending_content cannot be empty")


@dataclass
class DiagnosticsConfig:
    """Configuration for how structure errors are reported."""

    display_errors: bool = True
    error_prefix: str = "Error: "
    stream: str = "stderr"
    logging_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate diagnostics configuration."""
        if self.stream not in VALID_STREAMS:
            raise ValueError(f"stream must be one of {VALID_STREAMS}")
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


@dataclass
class OutputConfig:
    """Configuration for presenting extraction results."""

    default_format: str = "text"
    preview_length: int = 50

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.default_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"default_format must be one of {VALID_OUTPUT_FORMATS}")
        if self.preview_length <= 0:
            raise ValueError("preview_length must be > 0")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for a tag parser.

    Immutable, so one instance can be shared by any number of parsers.
    """

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.extraction.__post_init__()
            self.diagnostics.__post_init__()
            self.output.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.extraction.malformed_tag.startswith("<"):
            raise ConfigValidationError(
                "malformed_tag must be a bare name",
                field_name="extraction.malformed_tag",
                suggestions=["Use the tag name without angle brackets"],
            )

    @property
    def display_errors(self) -> bool:
        """Whether diagnostics are written immediately instead of stored."""
        return self.diagnostics.display_errors

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; use ``component__field`` for nested fields

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> store = config.override(diagnostics__display_errors=False)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=COMPONENT_FIELDS,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for field_name in COMPONENT_FIELDS:
                current_config = getattr(self, field_name)
                if field_name in nested_overrides:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                else:
                    new_fields[field_name] = current_config
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        for key, value in nested_overrides.items():
            if key not in COMPONENT_FIELDS:
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
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in config files surface.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"{target_class.__name__} must be a mapping, "
                    f"got {type(data_dict).__name__}"
                )
            fields = target_class.__dataclass_fields__
            unknown = set(data_dict) - set(fields)
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {sorted(unknown)}",
                    suggestions=sorted(fields),
                )

            field_values: Dict[str, Any] = {}
            for field_name, field_info in fields.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    value = _dict_to_dataclass(value, field_info.type)
                field_values[field_name] = value
            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def display(cls) -> "ParserConfig":
        """Preset that writes each diagnostic as soon as it is detected."""
        return cls(
            diagnostics=DiagnosticsConfig(display_errors=True),
            name="display",
            description="Diagnostics written immediately to the error stream",
        )

    @classmethod
    def store(cls) -> "ParserConfig":
        """Preset that buffers diagnostics for later retrieval."""
        return cls(
            diagnostics=DiagnosticsConfig(display_errors=False),
            name="store",
            description="Diagnostics buffered and returned by get_errors()",
        )

    @classmethod
    def quiet(cls) -> "ParserConfig":
        """Preset for batch runs: stored diagnostics, warnings-only logging."""
        return cls(
            diagnostics=DiagnosticsConfig(display_errors=False, logging_level="WARNING"),
            output=OutputConfig(default_format="json"),
            name="quiet",
            description="Buffered diagnostics with JSON output for batch processing",
        )
