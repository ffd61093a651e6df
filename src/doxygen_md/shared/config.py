"""Configuration classes for Doxygen-to-Markdown generation.

This module provides configuration objects for every pipeline stage
(conversion, resolution, output), validated on construction and composable
into one :class:`GeneratorConfig` that can be loaded from a JSON file.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigValidationError

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ConversionConfig:
    """Configuration for XML-to-tree conversion."""

    file_suffix: str = ".xml"
    huge_tree: bool = False  # lift libxml2's depth and text-size limits
    skip_comments: bool = True

    def __post_init__(self) -> None:
        """Validate conversion configuration."""
        if not self.file_suffix.startswith("."):
            raise ValueError("file_suffix must start with '.'")


@dataclass
class ResolverConfig:
    """Configuration for symbol resolution."""

    namespace: str = ""
    header_suffix: str = ".h"
    header_name: Optional[str] = None
    require_unique_header: bool = True
    max_workers: Optional[int] = None  # None: one worker per logical CPU

    def __post_init__(self) -> None:
        """Validate resolver configuration."""
        if not self.header_suffix:
            raise ValueError("header_suffix cannot be empty")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be > 0 or None")


@dataclass
class OutputConfig:
    """Configuration for the intermediate JSON artifacts."""

    work_dir: Path = field(default_factory=lambda: Path("."))
    index_filename: str = "index.json"
    definitions_filename: str = "defs.json"
    write_artifacts: bool = True
    json_indent: int = 2

    def __post_init__(self) -> None:
        """Validate output configuration."""
        self.work_dir = Path(self.work_dir)
        if not self.index_filename:
            raise ValueError("index_filename cannot be empty")
        if not self.definitions_filename:
            raise ValueError("definitions_filename cannot be empty")
        if self.json_indent < 0:
            raise ValueError("json_indent must be >= 0")

    @property
    def index_path(self) -> Path:
        return self.work_dir / self.index_filename

    @property
    def definitions_path(self) -> Path:
        return self.work_dir / self.definitions_filename


@dataclass
class GeneratorConfig:
    """Complete configuration for one Doxygen-to-Markdown run."""

    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    logging_level: str = "INFO"
    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        if self.logging_level not in _VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {list(_VALID_LOG_LEVELS)}",
                field_name="logging_level",
            )
        if (
            self.resolver.header_name is not None
            and not self.resolver.header_name.endswith(self.resolver.header_suffix)
        ):
            raise ConfigValidationError(
                f"header_name {self.resolver.header_name!r} does not end with "
                f"header_suffix {self.resolver.header_suffix!r}",
                field_name="resolver.header_name",
                suggestions=["Adjust resolver.header_suffix", "Fix resolver.header_name"],
            )

    @classmethod
    def strict(cls, namespace: str = "") -> "GeneratorConfig":
        """Fail when the public header cannot be identified unambiguously."""
        return cls(
            resolver=ResolverConfig(namespace=namespace, require_unique_header=True),
            name="strict",
        )

    @classmethod
    def lenient(cls, namespace: str = "") -> "GeneratorConfig":
        """Fall back to the first qualifying header, or none at all."""
        return cls(
            resolver=ResolverConfig(namespace=namespace, require_unique_header=False),
            name="lenient",
        )

    def override(self, **kwargs: Any) -> "GeneratorConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``component__field``

        Returns:
            New GeneratorConfig instance with overrides applied

        Example:
            >>> config = GeneratorConfig().override(
            ...     resolver__namespace="neco_",
            ...     output__write_artifacts=False,
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        for component, overrides in nested_overrides.items():
            current = getattr(self, component, None)
            if current is None or not hasattr(current, "__dataclass_fields__"):
                raise ConfigValidationError(
                    f"Unknown configuration component: {component}",
                    field_name=component,
                )
            try:
                top_level[component] = replace(current, **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

        try:
            return replace(self, **top_level)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""

        def _to_plain(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {name: _to_plain(getattr(obj, name)) for name in obj.__dataclass_fields__}
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, Path):
                return str(obj)
            return obj

        return _to_plain(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface
        instead of being silently ignored.

        Raises:
            ConfigValidationError: If a key is unknown or a value is invalid
        """

        def _build(data_dict: Dict[str, Any], target_class: type, prefix: str) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected an object for {prefix or target_class.__name__}",
                    field_name=prefix or None,
                )
            known = target_class.__dataclass_fields__
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown configuration keys: {', '.join(prefix + key for key in unknown)}",
                    field_name=prefix + unknown[0],
                    suggestions=sorted(prefix + key for key in known),
                )
            values: Dict[str, Any] = {}
            for field_name, field_info in known.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    value = _build(value, field_info.type, f"{prefix}{field_name}.")
                values[field_name] = value
            try:
                return target_class(**values)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=prefix.rstrip(".") or None) from e

        return _build(data, cls, "")

    @classmethod
    def from_json(cls, json_str: str) -> "GeneratorConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "GeneratorConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigValidationError: If the file cannot be read or is invalid
        """
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigValidationError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(text)
