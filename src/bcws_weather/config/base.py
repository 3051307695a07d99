"""Base configuration classes for the BCWS downloader.

This module provides the Pydantic model every settings class inherits from,
offering strict validation plus YAML/JSON loading and dumping.
"""

import json
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict

T = TypeVar("T", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Base configuration class with common functionality.

    Provides:
    - Pydantic v2 configuration
    - YAML/JSON serialization
    - File loading utilities

    Example:
        >>> class MySettings(BaseConfig):
        ...     base_url: str
        ...     timeout_seconds: int = 30
        >>> settings = MySettings(base_url="https://example.org/")
        >>> settings.to_yaml_file("settings.yaml")
        >>> loaded = MySettings.from_yaml_file("settings.yaml")
    """

    model_config = ConfigDict(
        # Allow arbitrary types (for Path, etc.)
        arbitrary_types_allowed=True,
        validate_assignment=True,
        use_enum_values=True,
        # Unknown keys are rejected
        extra="forbid",
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return self.model_dump(mode="json")

    def to_yaml(self) -> str:
        """Convert configuration to YAML string."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_yaml_file(self, path: Path | str) -> None:
        """Save configuration to YAML file.

        Args:
            path: Output file path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(self.to_yaml())

    def to_json_file(self, path: Path | str) -> None:
        """Save configuration to JSON file.

        Args:
            path: Output file path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any] | None) -> T:
        """Create configuration from dictionary.

        An empty YAML document loads as ``None``; it is treated as "all defaults".
        """
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml(cls: type[T], yaml_str: str) -> T:
        """Create configuration from YAML string."""
        return cls.from_dict(yaml.safe_load(yaml_str))

    @classmethod
    def from_yaml_file(cls: type[T], path: Path | str) -> T:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Validated configuration instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValidationError: If configuration is invalid
        """
        path = Path(path)
        with open(path) as f:
            return cls.from_yaml(f.read())

    @classmethod
    def from_json_file(cls: type[T], path: Path | str) -> T:
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValidationError: If configuration is invalid
        """
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls: type[T], path: Path | str) -> T:
        """Load configuration from a ``.yaml``/``.yml`` or ``.json`` file."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return cls.from_json_file(path)
        return cls.from_yaml_file(path)
