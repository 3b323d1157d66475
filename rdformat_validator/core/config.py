"""
Configuration management for the RDFormat validator.

Provides dataclasses for all configuration options with sensible defaults,
YAML file loading, and validation.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
from enum import Enum
import os
import yaml

from ..validator.auto_fixer import FixLevel
from ..validator.errors import ValidationOptions


class OutputFormat(Enum):
    """Report formats supported by the CLI."""
    TEXT = "text"
    JSON = "json"


@dataclass
class ValidationConfig:
    """Configuration for validation behavior."""
    strict_mode: bool = False
    allow_extra_fields: bool = True

    def to_options(self) -> ValidationOptions:
        return ValidationOptions(
            strict_mode=self.strict_mode,
            allow_extra_fields=self.allow_extra_fields,
        )


@dataclass
class FixConfig:
    """Configuration for auto-fix behavior."""
    enabled: bool = False
    fix_level: FixLevel = FixLevel.BASIC
    max_iterations: int = 3

    def __post_init__(self):
        if isinstance(self.fix_level, str):
            self.fix_level = FixLevel(self.fix_level)
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: OutputFormat = OutputFormat.TEXT
    indent: int = 2
    color: bool = True
    ensure_ascii: bool = False

    def __post_init__(self):
        if isinstance(self.format, str):
            self.format = OutputFormat(self.format)


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = field(default_factory=lambda: os.getenv("RDFORMAT_LOG_LEVEL", "WARNING"))
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    file: Optional[Path] = None

    def __post_init__(self):
        self.level = self.level.upper()
        if self.file and isinstance(self.file, str):
            self.file = Path(self.file)


@dataclass
class AppConfig:
    """
    Root configuration object containing all settings.

    Can be loaded from YAML file or constructed programmatically.
    """
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    fix: FixConfig = field(default_factory=FixConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> 'AppConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {path}: expected a mapping at top level")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            AppConfig instance

        Raises:
            ValueError: If a section contains unknown keys or invalid values
        """
        try:
            return cls(
                validation=ValidationConfig(**data.get('validation', {})),
                fix=FixConfig(**data.get('fix', {})),
                output=OutputConfig(**data.get('output', {})),
                logging=LoggingConfig(**data.get('logging', {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Returns:
            Configuration as dictionary
        """
        return {
            'validation': {
                'strict_mode': self.validation.strict_mode,
                'allow_extra_fields': self.validation.allow_extra_fields,
            },
            'fix': {
                'enabled': self.fix.enabled,
                'fix_level': self.fix.fix_level.value,
                'max_iterations': self.fix.max_iterations,
            },
            'output': {
                'format': self.output.format.value,
                'indent': self.output.indent,
                'color': self.output.color,
                'ensure_ascii': self.output.ensure_ascii,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file': str(self.logging.file) if self.logging.file else None,
            },
        }

    def save_yaml(self, path: Path | str) -> None:
        """
        Save configuration to a YAML file.

        Args:
            path: Path to output YAML file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def get_default_config() -> AppConfig:
    """
    Get the default application configuration.

    Returns:
        AppConfig with all default values
    """
    return AppConfig()


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """
    Load configuration from file or return defaults.

    Looks for config in this order:
    1. Provided path
    2. ./config/default.yaml
    3. ./config.yaml
    4. ~/.rdformat/config.yaml
    5. Default values

    Args:
        config_path: Optional path to config file

    Returns:
        AppConfig instance
    """
    if config_path:
        return AppConfig.from_yaml(config_path)

    # Try default locations
    default_paths = [
        Path("config/default.yaml"),
        Path("config.yaml"),
        Path.home() / ".rdformat" / "config.yaml",
    ]

    for path in default_paths:
        if path.exists():
            return AppConfig.from_yaml(path)

    return get_default_config()
