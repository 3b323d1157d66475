"""
Core module - Application configuration.
"""

from .config import (
    ValidationConfig,
    FixConfig,
    OutputConfig,
    LoggingConfig,
    AppConfig,
    OutputFormat,
    get_default_config,
    load_config,
)

__all__ = [
    # Config classes
    'ValidationConfig',
    'FixConfig',
    'OutputConfig',
    'LoggingConfig',
    'AppConfig',
    # Config enums
    'OutputFormat',
    # Config functions
    'get_default_config',
    'load_config',
]
