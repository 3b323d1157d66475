"""
Utilities module - Common helper functions and classes.
"""

from .logger import (
    setup_logging,
    get_logger,
    LogContext,
    log_exception,
    log_json,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'LogContext',
    'log_exception',
    'log_json',
]
