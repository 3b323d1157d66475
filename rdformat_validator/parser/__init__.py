"""
Parser module - Decode JSON input for validation.
"""

from .json_parser import (
    JSONParser,
    ParseError,
    ParserResult,
    parse_string,
    parse_file,
    parse_stream,
    strip_comments,
)

__all__ = [
    'JSONParser',
    'ParseError',
    'ParserResult',
    'parse_string',
    'parse_file',
    'parse_stream',
    'strip_comments',
]
