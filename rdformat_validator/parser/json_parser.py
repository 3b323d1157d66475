"""
JSON Parser - Decode RDFormat input from strings, files and streams.

Turns raw text into decoded JSON for the validator. Syntax errors are
reported as ParseError records with 1-based line/column; the parser never
raises for bad input.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, IO, List, Optional, Union
import json

from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ParseError:
    """A single parse failure."""
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message

    def to_dict(self):
        data = {"message": self.message}
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class ParserResult:
    """Result of parsing operation."""
    success: bool
    data: Any = None
    errors: List[ParseError] = field(default_factory=list)


def _reject_constant(name: str):
    raise ValueError(f"Unexpected token {name}: non-standard JSON constants are not allowed")


def strip_comments(text: str) -> str:
    """
    Blank out ``//`` and ``/* */`` comments that are outside strings.

    Comment characters are replaced with spaces (newlines are kept), so
    line/column positions in the result still match the input.
    """
    out = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            out.append(" " * (end - i))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append("".join(c if c == "\n" else " " for c in text[i:end]))
            i = end
        else:
            out.append(ch)
            i += 1

    return "".join(out)


class JSONParser:
    """
    Parser for RDFormat JSON input.

    Supports plain strings, files and readable streams (text or binary).
    """

    def __init__(self, allow_comments: bool = False):
        """
        Initialize the parser.

        Args:
            allow_comments: Strip // and /* */ comments before decoding
        """
        self.allow_comments = allow_comments

    def parse_string(self, text: str) -> ParserResult:
        """
        Parse JSON text.

        Args:
            text: Raw JSON text

        Returns:
            ParserResult with decoded data or a parse error
        """
        if not text or not text.strip():
            return self._failure("Input is empty", line=1, column=1)

        if self.allow_comments:
            text = strip_comments(text)

        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            logger.debug(f"JSON decode failed: {e}")
            return self._failure(e.msg, line=e.lineno, column=e.colno)
        except ValueError as e:
            return self._failure(str(e))
        except RecursionError:
            return self._failure("Input is nested too deeply")

        return ParserResult(success=True, data=data)

    def parse_file(self, file_path: Union[str, Path]) -> ParserResult:
        """
        Read and parse a UTF-8 JSON file.

        Args:
            file_path: Path to the file

        Returns:
            ParserResult; unreadable files become a failed result
        """
        path = Path(file_path)
        logger.debug(f"Reading {path}")
        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            return self._failure(f"Failed to read file: {e}")

        return self.parse_string(content)

    def parse_stream(self, stream: IO) -> ParserResult:
        """
        Read a stream to the end and parse its content.

        Args:
            stream: Text or binary file-like object

        Returns:
            ParserResult with decoded data or a parse error
        """
        try:
            content = stream.read()
            if isinstance(content, (bytes, bytearray)):
                content = bytes(content).decode("utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            return self._failure(f"Failed to read stream: {e}")

        return self.parse_string(content)

    @staticmethod
    def _failure(message: str, line: Optional[int] = None, column: Optional[int] = None) -> ParserResult:
        return ParserResult(
            success=False,
            errors=[ParseError(message=message, line=line, column=column)],
        )


def parse_string(text: str, allow_comments: bool = False) -> ParserResult:
    return JSONParser(allow_comments=allow_comments).parse_string(text)


def parse_file(file_path: Union[str, Path], allow_comments: bool = False) -> ParserResult:
    return JSONParser(allow_comments=allow_comments).parse_file(file_path)


def parse_stream(stream: IO, allow_comments: bool = False) -> ParserResult:
    return JSONParser(allow_comments=allow_comments).parse_stream(stream)
