"""
Path helpers - Build, parse and follow document locators.

Locators use dotted property names with bracketed array indices, e.g.
``diagnostics[0].location.range.start.line``. Parsed paths are lists of
``str`` (property) and ``int`` (index) segments.
"""

import re
from collections.abc import MutableMapping
from typing import Any, List, Union

PathSegment = Union[str, int]

_SEGMENT_PATTERN = re.compile(r"\[(\d+)\]|([^.\[\]]+)")


def join_path(base: str, segment: PathSegment) -> str:
    """Append a property name or array index to a locator."""
    if isinstance(segment, int):
        return f"{base}[{segment}]"
    if not base:
        return segment
    return f"{base}.{segment}"


def parse_path(path: str) -> List[PathSegment]:
    """
    Split a locator into segments.

    Example:
        >>> parse_path("diagnostics[0].location.path")
        ['diagnostics', 0, 'location', 'path']
    """
    if not path:
        return []
    segments: List[PathSegment] = []
    for index, name in _SEGMENT_PATTERN.findall(path):
        segments.append(int(index) if index else name)
    return segments


def get_value_at_path(data: Any, segments: List[PathSegment], default: Any = None) -> Any:
    """Read the value at a parsed path, or ``default`` if any step is absent."""
    current = data
    for segment in segments:
        if isinstance(segment, int):
            if not isinstance(current, list) or segment >= len(current):
                return default
            current = current[segment]
        else:
            if not isinstance(current, MutableMapping) or segment not in current:
                return default
            current = current[segment]
    return current


def _slot_exists(container: Any, segment: PathSegment) -> bool:
    if isinstance(segment, int):
        return segment < len(container)
    return segment in container


def _fits(container: Any, segment: PathSegment) -> bool:
    if isinstance(segment, int):
        return isinstance(container, list)
    return isinstance(container, MutableMapping)


def _assign(container: Any, segment: PathSegment, value: Any) -> None:
    if isinstance(segment, int):
        while len(container) <= segment:
            container.append(None)
    container[segment] = value


def set_value_at_path(data: Any, segments: List[PathSegment], value: Any) -> bool:
    """
    Write a value at a parsed path, creating intermediate containers.

    Missing (or null) intermediates become a list when the next segment is
    an index and a dict otherwise. Returns False when the path is empty or
    runs into a value that cannot hold the next segment; ``data`` is left
    unchanged in that case.
    """
    if not segments or not _fits(data, segments[0]):
        return False

    # Check the existing prefix before creating anything
    current = data
    depth = 0
    for depth, segment in enumerate(segments[:-1]):
        if not _slot_exists(current, segment) or current[segment] is None:
            break
        child = current[segment]
        if not _fits(child, segments[depth + 1]):
            return False
        current = child
    else:
        _assign(current, segments[-1], value)
        return True

    for i in range(depth, len(segments) - 1):
        container = [] if isinstance(segments[i + 1], int) else {}
        _assign(current, segments[i], container)
        current = container

    _assign(current, segments[-1], value)
    return True
