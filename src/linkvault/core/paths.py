"""Nested value lookup by path expression.

Paths are dot separated segments; a segment may carry list indexes
(``lessons[1]``) or be a bare index (``0``)::

    get_nested_value(courses, "0.fields.lessons[1].fields.name")
"""

from __future__ import annotations

import re
from typing import Any

from linkvault.shared.errors import create_path_error

_SEGMENT_RE = re.compile(r"^(?P<key>[^\[\]]*)(?P<indexes>(\[-?\d+\])*)$")
_INDEX_RE = re.compile(r"\[(-?\d+)\]")


def parse_path(path: str) -> list[str | int]:
    """Split a path expression into keys and list indexes.

    Raises:
        DomainError: If a segment is malformed
    """
    if not path or not path.strip():
        raise create_path_error(path, "path is empty")

    steps: list[str | int] = []
    for segment in path.strip().split("."):
        match = _SEGMENT_RE.match(segment)
        if match is None or (not match.group("key") and not match.group("indexes")):
            raise create_path_error(path, f"malformed segment '{segment}'")

        key = match.group("key")
        if key:
            steps.append(int(key) if key.lstrip("-").isdigit() else key)
        steps.extend(int(index) for index in _INDEX_RE.findall(match.group("indexes")))
    return steps


def get_nested_value(obj: Any, path: str) -> Any:
    """Follow ``path`` through nested dicts and lists.

    Returns:
        The value found, or None when any step is missing
    """
    current = obj
    for step in parse_path(path):
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        elif isinstance(current, dict):
            current = current.get(step)
        else:
            return None
        if current is None:
            return None
    return current
