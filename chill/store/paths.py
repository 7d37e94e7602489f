"""Path helpers for the hierarchical store.

Writes follow Realtime Database semantics: writing ``None`` removes a
location, and maps left empty by a write disappear with it.
"""

from __future__ import annotations

import copy
import re
import secrets
from typing import Any, Iterable

INVALID_KEY_CHARS = re.compile(r"[.$#\[\]/\x00-\x1f\x7f]")
MAX_KEY_BYTES = 768

Segments = tuple[str, ...]


def split_path(path: str | Iterable[str]) -> Segments:
    """Normalize a path such as ``/groups/abc/`` into its segments."""
    if isinstance(path, str):
        return tuple(part for part in path.split("/") if part)
    return tuple(str(part) for part in path)


def join_path(segments: Iterable[str]) -> str:
    """Join segments back into an absolute path."""
    return "/" + "/".join(segments)


def is_valid_key(key: str) -> bool:
    """Return True if ``key`` is usable as a single path segment."""
    if not key or len(key.encode("utf-8")) > MAX_KEY_BYTES:
        return False
    return not INVALID_KEY_CHARS.search(key)


def is_wildcard(segment: str) -> bool:
    """Return True for a ``{param}`` pattern segment."""
    return segment.startswith("{") and segment.endswith("}")


def generate_key() -> str:
    """Generate a new child key, in place of a database push id."""
    return secrets.token_urlsafe(15)


def get_at(tree: Any, segments: Segments) -> Any:
    """Return the value stored at ``segments`` or None."""
    node = tree
    for segment in segments:
        if isinstance(node, dict):
            node = node.get(segment)
        elif isinstance(node, list) and segment.isdigit():
            index = int(segment)
            node = node[index] if index < len(node) else None
        else:
            return None
        if node is None:
            return None
    return node


def prune(value: Any) -> Any:
    """Drop ``None`` children and empty maps, the way the database stores them."""
    if isinstance(value, dict):
        pruned = {}
        for key, child in value.items():
            child = prune(child)
            if child is not None:
                pruned[str(key)] = child
        return pruned or None
    if isinstance(value, list):
        items = [prune(item) for item in value]
        return items or None
    return value


def _as_map(node: Any) -> dict[str, Any]:
    if isinstance(node, dict):
        return dict(node)
    if isinstance(node, list):
        return {str(i): item for i, item in enumerate(node) if item is not None}
    return {}


def _write(node: Any, segments: Segments, value: Any) -> Any:
    if not segments:
        return value
    copied = _as_map(node)
    child = _write(copied.get(segments[0]), segments[1:], value)
    if child is None:
        copied.pop(segments[0], None)
    else:
        copied[segments[0]] = child
    return copied or None


def set_at(tree: Any, segments: Segments, value: Any) -> Any:
    """Return a copy of ``tree`` with ``value`` written at ``segments``.

    Only the maps along ``segments`` are copied; every other subtree is
    shared with ``tree``, which is never mutated, so earlier snapshots stay
    valid.
    """
    return _write(tree, segments, prune(copy.deepcopy(value)))


class PathPattern:
    """A path with ``{param}`` wildcards, e.g. ``groups/{groupId}/members/{userId}``."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.segments = split_path(pattern)

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PathPattern) and other.segments == self.segments

    def __hash__(self) -> int:
        return hash(self.segments)

    def match(self, path: str | Segments) -> dict[str, str] | None:
        """Return the captured params if ``path`` matches, else None."""
        segments = split_path(path)
        if len(segments) != len(self.segments):
            return None
        return self.match_prefix(segments)

    def match_prefix(self, segments: Segments) -> dict[str, str] | None:
        """Match ``segments`` against the leading part of the pattern."""
        if len(segments) > len(self.segments):
            return None
        params = {}
        for expected, actual in zip(self.segments, segments):
            if is_wildcard(expected):
                params[expected[1:-1]] = actual
            elif expected != actual:
                return None
        return params
