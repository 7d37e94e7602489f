"""Detect created, updated and deleted values under trigger patterns."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from .paths import PathPattern, Segments, is_wildcard, join_path, split_path
from .views import DataView


class ChangeKind(enum.Enum):
    """The mutation class of a change."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class Change:
    """A value that changed at ``path``."""

    path: str
    before: Any
    after: Any

    @property
    def kind(self) -> ChangeKind | None:
        """Classify the change; None when nothing changed."""
        if self.before == self.after:
            return None
        if self.before is None:
            return ChangeKind.CREATED
        if self.after is None:
            return ChangeKind.DELETED
        return ChangeKind.UPDATED


def detect_changes(
    written: Iterable[str | Segments],
    before: DataView,
    after: DataView,
    patterns: Iterable[PathPattern],
) -> list[Change]:
    """Return the changes a write produced at locations matching ``patterns``.

    A write above a pattern's depth (e.g. deleting a whole group) is expanded
    to every concrete location under it that existed before or after.
    """
    written_paths = [split_path(path) for path in written]
    seen: set[Segments] = set()
    changes = []
    for pattern in patterns:
        for path in written_paths:
            for location in _locations(pattern, path, before, after):
                if location in seen:
                    continue
                seen.add(location)
                change = Change(join_path(location), before.get(location), after.get(location))
                if change.kind is not None:
                    changes.append(change)
    return changes


def _locations(
    pattern: PathPattern, written: Segments, before: DataView, after: DataView
) -> Iterator[Segments]:
    depth = len(pattern.segments)
    if len(written) >= depth:
        location = written[:depth]
        if pattern.match(location) is not None:
            yield location
        return
    if pattern.match_prefix(written) is None:
        return
    yield from _expand(pattern.segments, written, before, after)


def _expand(
    pattern: Segments, prefix: Segments, before: DataView, after: DataView
) -> Iterator[Segments]:
    if len(prefix) == len(pattern):
        yield prefix
        return
    segment = pattern[len(prefix)]
    if not is_wildcard(segment):
        yield from _expand(pattern, prefix + (segment,), before, after)
        return
    keys = set(before.keys(prefix)) | set(after.keys(prefix))
    for key in sorted(keys):
        yield from _expand(pattern, prefix + (key,), before, after)
