"""Read-only views of store state used by the access rules and change detection."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from .paths import Segments, get_at, prune, set_at, split_path


class DataView:
    """Read access to store state through a getter.

    Reads are cached for the lifetime of the view so that one evaluation
    sees a single consistent answer per location.
    """

    def __init__(self, getter: Callable[[Segments], Any]) -> None:
        self._getter = getter
        self._cache: dict[Segments, Any] = {}

    def get(self, path: str | Iterable[str]) -> Any:
        """Return the value at ``path`` (None if absent)."""
        segments = split_path(path)
        if segments not in self._cache:
            self._cache[segments] = self._getter(segments)
        return self._cache[segments]

    def keys(self, path: str | Iterable[str]) -> list[str]:
        """Return the child keys of the value at ``path``."""
        value = self.get(path)
        if isinstance(value, dict):
            return list(value)
        if isinstance(value, list):
            return [str(i) for i, item in enumerate(value) if item is not None]
        return []


class TreeView(DataView):
    """A view over an in-memory tree snapshot."""

    def __init__(self, tree: Any) -> None:
        super().__init__(lambda segments: get_at(tree, segments))
        self.tree = tree


class OverlayView(DataView):
    """State as it would be after ``writes`` are applied on top of ``base``."""

    def __init__(self, base: DataView, writes: list[tuple[Segments, Any]]) -> None:
        super().__init__(self._resolve)
        self._base = base
        self._writes = [(split_path(path), value) for path, value in writes]

    def _resolve(self, segments: Segments) -> Any:
        value = self._base.get(segments)
        for path, written in self._writes:
            depth = len(path)
            if segments[:depth] == path:
                value = get_at(prune(written), segments[depth:])
            elif path[: len(segments)] == segments:
                value = set_at(value, path[len(segments) :], written)
        return value
