"""An in-memory store used for local development and tests."""

from __future__ import annotations

import contextlib
import copy
import logging
import threading
from typing import Any, Callable, Iterable, Iterator

from .base import Store
from .changes import Change, detect_changes
from .paths import PathPattern, Segments, get_at, prune, set_at, split_path
from .views import DataView, TreeView

logger = logging.getLogger(__name__)

Subscriber = Callable[[list[Change]], None]


class MemoryStore(Store):
    """A thread-safe tree with change notifications.

    The root is replaced on every write rather than mutated, so a
    :class:`TreeView` taken before a write remains a valid snapshot.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._root = prune(copy.deepcopy(data))
        self._lock = threading.RLock()
        self._subscribers: list[tuple[Subscriber, list[PathPattern]]] = []

    def load(self, data: dict[str, Any] | None) -> None:
        """Replace the whole tree without notifying subscribers."""
        with self._lock:
            self._root = prune(copy.deepcopy(data))

    def subscribe(self, callback: Subscriber, patterns: Iterable[PathPattern]) -> None:
        """Call ``callback`` with the changes under ``patterns`` after each write."""
        self._subscribers.append((callback, list(patterns)))

    def get(self, path: str) -> Any:
        """Return a copy of the value at ``path``."""
        return copy.deepcopy(get_at(self._root, split_path(path)))

    def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``."""
        self._apply([(split_path(path), value)])

    def update(self, path: str, values: dict[str, Any]) -> None:
        """Write every child path in ``values`` as one unit."""
        base = split_path(path)
        self._apply([(base + split_path(key), value) for key, value in values.items()])

    def view(self) -> DataView:
        """Return a snapshot of the current tree."""
        return TreeView(self._root)

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the write lock; writes from the same thread still go through."""
        with self._lock:
            yield

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of the whole tree."""
        return copy.deepcopy(self._root) or {}

    def _apply(self, writes: list[tuple[Segments, Any]]) -> None:
        with self._lock:
            before = self._root
            after = before
            for segments, value in writes:
                after = set_at(after, segments, value)
            self._root = after

        if not self._subscribers:
            return
        written = [segments for segments, _ in writes]
        before_view, after_view = TreeView(before), TreeView(after)
        for callback, patterns in self._subscribers:
            changes = detect_changes(written, before_view, after_view, patterns)
            if changes:
                logger.debug(f"Write produced {len(changes)} change(s)")
                callback(changes)
