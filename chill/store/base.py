"""The interface every store backend implements."""

from __future__ import annotations

import contextlib
from typing import Any, Callable, Iterator

from .views import DataView


class Store:
    """A hierarchical key-value store addressed by slash-separated paths.

    Handlers write through a ``Store`` directly, with elevated privilege;
    client traffic goes through :class:`chill.store.guarded.GuardedStore`.
    """

    def get(self, path: str) -> Any:
        """Return the value at ``path`` or None."""
        raise NotImplementedError

    def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; ``None`` removes it."""
        raise NotImplementedError

    def update(self, path: str, values: dict[str, Any]) -> None:
        """Atomically write every relative child path in ``values``."""
        raise NotImplementedError

    def delete(self, path: str) -> None:
        """Remove the value at ``path``."""
        self.set(path, None)

    def view(self) -> DataView:
        """Return a read-only view of the current state."""
        raise NotImplementedError

    def write_checked(
        self, writes: dict[str, Any], check: Callable[[DataView], None]
    ) -> None:
        """Apply ``writes``, keyed by absolute path, if ``check`` accepts the state.

        ``check`` raises to refuse, and then nothing is written.
        """
        with self.locked():
            check(self.view())
            self.update("/", writes)

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        """Hold off other writers for the duration of a check-then-write."""
        yield
