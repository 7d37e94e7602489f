"""Store backend over the Firebase Realtime Database."""

from __future__ import annotations

import contextlib
import threading
from typing import TYPE_CHECKING, Any, Callable, Iterator

from firebase_admin import db

from .base import Store
from .paths import Segments, get_at, join_path, set_at, split_path
from .views import DataView

if TYPE_CHECKING:
    from firebase_admin import App

# ``/collection/{id}``
ENTITY_DEPTH = 2


class RealtimeDatabaseStore(Store):
    """Reads and writes through ``firebase_admin.db`` references.

    Multi-location updates are sent as one ``Reference.update`` call, which
    the database applies atomically.

    Rule-checked writes are serialized within the process. A write confined
    to one ``/collection/{id}`` node runs as a transaction on that node, so
    its check sees exactly the value being replaced. A write spanning several
    nodes is checked against a single read of each node and sent as one
    update; a writer in another process can still change those nodes between
    the check and the update.
    """

    def __init__(self, app: App | None = None) -> None:
        self._app = app
        self._lock = threading.RLock()

    def _ref(self, path: str) -> db.Reference:
        return db.reference(join_path(split_path(path)), app=self._app)

    def get(self, path: str) -> Any:
        """Return the value at ``path``."""
        return self._ref(path).get()

    def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; ``None`` deletes it."""
        ref = self._ref(path)
        if value is None:
            ref.delete()
        else:
            ref.set(value)

    def update(self, path: str, values: dict[str, Any]) -> None:
        """Apply a multi-location update relative to ``path``."""
        if not values:
            return
        relative = {"/".join(split_path(key)): value for key, value in values.items()}
        self._ref(path).update(relative)

    def view(self) -> DataView:
        """Return a view that fetches each ``/collection/{id}`` node at most once."""
        return self._entity_view({})

    def _entity_view(self, entities: dict[Segments, Any]) -> DataView:
        def read(segments: Segments) -> Any:
            if len(segments) < ENTITY_DEPTH:
                return self.get(join_path(segments))
            key = segments[:ENTITY_DEPTH]
            if key not in entities:
                entities[key] = self.get(join_path(key))
            return get_at(entities[key], segments[ENTITY_DEPTH:])

        return DataView(read)

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        """Serialize rule-checked writes made by this process."""
        with self._lock:
            yield

    def write_checked(
        self, writes: dict[str, Any], check: Callable[[DataView], None]
    ) -> None:
        """Check and apply ``writes``, transactionally when they touch one node."""
        entities = {split_path(path)[:ENTITY_DEPTH] for path in writes}
        if len(entities) != 1 or len(next(iter(entities))) < ENTITY_DEPTH:
            super().write_checked(writes, check)
            return

        (entity,) = entities
        relative = [
            (split_path(path)[ENTITY_DEPTH:], value) for path, value in writes.items()
        ]

        def apply(current: Any) -> Any:
            check(self._entity_view({entity: current}))
            for segments, value in relative:
                current = set_at(current, segments, value)
            return current

        with self.locked():
            self._ref(join_path(entity)).transaction(apply)
