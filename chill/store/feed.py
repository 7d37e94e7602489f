"""Turn Realtime Database listen events into store changes for the engine."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Iterable

from firebase_admin import db

from chill.core.constants import COLLECTIONS

from .changes import detect_changes
from .paths import Segments, set_at, split_path
from .views import TreeView

if TYPE_CHECKING:
    from firebase_admin import App

    from chill.events.dispatcher import EventDispatcher

logger = logging.getLogger(__name__)


class ChangeFeed:
    """Mirror each collection locally and dispatch what every event changed.

    ``Reference.listen`` reports only new data, so the mirror supplies the
    ``before`` side. The first event of each listener is the initial
    snapshot and only primes the mirror.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        collections: Iterable[str] = COLLECTIONS,
        app: App | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._collections = tuple(collections)
        self._app = app
        self._tree: Any = None
        self._primed: set[str] = set()
        self._lock = threading.Lock()
        self._registrations: list[Any] = []

    def start(self) -> None:
        """Open one listener per collection."""
        for collection in self._collections:
            ref = db.reference(f"/{collection}", app=self._app)
            self._registrations.append(
                ref.listen(lambda event, name=collection: self.on_event(name, event))
            )
            logger.info(f"Listening for changes under /{collection}")

    def stop(self) -> None:
        """Close every listener."""
        for registration in self._registrations:
            registration.close()
        self._registrations = []

    def on_event(self, collection: str, event: db.Event) -> None:
        """Apply one listen event to the mirror and dispatch its changes."""
        base = (collection,) + split_path(event.path)
        if event.event_type == "put":
            writes: list[tuple[Segments, Any]] = [(base, event.data)]
        elif event.event_type == "patch":
            writes = [(base + split_path(key), value) for key, value in (event.data or {}).items()]
        else:
            logger.debug(f"Ignoring {event.event_type} event on /{collection}")
            return

        with self._lock:
            before = self._tree
            after = before
            for segments, value in writes:
                after = set_at(after, segments, value)
            self._tree = after
            primed = collection in self._primed
            self._primed.add(collection)

        if not primed:
            logger.info(f"Mirrored initial state of /{collection}")
            return
        changes = detect_changes(
            [segments for segments, _ in writes],
            TreeView(before),
            TreeView(after),
            self._dispatcher.registry.patterns,
        )
        if changes:
            self._dispatcher.dispatch(changes)
