"""Map (path pattern, change kind) to the handlers that react to it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from chill.store.changes import Change, ChangeKind
from chill.store.paths import PathPattern
from chill.utils import now_ms

if TYPE_CHECKING:
    from chill.notifications import Messenger
    from chill.store import Store

ALL_KINDS = frozenset(ChangeKind)


@dataclass(frozen=True)
class Event:
    """A change delivered to a handler, with the params captured from its path."""

    path: str
    params: dict[str, str]
    kind: ChangeKind
    before: Any
    after: Any


@dataclass
class HandlerContext:
    """What handlers run with: the privileged store and the messenger.

    Handlers keep no state of their own between invocations.
    """

    store: Store
    messenger: Messenger
    clock: Callable[[], float] = field(default=now_ms)


Handler = Callable[[Event, HandlerContext], None]


@dataclass(frozen=True)
class Trigger:
    """A handler bound to a path pattern and the change kinds it reacts to."""

    name: str
    pattern: PathPattern
    kinds: frozenset[ChangeKind]
    handler: Handler


class TriggerRegistry:
    """The subscription table of the event engine."""

    def __init__(self) -> None:
        self._triggers: list[Trigger] = []

    def __iter__(self):
        return iter(self._triggers)

    def __len__(self) -> int:
        return len(self._triggers)

    def register(
        self,
        pattern: str,
        kinds: frozenset[ChangeKind],
        handler: Handler,
        name: str | None = None,
    ) -> Trigger:
        """Add a trigger and return it."""
        trigger = Trigger(name or handler.__name__, PathPattern(pattern), kinds, handler)
        self._triggers.append(trigger)
        return trigger

    def _decorator(self, pattern: str, kinds: frozenset[ChangeKind]):
        def decorator(handler: Handler) -> Handler:
            self.register(pattern, kinds, handler)
            return handler

        return decorator

    def on_created(self, pattern: str):
        """Register a handler for values newly written at ``pattern``."""
        return self._decorator(pattern, frozenset({ChangeKind.CREATED}))

    def on_updated(self, pattern: str):
        """Register a handler for values changed at ``pattern``."""
        return self._decorator(pattern, frozenset({ChangeKind.UPDATED}))

    def on_deleted(self, pattern: str):
        """Register a handler for values removed at ``pattern``."""
        return self._decorator(pattern, frozenset({ChangeKind.DELETED}))

    def on_written(self, pattern: str):
        """Register a handler for any change at ``pattern``."""
        return self._decorator(pattern, ALL_KINDS)

    @property
    def patterns(self) -> list[PathPattern]:
        """The distinct patterns any trigger listens on."""
        return list(dict.fromkeys(trigger.pattern for trigger in self._triggers))

    def matching(self, change: Change) -> list[tuple[Trigger, Event]]:
        """Return the triggers that fire for ``change`` with their events."""
        kind = change.kind
        if kind is None:
            return []
        matches = []
        for trigger in self._triggers:
            if kind not in trigger.kinds:
                continue
            params = trigger.pattern.match(change.path)
            if params is None:
                continue
            event = Event(change.path, params, kind, change.before, change.after)
            matches.append((trigger, event))
        return matches
