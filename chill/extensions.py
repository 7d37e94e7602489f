"""Flask extensions for the application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from flask import current_app

from chill.events.dispatcher import EventDispatcher
from chill.events.handlers import registry
from chill.events.registry import HandlerContext
from chill.notifications import Messenger
from chill.rules import RuleOptions
from chill.store import GuardedStore, MemoryStore, Store

if TYPE_CHECKING:
    from flask import Flask


@dataclass
class BackendState:
    """The per-app store, gateway, and dispatcher."""

    store: Store
    gateway: GuardedStore
    dispatcher: EventDispatcher


class Backend:
    """Wires the store, the access rules, and the event engine into an app."""

    def __init__(self, app: Flask | None = None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Build the backend from the app's configuration."""
        store = self._create_store(app)
        options = RuleOptions(
            enforce_hangout_creator=app.config["ENFORCE_HANGOUT_CREATOR"],
            restrict_attended_hangout_delete=app.config[
                "RESTRICT_ATTENDED_HANGOUT_DELETE"
            ],
        )
        messenger = Messenger(
            channel_id=app.config["NOTIFICATION_CHANNEL_ID"],
            click_action=app.config["NOTIFICATION_CLICK_ACTION"],
        )
        dispatcher = EventDispatcher(
            registry,
            HandlerContext(store=store, messenger=messenger),
            inline=app.config["EVENTS_INLINE"],
            max_attempts=app.config["EVENT_MAX_ATTEMPTS"],
            retry_delay=app.config["EVENT_RETRY_DELAY"],
            max_workers=app.config["EVENT_MAX_WORKERS"],
        )
        # The managed database raises its own change events; the in-memory
        # store publishes them itself.
        if isinstance(store, MemoryStore):
            dispatcher.attach(store)

        app.extensions["chill"] = BackendState(
            store=store, gateway=GuardedStore(store, options), dispatcher=dispatcher
        )

    @staticmethod
    def _create_store(app: Flask) -> Store:
        backend = app.config["STORE_BACKEND"]
        if backend == "memory":
            return MemoryStore()
        if backend == "firebase":
            from chill.store.firebase import RealtimeDatabaseStore  # noqa: PLC0415

            return RealtimeDatabaseStore()
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")

    @property
    def state(self) -> BackendState:
        """The backend of the current app."""
        return current_app.extensions["chill"]

    @property
    def store(self) -> Store:
        return self.state.store

    @property
    def gateway(self) -> GuardedStore:
        return self.state.gateway

    @property
    def dispatcher(self) -> EventDispatcher:
        return self.state.dispatcher


backend = Backend()
