"""Handlers of the event engine, registered on import."""

from chill.events.registry import TriggerRegistry

registry = TriggerRegistry()

from . import groups, hangouts, membership, users  # noqa: E402

__all__ = ["groups", "hangouts", "membership", "registry", "users"]
