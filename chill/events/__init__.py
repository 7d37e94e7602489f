"""The event engine: trigger registry, dispatcher, and handlers."""

from .dispatcher import EventDispatcher
from .registry import Event, HandlerContext, Trigger, TriggerRegistry

__all__ = ["Event", "EventDispatcher", "HandlerContext", "Trigger", "TriggerRegistry"]
