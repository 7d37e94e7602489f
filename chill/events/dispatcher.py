"""Run handlers for store changes with at-least-once semantics."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

from chill.errors import MalformedEventError
from chill.store.changes import Change

from .registry import Event, HandlerContext, Trigger, TriggerRegistry

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers changes to the handlers registered for them.

    A handler that raises is run again, up to ``max_attempts`` times, with a
    linearly growing delay. Handlers recompute their writes from fresh reads,
    so running one twice is safe. :class:`MalformedEventError` is logged and
    never retried.
    """

    def __init__(
        self,
        registry: TriggerRegistry,
        context: HandlerContext,
        inline: bool = True,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
        max_workers: int = 8,
    ) -> None:
        self.registry = registry
        self.context = context
        self.inline = inline
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        # Threads are only started once work is submitted.
        self.executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="chill-handler"
        )

    def attach(self, store) -> None:
        """Subscribe to a store that publishes its own changes."""
        store.subscribe(self.dispatch, self.registry.patterns)

    def dispatch(self, changes: list[Change]) -> None:
        """Run every matching handler, inline or on the worker pool."""
        for change in changes:
            for trigger, event in self.registry.matching(change):
                if self.inline:
                    self.run(trigger, event)
                else:
                    self.executor.submit(self.run, trigger, event)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool, by default after queued handlers finish."""
        self.executor.shutdown(wait=wait)

    def deliver(self, change: Change, attempts: int = 1) -> dict[str, bool]:
        """Run matching handlers now and report which completed.

        Used when an external runtime owns retries, so one attempt each.
        """
        return {
            trigger.name: self.run(trigger, event, attempts)
            for trigger, event in self.registry.matching(change)
        }

    def run(self, trigger: Trigger, event: Event, attempts: int | None = None) -> bool:
        """Run one handler; return False if it still failed after retries."""
        attempts = attempts or self.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                trigger.handler(event, self.context)
                return True
            except MalformedEventError as e:
                logger.warning(f"{trigger.name} skipped {event.path}: {e}")
                return True
            except Exception as e:
                logger.error(
                    f"{trigger.name} failed on {event.path} "
                    f"(attempt {attempt}/{attempts}): {e}"
                )
                if attempt < attempts and self.retry_delay:
                    time.sleep(self.retry_delay * attempt)
        logger.error(f"{trigger.name} gave up on {event.path}")
        return False
