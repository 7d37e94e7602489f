"""The client-facing store: every operation passes the access rules first."""

from __future__ import annotations

import logging
from typing import Any

from chill.errors import PermissionDenied, ValidationError
from chill.rules import Operation, RuleOptions, evaluate

from .base import Store
from .paths import is_valid_key, join_path, split_path
from .views import DataView

logger = logging.getLogger(__name__)


class GuardedStore:
    """Applies a principal's operations to ``store`` only when the rules allow.

    A rejected operation raises :class:`PermissionDenied` and writes nothing;
    multi-path updates are allowed or rejected as a whole.
    """

    def __init__(self, store: Store, options: RuleOptions | None = None) -> None:
        self.store = store
        self.options = options or RuleOptions()

    def read(self, caller: str | None, path: str) -> Any:
        """Read ``path`` as ``caller``."""
        path = self._normalize(path)
        self._check(self.store.view(), caller, Operation.READ, path)
        return self.store.get(path)

    def set(self, caller: str | None, path: str, value: Any) -> None:
        """Replace the value at ``path`` as ``caller``."""
        path = self._normalize(path)
        self.store.write_checked(
            {path: value},
            lambda view: self._check(view, caller, Operation.SET, path, value),
        )

    def update(self, caller: str | None, path: str, values: dict[str, Any]) -> None:
        """Apply a multi-child update under ``path`` as ``caller``."""
        path = self._normalize(path)
        if not isinstance(values, dict) or not values:
            raise ValidationError("An update needs at least one child path.")
        writes = {
            join_path(split_path(path) + split_path(self._normalize(key))): value
            for key, value in values.items()
        }
        self.store.write_checked(
            writes,
            lambda view: self._check(view, caller, Operation.UPDATE, path, values),
        )

    def delete(self, caller: str | None, path: str) -> None:
        """Remove the value at ``path`` as ``caller``."""
        path = self._normalize(path)
        self.store.write_checked(
            {path: None}, lambda view: self._check(view, caller, Operation.DELETE, path)
        )

    def _check(
        self,
        view: DataView,
        caller: str | None,
        operation: Operation,
        path: str,
        value: Any = None,
    ) -> None:
        decision = evaluate(view, caller, operation, path, value, self.options)
        if not decision.allowed:
            logger.info(
                f"Denied {operation.value} {path} for {caller or 'anonymous'}: "
                f"{decision.reason}"
            )
            raise PermissionDenied(decision.reason)

    @staticmethod
    def _normalize(path: str) -> str:
        segments = split_path(path)
        for segment in segments:
            if not is_valid_key(segment):
                raise ValidationError(f"Invalid path segment: {segment!r}")
        return join_path(segments)
