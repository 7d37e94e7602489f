"""Shared types for the access rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from chill.store.paths import Segments
from chill.store.views import DataView


class Operation(enum.Enum):
    """An operation a principal attempts on a path."""

    READ = "read"
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Decision:
    """The outcome of evaluating one operation."""

    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    """Build a denial carrying a reason for the logs."""
    return Decision(False, reason)


@dataclass(frozen=True)
class RuleOptions:
    """Switches for behavior that differed between rule generations.

    Attributes:
        enforce_hangout_creator: Require ``createdBy`` to name the caller when
            a hangout is created. Off by default, matching the deployed rules.
        restrict_attended_hangout_delete: Only let the creator delete a
            hangout while nobody else is attending it.
    """

    enforce_hangout_creator: bool = False
    restrict_attended_hangout_delete: bool = False


@dataclass(frozen=True)
class RuleContext:
    """Everything a predicate may look at for one location.

    ``data`` is the state before the operation and ``new_data`` the state
    after it; for reads both are the same view.
    """

    caller: str
    path: Segments
    data: DataView
    new_data: DataView
    options: RuleOptions

    @property
    def entity_path(self) -> Segments:
        """The ``/collection/{id}`` part of the path."""
        return self.path[:2]

    def entity(self) -> tuple[Any, Any]:
        """Return the entity before and after the operation."""
        return self.data.get(self.entity_path), self.new_data.get(self.entity_path)

    @property
    def field(self) -> str | None:
        """The top-level field under the entity, if the path reaches one."""
        return self.path[2] if len(self.path) > 2 else None

    @property
    def entry(self) -> str | None:
        """The key inside a map field, if the path reaches one."""
        return self.path[3] if len(self.path) > 3 else None


def changed_keys(before: Any, after: Any) -> list[str]:
    """Return the keys whose values differ between two maps."""
    before = before if isinstance(before, dict) else {}
    after = after if isinstance(after, dict) else {}
    return sorted(key for key in set(before) | set(after) if before.get(key) != after.get(key))


def entry_of(node: Any, field: str, key: str) -> Any:
    """Return ``node[field][key]`` tolerating missing levels."""
    if not isinstance(node, dict):
        return None
    mapping = node.get(field)
    if not isinstance(mapping, dict):
        return None
    return mapping.get(key)
