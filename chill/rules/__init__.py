"""Access control rules for the store.

:func:`evaluate` is a pure function of the current state, the caller, and
the proposed operation. Each collection has its own predicate module.
"""

from __future__ import annotations

from typing import Any

from chill.core import constants as c
from chill.store.paths import Segments, split_path
from chill.store.views import DataView, OverlayView

from . import groups, hangouts, users
from .base import ALLOW, Decision, Operation, RuleContext, RuleOptions, deny

COLLECTION_RULES = {
    c.USERS: users,
    c.GROUPS: groups,
    c.HANGOUTS: hangouts,
}

__all__ = ["Decision", "Operation", "RuleOptions", "evaluate"]


def evaluate(
    view: DataView,
    caller: str | None,
    operation: Operation,
    path: str,
    value: Any = None,
    options: RuleOptions | None = None,
) -> Decision:
    """Decide whether ``caller`` may perform ``operation`` at ``path``.

    For UPDATE, ``value`` maps child paths (relative to ``path``, possibly
    several levels deep) to new values. Every child is checked against the
    state after the whole update and all of them must pass.
    """
    options = options or RuleOptions()
    segments = split_path(path)
    if not caller:
        return deny("authentication required")

    if operation is Operation.READ:
        rules = _rules_for(segments)
        if rules is None:
            return deny("no read rule for this path")
        return rules.can_read(RuleContext(caller, segments, view, view, options))

    writes = _expand_writes(operation, segments, value)
    if not writes:
        return deny("an update needs at least one child path")
    new_view = OverlayView(view, writes)
    for target, _ in writes:
        rules = _rules_for(target)
        if rules is None:
            return deny("no write rule for this path")
        decision = rules.can_write(RuleContext(caller, target, view, new_view, options))
        if not decision:
            return decision
    return ALLOW


def _rules_for(segments: Segments) -> Any:
    if not segments:
        return None
    return COLLECTION_RULES.get(segments[0])


def _expand_writes(
    operation: Operation, segments: Segments, value: Any
) -> list[tuple[Segments, Any]]:
    if operation is Operation.SET:
        return [(segments, value)]
    if operation is Operation.DELETE:
        return [(segments, None)]
    if not isinstance(value, dict):
        return []
    return [(segments + split_path(key), child) for key, child in value.items()]
