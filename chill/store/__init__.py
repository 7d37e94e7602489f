"""Hierarchical store backends and the guarded client gateway."""

from .base import Store
from .changes import Change, ChangeKind, detect_changes
from .guarded import GuardedStore
from .memory import MemoryStore
from .paths import PathPattern, join_path, split_path
from .views import DataView, OverlayView, TreeView

__all__ = [
    "Change",
    "ChangeKind",
    "DataView",
    "GuardedStore",
    "MemoryStore",
    "OverlayView",
    "PathPattern",
    "Store",
    "TreeView",
    "detect_changes",
    "join_path",
    "split_path",
]
