"""Core algorithms: catalog normalization, slot assignment and launcher state."""

from .catalog import build_catalog, find_active_instance, merge_queue
from .reconciler import reconcile
from .state_machine import LauncherStateMachine

__all__ = [
    "LauncherStateMachine",
    "build_catalog",
    "find_active_instance",
    "merge_queue",
    "reconcile",
]
