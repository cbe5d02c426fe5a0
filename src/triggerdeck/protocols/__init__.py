"""Event definitions and observer protocols."""

from .events import DeckEvent, InboundEvent, InboundKind, LauncherState
from .observers import CatalogObserver, DeckObserver, LauncherObserver

__all__ = [
    "CatalogObserver",
    "DeckEvent",
    "DeckObserver",
    "InboundEvent",
    "InboundKind",
    "LauncherObserver",
    "LauncherState",
]
