"""Catalog synchronization: periodic fetch and push subscription."""

from .poller import CatalogPoller
from .push import PushChannel
from .source import EventSource

__all__ = ["CatalogPoller", "EventSource", "PushChannel"]
