"""Enumerations for trigger events."""

from enum import Enum


class EventState(str, Enum):
    """Lifecycle state of a cue as reported by the server."""

    ABSTRACT = "abstract"  # Definition only, not launchable
    READY = "ready"        # Launchable template
    ACTIVE = "active"      # Running instance of a template


class CatalogChannel(str, Enum):
    """Update channel a catalog arrived on."""

    POLL = "poll"
    PUSH = "push"
    MANUAL = "manual"  # One-off fetch (CLI, tests)
