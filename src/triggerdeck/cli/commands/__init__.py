"""CLI commands for triggerdeck."""

from .config import config
from .devices import devices
from .events import events
from .run import run

__all__ = ["config", "devices", "events", "run"]
