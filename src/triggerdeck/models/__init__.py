"""Data models for TriggerDeck."""

from .catalog import Catalog, QueuedEvent
from .color import Color
from .config import DEFAULT_CONFIG_PATH, AppConfig, ServerConfiguration
from .enums import CatalogChannel, EventState
from .event import (
    AbstractEvent,
    ActiveEvent,
    Event,
    EventParameter,
    ParameterOption,
    ReadyEvent,
    dump_events,
    parse_events,
)
from .slots import SlotTable

__all__ = [
    "AbstractEvent",
    "ActiveEvent",
    "AppConfig",
    "Catalog",
    "CatalogChannel",
    "Color",
    "DEFAULT_CONFIG_PATH",
    "Event",
    "EventParameter",
    "EventState",
    "ParameterOption",
    "QueuedEvent",
    "ReadyEvent",
    "ServerConfiguration",
    "SlotTable",
    "dump_events",
    "parse_events",
]
