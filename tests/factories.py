"""Builders for events, catalogs and slot tables used across tests."""

from triggerdeck.core import build_catalog
from triggerdeck.models import ActiveEvent, Catalog, QueuedEvent, ReadyEvent, SlotTable


def ready(event_id: str, name: str | None = None, **kwargs) -> ReadyEvent:
    """Create a ready event."""
    return ReadyEvent(id=event_id, name=name or event_id.upper(), trigger=True, **kwargs)


def active(event_id: str, name: str | None = None, **kwargs) -> ActiveEvent:
    """Create an active event."""
    return ActiveEvent(id=event_id, name=name or event_id.upper(), **kwargs)


def catalog_of(*events) -> Catalog:
    """Build a catalog from events in server order."""
    return build_catalog(events)


def table_of(*keys: str | None) -> SlotTable:
    """Create a slot table whose occupants are ready events keyed by ``keys``."""
    return SlotTable(
        slots=tuple(QueuedEvent(key=key, event=ready(key)) if key else None for key in keys)
    )
