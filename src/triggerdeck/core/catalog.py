"""Catalog normalization.

Splits a raw event list into ready and active partitions and collapses
each ready template with its running instance, so the launch queue holds
one entry per template and tracks the live instance when there is one.

An active event matches a ready template when:

1. its ``productionId`` equals the template id, or
2. (legacy servers) its id is ``<template id>-<digits>``.

Everything here is pure and total: a record that matches nothing is
passed through unchanged.
"""

import logging
import re
from collections.abc import Iterable, Sequence

from triggerdeck.models import Catalog, CatalogChannel, Event, EventState, QueuedEvent

logger = logging.getLogger(__name__)


def _legacy_pattern(ready_id: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(ready_id)}-[0-9]+$")


def find_active_instance(ready: Event, active: Sequence[Event]) -> Event | None:
    """
    Find the running instance of a ready template.

    An explicit ``productionId`` match wins over a legacy id-pattern match.

    Args:
        ready: The ready template
        active: Active events of the same snapshot

    Returns:
        The first matching active event, or None
    """
    for candidate in active:
        if candidate.production_id is not None and candidate.production_id == ready.id:
            return candidate

    pattern = _legacy_pattern(ready.id)
    for candidate in active:
        if candidate.production_id is None and pattern.match(candidate.id):
            return candidate

    return None


def merge_queue(ready: Sequence[Event], active: Sequence[Event]) -> list[QueuedEvent]:
    """
    Build the effective ready queue.

    Args:
        ready: Ready events in server order
        active: Active events of the same snapshot

    Returns:
        One entry per ready template, keyed by the template id, holding the
        running instance when there is one. Order is the ready order. A
        template id seen twice only keeps its first entry.
    """
    queue: list[QueuedEvent] = []
    seen: set[str] = set()

    for template in ready:
        if template.id in seen:
            logger.debug(f"Duplicate ready event {template.id} ignored")
            continue
        seen.add(template.id)

        instance = find_active_instance(template, active)
        queue.append(QueuedEvent(key=template.id, event=instance or template))

    return queue


def build_catalog(
    events: Iterable[Event], channel: CatalogChannel = CatalogChannel.MANUAL
) -> Catalog:
    """
    Normalize a validated event list into a catalog.

    Args:
        events: Events from one fetch or push message
        channel: Channel the events arrived on

    Returns:
        Immutable catalog with ``active``, ``ready`` and the merged ``queue``
    """
    events = list(events)
    active = [e for e in events if e.state == EventState.ACTIVE]
    ready = [e for e in events if e.state == EventState.READY]

    return Catalog(
        active=tuple(active),
        ready=tuple(ready),
        queue=tuple(merge_queue(ready, active)),
        channel=channel,
    )
