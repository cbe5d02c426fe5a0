"""Slot assignment.

Maps a fixed number of device buttons onto the (unbounded) launch queue
while keeping buttons where they are:

1. Retention pass, every slot in ascending index: an occupant whose key
   is still in the queue stays in its slot and its key is taken out of
   the queue. A key already retained by a lower slot vacates the later one.
2. Fill pass, vacated slots in ascending index: each takes the next
   unassigned queue entry, head first, or stays empty.

Retention completes over the whole table before any slot is filled, so
``[A, B, -]`` with queue ``[B, C, D]`` becomes ``[C, B, D]``.

Queue entries left over after the fill pass are not shown. That is the
capacity limit of the device, not an error.
"""

import logging

from triggerdeck.models import Catalog, QueuedEvent, SlotTable

logger = logging.getLogger(__name__)


def reconcile(previous: SlotTable, catalog: Catalog) -> SlotTable:
    """
    Compute the slot table for a new catalog.

    Args:
        previous: Slot table currently shown on the device
        catalog: Newly received catalog (full replacement state)

    Returns:
        New slot table of the same length. Retained slots hold the fresh
        queue entry for their key, so a template that became active is
        shown as its running instance without moving.
    """
    pending: dict[str, QueuedEvent] = {entry.key: entry for entry in reversed(catalog.queue)}
    order = [entry.key for entry in catalog.queue]

    slots: list[QueuedEvent | None] = [None] * len(previous)
    retained: set[str] = set()

    for index, occupant in enumerate(previous.slots):
        if occupant is None:
            continue
        if occupant.key in retained:
            logger.warning(f"Key {occupant.key} occupied two slots; vacating slot {index}")
            continue
        if occupant.key in pending:
            slots[index] = pending[occupant.key]
            retained.add(occupant.key)

    unassigned = iter([pending[key] for key in dict.fromkeys(order) if key not in retained])

    for index, entry in enumerate(slots):
        if entry is None:
            slots[index] = next(unassigned, None)

    dropped = [entry.key for entry in unassigned]
    if dropped:
        logger.debug(f"Events without button: {dropped}")

    return SlotTable(slots=tuple(slots))
