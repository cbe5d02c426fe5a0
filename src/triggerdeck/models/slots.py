"""Slot table model."""

from pydantic import BaseModel, ConfigDict

from .catalog import QueuedEvent
from .event import Event


class SlotTable(BaseModel):
    """
    Fixed-length mapping of device buttons to queued events.

    Index ``i`` is button ``i``. ``None`` marks an empty slot. Tables are
    immutable; the reconciler returns a new table for every catalog.
    """

    model_config = ConfigDict(frozen=True)

    slots: tuple[QueuedEvent | None, ...]

    @classmethod
    def empty(cls, size: int) -> "SlotTable":
        """Create an all-empty table with ``size`` slots."""
        if size < 0:
            raise ValueError("Slot count cannot be negative")
        return cls(slots=(None,) * size)

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> QueuedEvent | None:
        return self.slots[index]

    def __iter__(self):
        return iter(self.slots)

    def event_at(self, index: int) -> Event | None:
        """
        Get the event occupying a slot.

        Args:
            index: Slot index

        Returns:
            The event, or None if the slot is empty or out of range
        """
        if not 0 <= index < len(self.slots):
            return None
        entry = self.slots[index]
        return entry.event if entry is not None else None

    def keys(self) -> list[str | None]:
        """Slot keys in index order (None for empty slots)."""
        return [entry.key if entry is not None else None for entry in self.slots]

    @property
    def occupied(self) -> int:
        """Number of non-empty slots."""
        return sum(1 for entry in self.slots if entry is not None)
