"""Catalog snapshot model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import CatalogChannel
from .event import Event


class QueuedEvent(BaseModel):
    """An entry of the launch queue.

    ``key`` is the id of the ready template the entry came from. It stays
    the same when the template is replaced by its running instance, which
    is what keeps a button in place across the ready to active transition.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    event: Event


class Catalog(BaseModel):
    """
    One consistent snapshot of ready and active events.

    Catalogs are created fresh for every poll tick or push message and
    never mutated; the next catalog supersedes the previous one.
    """

    model_config = ConfigDict(frozen=True)

    active: tuple[Event, ...] = ()
    ready: tuple[Event, ...] = ()
    queue: tuple[QueuedEvent, ...] = Field(
        default=(), description="Effective ready queue, in ready order"
    )
    channel: CatalogChannel = CatalogChannel.MANUAL
    received_at: datetime = Field(default_factory=datetime.now)

    @property
    def keys(self) -> list[str]:
        """Queue keys in queue order."""
        return [entry.key for entry in self.queue]

    def __len__(self) -> int:
        return len(self.queue)
