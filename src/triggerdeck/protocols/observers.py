"""Observer protocol definitions.

- CatalogObserver: receives catalogs from the event source
- DeckObserver: receives key-up and device-lost events from the device controller
- LauncherObserver: receives coordinator state changes
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .events import DeckEvent, LauncherState

if TYPE_CHECKING:
    from triggerdeck.models import Catalog


@runtime_checkable
class CatalogObserver(Protocol):
    """Observer that receives every catalog the event source produces."""

    def on_catalog(self, catalog: "Catalog") -> None:
        """
        Handle a new catalog.

        Args:
            catalog: Full replacement snapshot of ready and active events

        Threading:
            Called from the poll thread or the socket.io client thread.
            Implementations must hand the catalog over to their own thread
            rather than doing work inline.
        """
        ...


@runtime_checkable
class DeckObserver(Protocol):
    """Observer that receives button device events."""

    def on_deck_event(self, event: DeckEvent, key: int = -1, error: Exception | None = None) -> None:
        """
        Handle device events.

        Args:
            event: The type of device event
            key: Key index for KEY_UP, -1 otherwise
            error: The failure for DEVICE_LOST, None otherwise

        Threading:
            KEY_UP is called from the device's read thread. DEVICE_LOST is
            called from whichever thread made the failing call.
        """
        ...


@runtime_checkable
class LauncherObserver(Protocol):
    """Observer that receives launcher lifecycle changes."""

    def on_launcher_state(self, old: LauncherState, new: LauncherState) -> None:
        """Handle a state transition."""
        ...
