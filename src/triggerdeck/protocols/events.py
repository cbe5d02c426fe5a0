"""Domain events.

- InboundKind / InboundEvent: everything the launcher reacts to, delivered
  through one ordered queue
- DeckEvent: button device input and connection events
- LauncherState: coordinator lifecycle
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from triggerdeck.models import Catalog


class InboundKind(Enum):
    """Kinds of events consumed by the launcher's control loop."""

    CATALOG = "catalog"            # New catalog from the poll or push channel
    KEY_UP = "key_up"              # Device key released
    DEVICE_ERROR = "device_error"  # Device dropped after an I/O failure
    ARTWORK = "artwork"            # Preview image finished downloading
    STOP = "stop"                  # Internal: stop the control loop


@dataclass(frozen=True)
class InboundEvent:
    """One item of the launcher's inbound queue."""

    kind: InboundKind
    catalog: Optional["Catalog"] = None
    key: int = -1
    error: Optional[Exception] = None
    url: Optional[str] = None


class DeckEvent(Enum):
    """Events from the button device."""

    KEY_UP = "key_up"                  # Key released
    DEVICE_LOST = "device_lost"        # Device call failed, device is now absent


class LauncherState(Enum):
    """Coordinator lifecycle states. There is no terminal state."""

    INITIALIZING = "initializing"  # Constructed, nothing opened yet
    SYNCING = "syncing"            # Device and channels opened, waiting for first catalog
    STEADY = "steady"              # At least one catalog applied
