"""Button device protocol.

Describes the subset of the ``StreamDeck.Devices.StreamDeck`` API the
controller relies on, so tests can hand in any object with the same
shape.
"""

from collections.abc import Callable
from typing import Any, Protocol


class Deck(Protocol):
    """An opened Stream Deck."""

    def key_count(self) -> int:
        """Number of keys."""
        ...

    def key_image_format(self) -> dict[str, Any]:
        """Native key image format (``size``, ``format``, ...)."""
        ...

    def deck_type(self) -> str:
        """Model name."""
        ...

    def set_key_image(self, key: int, image: Any) -> None:
        """Show a native image on a key, or clear it with None."""
        ...

    def set_brightness(self, percent: int) -> None:
        """Set backlight brightness (0-100)."""
        ...

    def set_key_callback(self, callback: Callable[[Any, int, bool], None]) -> None:
        """Register the key state callback ``(deck, key, pressed)``."""
        ...

    def reset(self) -> None:
        """Clear all keys and show the standby image."""
        ...

    def close(self) -> None:
        """Close the HID connection."""
        ...
