"""
Failure-isolated façade over the Stream Deck.

The controller is the only code that touches the device. It guarantees
two things to the rest of the application:

- No device call ever raises. Every call is wrapped; the first failure
  is logged, the device is dropped and error handlers are notified.
- A missing device is not an error. Without a device (none connected at
  startup, or dropped after a failure) every call is a silent no-op, so
  the launcher keeps syncing and can still be driven headless.

Once dropped, the device stays absent until the application restarts.

Usage Example
-------------

.. code-block:: python

    controller = DeviceController(open_first_deck())
    controller.on_key_up(lambda key: print("released", key))
    controller.clear_all_keys()
    controller.fill_color(0, Color(r=255, g=56, b=96))
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from triggerdeck.exceptions import DeviceError
from triggerdeck.model_manager import ObserverManager
from triggerdeck.models import Color
from triggerdeck.protocols import DeckEvent, DeckObserver

from .protocols import Deck
from .streamdeck import encoded_key_image, solid_key_image

logger = logging.getLogger(__name__)


class _KeyUpHandler:
    """Adapts a plain ``callback(key)`` to the DeckObserver protocol."""

    def __init__(self, callback: Callable[[int], None]):
        self._callback = callback

    def on_deck_event(self, event: DeckEvent, key: int = -1, error: Exception | None = None) -> None:
        if event == DeckEvent.KEY_UP:
            self._callback(key)


class _ErrorHandler:
    """Adapts a plain ``callback(error)`` to the DeckObserver protocol."""

    def __init__(self, callback: Callable[[Exception], None]):
        self._callback = callback

    def on_deck_event(self, event: DeckEvent, key: int = -1, error: Exception | None = None) -> None:
        if event == DeckEvent.DEVICE_LOST and error is not None:
            self._callback(error)


class DeviceController:
    """
    Owns the optional Stream Deck and isolates its failures.

    Threading:
        Device calls are serialized by one lock. Key callbacks arrive on
        the library's read thread; DEVICE_LOST is notified on the thread
        whose call failed, after the lock is released.
    """

    def __init__(self, deck: Deck | None = None):
        """
        Initialize the controller.

        Args:
            deck: An opened deck, or None to run without a device
        """
        self._lock = threading.RLock()
        self._deck: Deck | None = None
        self._observers = ObserverManager[DeckObserver](observer_type_name="deck")

        if deck is not None:
            self._attach(deck)

    def _attach(self, deck: Deck) -> None:
        self._deck = deck
        self._call("set_key_callback", lambda d: d.set_key_callback(self._handle_key_change))

    # ================================================================
    # OBSERVERS
    # ================================================================

    def register_observer(self, observer: DeckObserver) -> None:
        """Register observer for key-up and device-lost events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: DeckObserver) -> None:
        """Unregister observer."""
        self._observers.unregister(observer)

    def on_key_up(self, callback: Callable[[int], None]) -> None:
        """Call ``callback(key)`` whenever a key is released."""
        self._observers.register(_KeyUpHandler(callback))

    def on_error(self, callback: Callable[[Exception], None]) -> None:
        """Call ``callback(error)`` when the device is dropped after a failure."""
        self._observers.register(_ErrorHandler(callback))

    def _handle_key_change(self, deck: Any, key: int, pressed: bool) -> None:
        """Key state callback; called from the library's read thread."""
        if pressed:
            return
        logger.debug(f"Key {key} released")
        self._observers.notify("on_deck_event", DeckEvent.KEY_UP, key)

    # ================================================================
    # FAILURE BOUNDARY
    # ================================================================

    def _call(self, operation: str, action: Callable[[Deck], None]) -> bool:
        """
        Run one device call inside the failure boundary.

        Returns:
            True if the call ran, False if there is no device or it failed
        """
        with self._lock:
            deck = self._deck
            if deck is None:
                return False
            try:
                action(deck)
                return True
            except Exception as e:
                logger.error(f"Lost connection to Stream Deck during {operation}: {e}")
                self._deck = None
                error = DeviceError(operation, str(e))
                error.__cause__ = e
                self._release(deck)

        self._observers.notify("on_deck_event", DeckEvent.DEVICE_LOST, -1, error)
        return False

    @staticmethod
    def _release(deck: Deck) -> None:
        try:
            deck.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing failed deck: {e}")

    def _valid_key(self, key: int) -> bool:
        count = self.key_count
        if not 0 <= key < count:
            logger.warning(f"Key {key} out of range (device has {count} keys)")
            return False
        return True

    # ================================================================
    # KEY OUTPUT
    # ================================================================

    def clear_key(self, key: int) -> bool:
        """
        Blank one key.

        Returns:
            True if sent, False if no device, out of range or failed
        """
        if self._deck is None or not self._valid_key(key):
            return False
        return self._call("clear_key", lambda d: d.set_key_image(key, None))

    def clear_all_keys(self) -> bool:
        """Blank every key."""

        def clear(deck: Deck) -> None:
            for key in range(deck.key_count()):
                deck.set_key_image(key, None)

        return self._call("clear_all_keys", clear)

    def fill_color(self, key: int, color: Color) -> bool:
        """
        Fill one key with a solid color.

        Returns:
            True if sent, False if no device, out of range or failed
        """
        if self._deck is None or not self._valid_key(key):
            return False
        return self._call("fill_color", lambda d: d.set_key_image(key, solid_key_image(d, color)))

    def fill_image(self, key: int, data: bytes) -> bool:
        """
        Show an encoded image (PNG, JPEG, ...) on one key.

        Returns:
            True if sent, False if no device, out of range or failed
        """
        if self._deck is None or not self._valid_key(key):
            return False
        return self._call("fill_image", lambda d: d.set_key_image(key, encoded_key_image(d, data)))

    def set_brightness(self, percent: int) -> bool:
        """Set backlight brightness, clamped to 0-100."""
        percent = max(0, min(100, int(percent)))
        return self._call("set_brightness", lambda d: d.set_brightness(percent))

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def close(self) -> None:
        """Reset and close the device. Safe to call repeatedly."""
        with self._lock:
            deck = self._deck
            self._deck = None

        if deck is None:
            return

        try:
            deck.reset()
        except Exception as e:
            logger.warning(f"Error resetting Stream Deck: {e}")
        self._release(deck)
        logger.info("Stream Deck closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    # ================================================================
    # PROPERTIES
    # ================================================================

    @property
    def is_present(self) -> bool:
        """Check if a working device is attached."""
        return self._deck is not None

    @property
    def key_count(self) -> int:
        """Number of keys (0 without a device)."""
        deck = self._deck
        return deck.key_count() if deck is not None else 0

    @property
    def key_size(self) -> tuple[int, int] | None:
        """Key image size in pixels, or None without a device."""
        deck = self._deck
        if deck is None:
            return None
        width, height = deck.key_image_format()["size"]
        return int(width), int(height)

    @property
    def device_name(self) -> str | None:
        """Model name of the attached deck."""
        deck = self._deck
        return deck.deck_type() if deck is not None else None
