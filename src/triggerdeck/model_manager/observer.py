"""Observer registry shared by the event source, the device and the launcher."""

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class ObserverManager[T: object]:
    """
    Copy-on-write list of observers.

    Registration swaps in a new tuple under a lock; ``notify`` reads the
    current tuple without locking. A callback may therefore register or
    unregister observers (itself included) while being notified, and the
    change applies from the next notification on.

    One failing observer never prevents the others from being called: its
    exception is logged with a traceback and delivery continues.

    Example:
        ```python
        observers = ObserverManager[CatalogObserver](observer_type_name="catalog")
        observers.register(launcher)
        observers.notify("on_catalog", catalog)
        ```
    """

    def __init__(self, observer_type_name: str = "observer"):
        """
        Args:
            observer_type_name: Label used in log lines (e.g. "catalog", "deck")
        """
        self._observers: tuple[T, ...] = ()
        self._lock = Lock()
        self._name = observer_type_name

    def register(self, observer: T) -> None:
        """Add an observer. Registering the same observer twice is a no-op."""
        with self._lock:
            if observer in self._observers:
                return
            self._observers = (*self._observers, observer)
        logger.debug(f"Registered {self._name} observer {observer!r}")

    def unregister(self, observer: T) -> None:
        """Remove an observer if it is registered."""
        with self._lock:
            remaining = tuple(o for o in self._observers if o is not observer)
            removed = len(remaining) != len(self._observers)
            self._observers = remaining
        if not removed:
            logger.debug(f"{self._name} observer {observer!r} was not registered")

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """Call ``callback_name`` on every observer, in registration order."""
        for observer in self._observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(f"{self._name} observer {observer!r} has no '{callback_name}'")
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"{self._name} observer {observer!r} failed in {callback_name}: {e}", exc_info=True)

    def clear(self) -> None:
        """Drop every observer."""
        with self._lock:
            self._observers = ()

    def __contains__(self, observer: T) -> bool:
        return observer in self._observers

    def __len__(self) -> int:
        return len(self._observers)

    def __bool__(self) -> bool:
        return bool(self._observers)
