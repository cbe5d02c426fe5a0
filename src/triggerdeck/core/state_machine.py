"""State machine for the launcher lifecycle."""

import logging
from threading import Lock

from triggerdeck.model_manager import ObserverManager
from triggerdeck.protocols import LauncherObserver, LauncherState

logger = logging.getLogger(__name__)

# Allowed transitions. STEADY may fall back to SYNCING when the launcher
# is restarted; there is no terminal state.
_TRANSITIONS: dict[LauncherState, set[LauncherState]] = {
    LauncherState.INITIALIZING: {LauncherState.SYNCING},
    LauncherState.SYNCING: {LauncherState.STEADY, LauncherState.INITIALIZING},
    LauncherState.STEADY: {LauncherState.SYNCING, LauncherState.INITIALIZING},
}


class LauncherStateMachine:
    """
    Tracks the launcher lifecycle and dispatches transitions to observers.

    Thread-safe: transitions may be requested from the control loop and
    from the thread calling ``start``/``shutdown``.
    """

    def __init__(self) -> None:
        """Initialize in the INITIALIZING state."""
        self._lock = Lock()
        self._state = LauncherState.INITIALIZING
        self._observers = ObserverManager[LauncherObserver](observer_type_name="launcher")

    def register_observer(self, observer: LauncherObserver) -> None:
        """Register an observer to receive state transitions."""
        self._observers.register(observer)

    def unregister_observer(self, observer: LauncherObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def transition(self, new_state: LauncherState) -> bool:
        """
        Move to a new state.

        Args:
            new_state: Target state

        Returns:
            True if the state changed, False if already there or not allowed
        """
        with self._lock:
            old_state = self._state
            if old_state == new_state:
                return False
            if new_state not in _TRANSITIONS[old_state]:
                logger.warning(f"Ignoring launcher transition {old_state.value} -> {new_state.value}")
                return False
            self._state = new_state

        logger.info(f"Launcher state: {old_state.value} -> {new_state.value}")
        # Notify observers AFTER releasing lock to avoid deadlock
        self._observers.notify("on_launcher_state", old_state, new_state)
        return True

    @property
    def state(self) -> LauncherState:
        """Current state."""
        with self._lock:
            return self._state
