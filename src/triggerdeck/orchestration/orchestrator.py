"""
Launcher coordinator.

Wires the event source, the slot reconciler and the device together:

    EventSource ──catalog──┐
    ArtworkLoader ─loaded──┤
                           ├──> inbound queue ──> control loop ──> SlotRenderer ──> DeviceController
    DeviceController ─key──┘                           │
                                                       └──launch──> RemoteApi (background thread)

Everything the launcher reacts to goes through one ordered queue and is
applied by a single control loop thread, so the slot table is only ever
read and written from that thread. Launch requests run on their own
daemon threads; their outcome shows up in a later catalog. Preview
images download on the artwork loader's thread; keys are drawn in flat
color until the image arrives.
"""

import logging
import queue
import threading
from collections.abc import Callable
from typing import Optional

from triggerdeck.core import LauncherStateMachine, reconcile
from triggerdeck.deck_ui import ArtworkLoader, SlotRenderer
from triggerdeck.devices import Deck, DeviceController, open_first_deck
from triggerdeck.exceptions import ConfigValidationError, TriggerDeckError
from triggerdeck.models import AppConfig, Catalog, Event, SlotTable
from triggerdeck.protocols import DeckEvent, InboundEvent, InboundKind, LauncherState
from triggerdeck.services import RemoteApi
from triggerdeck.sync import EventSource

logger = logging.getLogger(__name__)

DEFAULT_SLOT_COUNT = 15


class TriggerLauncher:
    """
    Top-level coordinator for one document and one Stream Deck.

    Lifecycle:
        INITIALIZING --start()--> SYNCING --first catalog--> STEADY

    The launcher keeps working without a device (nothing is drawn, the
    slot table is still maintained) and without the push channel (the
    poller keeps the catalog current).
    """

    def __init__(
        self,
        config: AppConfig,
        api: Optional[RemoteApi] = None,
        source: Optional[EventSource] = None,
        device: Optional[DeviceController] = None,
        artwork: Optional[ArtworkLoader] = None,
        open_device: Callable[[], Optional[Deck]] = open_first_deck,
        launch_in_background: bool = True,
    ):
        """
        Initialize the launcher. Nothing is opened until ``start``.

        Args:
            config: Application configuration (``document_id`` is required)
            api: REST client (created from config if None)
            source: Event source (created from config if None)
            device: Device controller (opened with ``open_device`` on start if None)
            artwork: Preview loader (previews disabled if None)
            open_device: Returns an opened deck or None
            launch_in_background: Launch requests on daemon threads (tests disable it)

        Raises:
            ConfigValidationError: If no document id is configured
        """
        if not config.document_id:
            raise ConfigValidationError("document_id", None, "A document id is required")

        self.config = config
        self.document_id = config.document_id
        self.api = api or RemoteApi(config.server_url, timeout=config.request_timeout)
        self.source = source or EventSource(
            self.api,
            self.document_id,
            poll_interval=config.poll_interval,
            push_enabled=config.push_enabled,
            push_namespace=config.push_namespace,
        )
        self.device = device
        self.artwork = artwork
        if artwork is not None:
            artwork.on_loaded(self.on_artwork_loaded)
        self._open_device = open_device
        self._launch_in_background = launch_in_background

        self.state_machine = LauncherStateMachine()
        self._inbound: queue.Queue[InboundEvent] = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._renderer: Optional[SlotRenderer] = None

        # Owned by the control loop thread once started
        self._slots = SlotTable.empty(self._slot_count())
        self._catalog: Optional[Catalog] = None

        self._lifecycle_lock = threading.Lock()
        self._started = False
        self._shut_down = False
        self._stopped = threading.Event()

    def _slot_count(self) -> int:
        # Slots beyond the last key could never be drawn or pressed
        if self.device is not None and self.device.is_present:
            key_count = self.device.key_count
            if self.config.slot_count is not None:
                return min(self.config.slot_count, key_count)
            return key_count
        if self.config.slot_count is not None:
            return self.config.slot_count
        return DEFAULT_SLOT_COUNT

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def start(self) -> None:
        """Open the device, start both channels and the control loop."""
        with self._lifecycle_lock:
            if self._started or self._shut_down:
                logger.warning("TriggerLauncher already started or shut down")
                return
            self._started = True

        logger.info(f"Starting launcher for document {self.document_id}")
        self.state_machine.transition(LauncherState.SYNCING)

        if self.device is None:
            self.device = DeviceController(self._open_device())

        self._slots = SlotTable.empty(self._slot_count())
        self._renderer = SlotRenderer(self.device, self.artwork)
        logger.info(f"Using {len(self._slots)} slots")

        self.device.clear_all_keys()
        self.device.set_brightness(self.config.brightness)
        self.device.register_observer(self)

        self._worker = threading.Thread(target=self._run_loop, name="launcher-loop", daemon=True)
        self._worker.start()

        self.source.register_observer(self)
        self.source.start()

    def run(self) -> None:
        """Start and block until ``shutdown`` is called (or Ctrl+C)."""
        self.start()
        while not self._stopped.wait(0.5):
            pass

    def shutdown(self) -> None:
        """Stop everything and blank the device. Safe to call repeatedly."""
        with self._lifecycle_lock:
            if self._shut_down:
                return
            self._shut_down = True

        logger.info("Shutting down launcher")
        self.source.unregister_observer(self)
        self.source.stop()

        if self._worker is not None:
            self._inbound.put(InboundEvent(InboundKind.STOP))
            self._worker.join(timeout=5.0)
            self._worker = None

        if self.device is not None:
            self.device.clear_all_keys()
            self.device.close()

        if self.artwork is not None:
            self.artwork.close()
        self.api.close()

        self._stopped.set()
        logger.info("Launcher stopped")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()

    # ================================================================
    # INBOUND (called from source, device and artwork threads)
    # ================================================================

    def on_catalog(self, catalog: Catalog) -> None:
        """CatalogObserver: queue a catalog for the control loop."""
        self._inbound.put(InboundEvent(InboundKind.CATALOG, catalog=catalog))

    def on_deck_event(self, event: DeckEvent, key: int = -1, error: Exception | None = None) -> None:
        """DeckObserver: queue device input for the control loop."""
        if event == DeckEvent.KEY_UP:
            self._inbound.put(InboundEvent(InboundKind.KEY_UP, key=key))
        elif event == DeckEvent.DEVICE_LOST:
            self._inbound.put(InboundEvent(InboundKind.DEVICE_ERROR, error=error))

    def on_artwork_loaded(self, url: str) -> None:
        """Artwork listener: queue a redraw of the keys showing ``url``."""
        self._inbound.put(InboundEvent(InboundKind.ARTWORK, url=url))

    # ================================================================
    # CONTROL LOOP
    # ================================================================

    def _run_loop(self) -> None:
        logger.debug("Control loop started")
        while True:
            item = self._inbound.get()
            if item.kind == InboundKind.STOP:
                break
            try:
                self.dispatch(item)
            except Exception as e:
                logger.error(f"Error handling {item.kind.value}: {e}", exc_info=True)
        logger.debug("Control loop stopped")

    def dispatch(self, item: InboundEvent) -> None:
        """
        Apply one inbound event.

        Called by the control loop; tests call it directly to step the
        launcher deterministically.
        """
        if item.kind == InboundKind.CATALOG and item.catalog is not None:
            self._apply_catalog(item.catalog)
        elif item.kind == InboundKind.KEY_UP:
            self._handle_key_up(item.key)
        elif item.kind == InboundKind.DEVICE_ERROR:
            detail = item.error.technical_message if isinstance(item.error, TriggerDeckError) else item.error
            logger.error(f"Stream Deck dropped, continuing without it: {detail}")
        elif item.kind == InboundKind.ARTWORK and item.url and self._renderer is not None:
            self._renderer.render_preview(self._slots, item.url)

    def _apply_catalog(self, catalog: Catalog) -> None:
        self._slots = reconcile(self._slots, catalog)
        self._catalog = catalog

        if self._renderer is not None:
            self._renderer.render(self._slots)

        if self.state_machine.state == LauncherState.SYNCING:
            self.state_machine.transition(LauncherState.STEADY)

    def _handle_key_up(self, key: int) -> None:
        event = self._slots.event_at(key)
        if event is None:
            logger.debug(f"Key {key} released on an empty slot")
            return

        if event.is_active and not event.modify:
            logger.info(f"Event {event.id} is running and cannot be modified, ignoring key {key}")
            return

        self.launch(event)

    # ================================================================
    # LAUNCH
    # ================================================================

    def launch(self, event: Event) -> None:
        """Send a launch request for ``event`` without waiting for it."""
        if self._launch_in_background:
            threading.Thread(target=self._launch, args=(event,), name=f"launch-{event.id}", daemon=True).start()
        else:
            self._launch(event)

    def _launch(self, event: Event) -> None:
        try:
            self.api.launch_event(self.document_id, event)
        except TriggerDeckError as e:
            logger.error(f"Could not launch event {event.id}: {e.technical_message}")
        except Exception as e:
            logger.error(f"Could not launch event {event.id}: {e}", exc_info=True)

    # ================================================================
    # PROPERTIES
    # ================================================================

    @property
    def slots(self) -> SlotTable:
        """Slot table currently shown."""
        return self._slots

    @property
    def catalog(self) -> Optional[Catalog]:
        """Most recently applied catalog."""
        return self._catalog

    @property
    def state(self) -> LauncherState:
        """Current lifecycle state."""
        return self.state_machine.state
