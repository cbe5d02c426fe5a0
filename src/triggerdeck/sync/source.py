"""Event source: poll and push channels merged into one catalog stream."""

import logging
import threading
from typing import Any, Optional

import socketio

from triggerdeck.core import build_catalog
from triggerdeck.exceptions import CatalogPayloadError, ErrorContext, TriggerDeckError
from triggerdeck.model_manager import ObserverManager
from triggerdeck.models import Catalog, CatalogChannel, parse_events
from triggerdeck.protocols import CatalogObserver
from triggerdeck.services import RemoteApi

from .poller import CatalogPoller
from .push import PushChannel

logger = logging.getLogger(__name__)


class EventSource:
    """
    Produces catalogs for one document from two redundant channels.

    Every validated payload, from either channel, becomes a full
    replacement catalog. Catalogs are delivered to observers in the order
    they were accepted; a malformed payload is logged and dropped, so the
    previously delivered catalog stays in effect.

    Example:
        ```python
        source = EventSource(api, "doc-1")
        source.register_observer(launcher)
        source.start()
        ```
    """

    def __init__(
        self,
        api: RemoteApi,
        document_id: str,
        poll_interval: float = 2.0,
        push_enabled: bool = True,
        push_namespace: str = "/trigger",
        push_client: Optional[socketio.Client] = None,
    ):
        """
        Initialize the event source.

        Args:
            api: REST client for fetches
            document_id: Document whose events are followed
            poll_interval: Seconds between polls
            push_enabled: Whether to open the push channel
            push_namespace: socket.io namespace of the push channel
            push_client: Optional socket.io client (tests inject a mock)
        """
        self.api = api
        self.document_id = document_id
        self.push_enabled = push_enabled

        self._observers = ObserverManager[CatalogObserver](observer_type_name="catalog")
        # Held across validation and notification so catalogs leave in receipt order
        self._deliver_lock = threading.Lock()
        self._latest: Optional[Catalog] = None

        self._poller = CatalogPoller(
            fetch=lambda: api.fetch_events(document_id),
            on_payload=self._on_poll_payload,
            interval=poll_interval,
        )
        self._push: Optional[PushChannel] = None
        if push_enabled:
            self._push = PushChannel(
                document_id,
                on_payload=self._on_push_payload,
                namespace=push_namespace,
                client=push_client,
            )

    # ================================================================
    # OBSERVERS
    # ================================================================

    def register_observer(self, observer: CatalogObserver) -> None:
        """Register an observer to receive catalogs."""
        self._observers.register(observer)

    def unregister_observer(self, observer: CatalogObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def start(self) -> None:
        """Start polling and, if enabled, connect the push channel in the background."""
        self._poller.start()
        if self._push is not None:
            threading.Thread(target=self._connect_push, name="push-connect", daemon=True).start()

    def stop(self) -> None:
        """Stop polling and close the push connection."""
        self._poller.stop()
        if self._push is not None:
            with ErrorContext("close push channel", logger, re_raise=False):
                self._push.stop()

    def _connect_push(self) -> None:
        try:
            configuration = self.api.fetch_configuration()
            self._push.connect(configuration.websocket_service)
        except TriggerDeckError as e:
            logger.warning(f"Push channel unavailable, using polling only: {e.technical_message}")
        except Exception as e:
            logger.warning(f"Push channel unavailable, using polling only: {e}")

    # ================================================================
    # INGEST
    # ================================================================

    def fetch_once(self) -> Catalog:
        """
        Fetch and deliver a catalog synchronously.

        Returns:
            The catalog built from the fetched events

        Raises:
            RemoteRequestError: If the fetch fails
            CatalogPayloadError: If the payload is malformed
        """
        payload = self.api.fetch_events(self.document_id)
        return self._accept(parse_events(payload, CatalogChannel.MANUAL.value), CatalogChannel.MANUAL)

    def _on_poll_payload(self, payload: Any) -> None:
        self._ingest(payload, CatalogChannel.POLL)

    def _on_push_payload(self, data: Any) -> None:
        if not isinstance(data, dict) or "events" not in data:
            logger.error("Dropping push update without an 'events' list")
            return
        self._ingest(data["events"], CatalogChannel.PUSH)

    def _ingest(self, payload: Any, channel: CatalogChannel) -> Optional[Catalog]:
        try:
            events = parse_events(payload, channel.value)
        except CatalogPayloadError as e:
            logger.error(e.technical_message)
            return None
        return self._accept(events, channel)

    def _accept(self, events: list, channel: CatalogChannel) -> Catalog:
        with self._deliver_lock:
            catalog = build_catalog(events, channel)
            self._latest = catalog
            logger.debug(
                f"Catalog from {channel.value}: {len(catalog.ready)} ready, "
                f"{len(catalog.active)} active, {len(catalog.queue)} queued"
            )
            self._observers.notify("on_catalog", catalog)
        return catalog

    # ================================================================
    # PROPERTIES
    # ================================================================

    @property
    def latest(self) -> Optional[Catalog]:
        """Most recently delivered catalog, or None before the first one."""
        return self._latest

    @property
    def push_channel(self) -> Optional[PushChannel]:
        """The push channel, or None when push is disabled."""
        return self._push
