"""socket.io push channel.

Protocol, on the ``/trigger`` namespace of the server's websocket service:

- on connect the client emits ``JOIN`` with the document id and waits for
  an acknowledgement
- the server emits ``EVENTS`` with ``{"events": [...]}``, always the full
  event list of the document
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, Optional

import socketio

logger = logging.getLogger(__name__)


class PushChannel:
    """
    Push subscription for one document.

    Payloads are handed to ``on_payload`` as received, on the socket.io
    client's thread. Losing the connection is logged only; the client's
    own reconnection logic applies once a first connection succeeded.
    """

    def __init__(
        self,
        document_id: str,
        on_payload: Callable[[Any], None],
        namespace: str = "/trigger",
        client: Optional[socketio.Client] = None,
    ):
        """
        Initialize the push channel.

        Args:
            document_id: Document to join
            on_payload: Receives the data of every EVENTS message
            namespace: socket.io namespace of the trigger service
            client: Optional socket.io client (tests inject a mock)
        """
        self.document_id = document_id
        self.namespace = namespace
        self._on_payload = on_payload
        self._client = client or socketio.Client(reconnection=True, logger=False)
        self._joined = threading.Event()

        self._client.on("connect", self._on_connect, namespace=namespace)
        self._client.on("disconnect", self._on_disconnect, namespace=namespace)
        self._client.on("EVENTS", self._on_events, namespace=namespace)

    def connect(self, websocket_service: str) -> None:
        """
        Connect to the websocket service. Blocks until connected.

        Args:
            websocket_service: Base URL of the push transport

        Raises:
            socketio.exceptions.ConnectionError: If the connection fails
        """
        url = websocket_service.rstrip("/")
        logger.info(f"Connecting push channel to {url}{self.namespace}")
        self._client.connect(url, namespaces=[self.namespace], transports=["websocket"])

    def stop(self) -> None:
        """Close the connection (no-op if not connected)."""
        self._joined.clear()
        if self._client.connected:
            self._client.disconnect()
            logger.info("Push channel disconnected")

    # ================================================================
    # SOCKET.IO HANDLERS
    # ================================================================

    def _on_connect(self) -> None:
        logger.info(f"Push channel connected, joining document {self.document_id}")
        self._client.emit("JOIN", self.document_id, namespace=self.namespace, callback=self._on_join_ack)

    def _on_join_ack(self, *args: Any) -> None:
        self._joined.set()
        logger.info(f"Joined push channel for document {self.document_id}")

    def _on_disconnect(self, *args: Any) -> None:
        self._joined.clear()
        logger.warning("Push channel lost; polling continues")

    def _on_events(self, data: Any) -> None:
        logger.debug("Push update received")
        try:
            self._on_payload(data)
        except Exception as e:
            logger.error(f"Error handling push update: {e}", exc_info=True)

    # ================================================================
    # PROPERTIES
    # ================================================================

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return bool(self._client.connected)

    @property
    def is_joined(self) -> bool:
        """Check if the server acknowledged the JOIN."""
        return self._joined.is_set()
