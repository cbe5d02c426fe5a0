"""HTTP client for the event server.

Thin wrapper around ``requests.Session`` that knows the server's URL
layout and turns transport failures into ``RemoteRequestError``:

- ``GET  {server}/api/v1/document/{document}/events``
- ``GET  {server}/api/v1/configuration``
- ``POST {server}/api/v1/document/{document}/events/{event}/trigger``
- ``POST {server}/api/v1/document/{document}/events/{event}/modify``
"""

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from triggerdeck.exceptions import CatalogPayloadError, wrap_request_error
from triggerdeck.models import Event, ServerConfiguration

logger = logging.getLogger(__name__)


class RemoteApi:
    """
    Client for the event server's REST API.

    Thread-safe enough for this application: the poll thread and the
    launch threads each issue independent requests over one session.
    """

    def __init__(
        self,
        server_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            server_url: Base URL of the server (no trailing slash needed)
            timeout: Timeout for every request (seconds)
            session: Optional session to use (tests inject a mock)
        """
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")

    # ================================================================
    # URLS
    # ================================================================

    def events_url(self, document_id: str) -> str:
        """URL of a document's event list."""
        return f"{self.server_url}/api/v1/document/{quote(document_id, safe='')}/events"

    def configuration_url(self) -> str:
        """URL of the server configuration."""
        return f"{self.server_url}/api/v1/configuration"

    def launch_url(self, document_id: str, event: Event) -> str:
        """URL that launches (ready) or modifies (active) an event."""
        action = "modify" if event.is_active else "trigger"
        return f"{self.events_url(document_id)}/{quote(event.id, safe='')}/{action}"

    # ================================================================
    # REQUESTS
    # ================================================================

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            raise wrap_request_error(e, method, url) from e

    def fetch_events(self, document_id: str) -> Any:
        """
        Fetch the raw event list of a document.

        Returns:
            Decoded JSON payload (validated later by the event source)

        Raises:
            RemoteRequestError: On transport failure or error status
            CatalogPayloadError: If the body is not JSON
        """
        url = self.events_url(document_id)
        response = self._request("GET", url)
        try:
            return response.json()
        except ValueError as e:
            raise CatalogPayloadError(f"Response from {url} is not JSON: {e}", channel="poll") from e

    def fetch_configuration(self) -> ServerConfiguration:
        """
        Fetch the server configuration (push service location).

        Raises:
            RemoteRequestError: On transport failure, error status or
                a body without ``websocketService``
        """
        url = self.configuration_url()
        response = self._request("GET", url)
        try:
            return ServerConfiguration.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise wrap_request_error(e, "GET", url) from e

    def launch_event(self, document_id: str, event: Event) -> None:
        """
        Ask the server to launch an event.

        Ready events are triggered and active events are modified. The
        body is the list of parameters that carry a value. The response
        content is not used: the next catalog reflects the outcome.

        Raises:
            RemoteRequestError: On transport failure or error status
        """
        url = self.launch_url(document_id, event)
        self._request("POST", url, json=event.launch_parameters())
        logger.info(f"Launched event {event.id} ({event.name})")

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
