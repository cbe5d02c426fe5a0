"""Remote server exceptions.

This module defines exceptions for talking to the event server:
- RemoteError: Base class for server communication errors
- RemoteRequestError: An HTTP request failed or returned an error status
- CatalogPayloadError: The server sent an event list that does not validate
"""

from typing import Optional

from .base import TriggerDeckError


class RemoteError(TriggerDeckError):
    """Communication with the event server failed."""
    pass


class RemoteRequestError(RemoteError):
    """An HTTP request to the event server failed."""

    def __init__(
        self,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        original_error: Optional[str] = None,
    ):
        """
        Initialize request error.

        Args:
            method: HTTP method of the failed request
            url: Request URL
            status_code: HTTP status code, if a response was received
            original_error: Message of the underlying transport exception
        """
        if status_code is not None:
            user_msg = f"Server answered {method} {url} with HTTP {status_code}"
        else:
            user_msg = f"Could not reach server for {method} {url}"

        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Check that the server URL is correct and the server is running.",
        )
        self.method = method
        self.url = url
        self.status_code = status_code
        self.original_error = original_error


class CatalogPayloadError(RemoteError):
    """The event list received from the server is malformed."""

    def __init__(self, detail: str, channel: str = "unknown"):
        """
        Initialize payload error.

        Args:
            detail: Why the payload was rejected
            channel: Channel the payload arrived on (poll, push)
        """
        super().__init__(
            user_message=f"Rejected malformed event list from {channel} channel",
            technical_message=f"Malformed event list from {channel}: {detail}",
            recoverable=True,
        )
        self.detail = detail
        self.channel = channel
