"""Services talking to the event server."""

from .remote_api import RemoteApi

__all__ = ["RemoteApi"]
