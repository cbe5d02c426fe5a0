"""Conversion of library errors into TriggerDeck errors.

Low-level failures (requests, pydantic, HID) are turned into
``TriggerDeckError`` subclasses at the layer that catches them, so the
CLI only ever has to show ``user_message`` and ``recovery_hint``:

| Source | Helper |
|--------|--------|
| ``requests.RequestException`` | ``raise wrap_request_error(e, "GET", url) from e`` |
| ``pydantic.ValidationError`` on a config file | ``raise wrap_pydantic_error(e, str(path)) from e`` |
| anything in a best-effort block | ``with ErrorContext("close push channel", logger, re_raise=False)`` |
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from .base import TriggerDeckError
from .config import ConfigFileInvalidError, ConfigValidationError
from .remote import RemoteRequestError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Log any exception raised in a block, optionally suppressing it.

    TriggerDeck errors are logged with their technical message; anything
    else is logged with a traceback. The exception is kept on ``error``.
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None:
            return False
        if not isinstance(exc_val, Exception):
            # KeyboardInterrupt and SystemExit always propagate
            return False

        self.error = exc_val
        if isinstance(exc_val, TriggerDeckError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)
        return not self.re_raise


def _field_path(error: dict[str, Any]) -> str:
    return ".".join(str(part) for part in error.get("loc", ())) or "unknown"


def wrap_pydantic_error(error: Exception, file_path: str) -> TriggerDeckError:
    """
    Convert a pydantic error raised while loading configuration.

    Args:
        error: Usually a ``ValidationError``
        file_path: Where the data came from (a path or "command line")

    Returns:
        ``ConfigFileInvalidError`` for JSON syntax errors, otherwise a
        ``ConfigValidationError`` naming the offending field(s)
    """
    if not isinstance(error, ValidationError):
        return ConfigValidationError("unknown", None, str(error), file_path=file_path)

    errors = error.errors()
    syntax = [e for e in errors if e.get("type") == "json_invalid"]
    if syntax:
        return ConfigFileInvalidError(file_path, syntax[0].get("msg", "invalid JSON"))

    if len(errors) == 1:
        only = errors[0]
        return ConfigValidationError(
            field=_field_path(only),
            value=only.get("input"),
            error_msg=only.get("msg", "validation failed"),
            file_path=file_path,
        )

    lines = [f"  - {_field_path(e)}: {e.get('msg', 'validation failed')}" for e in errors]
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(errors)} validation errors:\n" + "\n".join(lines),
        file_path=file_path,
    )


def wrap_request_error(error: Exception, method: str, url: str) -> RemoteRequestError:
    """
    Convert a failed HTTP exchange into a RemoteRequestError.

    The status code is kept when the server answered; connection errors,
    timeouts and unreadable bodies have none.
    """
    response = getattr(error, "response", None)
    status_code = response.status_code if response is not None else None
    return RemoteRequestError(method, url, status_code=status_code, original_error=str(error))


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """Return ``(message, recovery_hint)`` for showing ``error`` on the terminal."""
    if isinstance(error, TriggerDeckError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
