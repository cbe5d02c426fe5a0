"""Button device exceptions."""

from typing import Optional

from .base import TriggerDeckError


class DeviceError(TriggerDeckError):
    """A call to the button device failed and the device was dropped."""

    def __init__(self, operation: str, original_error: Optional[str] = None):
        """
        Initialize device error.

        Args:
            operation: Device operation that failed (e.g. "fill_color")
            original_error: Message of the underlying exception
        """
        tech_msg = f"Device operation '{operation}' failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message="Lost connection to the Stream Deck.",
            technical_message=tech_msg,
            recoverable=False,
            recovery_hint="Reconnect the device and restart triggerdeck.",
        )
        self.operation = operation
        self.original_error = original_error
