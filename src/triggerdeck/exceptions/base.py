"""Root of the TriggerDeck exception hierarchy."""

from typing import Optional


class TriggerDeckError(Exception):
    """
    Base class for errors TriggerDeck raises on purpose.

    Every error carries two texts. ``user_message`` is short and goes to
    the terminal; ``technical_message`` keeps URLs, status codes and the
    underlying exception text for the log file. ``recoverable`` tells the
    caller whether retrying later can succeed (a server hiccup) or not (a
    lost device, a broken config file).
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, if any."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
