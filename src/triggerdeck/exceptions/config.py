"""Errors raised while loading or validating the application config."""

from typing import Any

from .base import TriggerDeckError

# Extra guidance appended to validation hints, keyed by a fragment of the field name
_FIELD_HINTS = {
    "url": "URLs must include the scheme, e.g. http://localhost:8000",
    "brightness": "Brightness is a percentage between 0 and 100",
    "interval": "Intervals are given in seconds and must be positive",
    "timeout": "Timeouts are given in seconds and must be positive",
}


class ConfigurationError(TriggerDeckError):
    """The config file cannot be used."""


class ConfigFileInvalidError(ConfigurationError):
    """The config file is unreadable, empty or not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        if "trailing comma" in parse_error.lower():
            summary = "The config file has a trailing comma"
            hint = f"Delete the comma after the last entry in {file_path}"
        else:
            summary = "The config file is not valid JSON"
            hint = (
                f"Fix {file_path} by hand, or delete it to start from defaults.\n"
                "Look for unquoted strings and unbalanced braces."
            )

        super().__init__(
            user_message=summary,
            technical_message=f"{file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=hint,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A config value has the wrong type or is out of range."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Args:
            field: Dotted path of the offending field
            value: Value that was rejected
            error_msg: Validator message
            file_path: Where the value came from, if known
        """
        lines = [f"Change '{field}'" + (f" in {file_path}" if file_path else "")]
        lines.extend(hint for key, hint in _FIELD_HINTS.items() if key in field.lower())

        super().__init__(
            user_message=f"Bad value for '{field}': {error_msg}",
            technical_message=f"{field}={value!r} rejected: {error_msg}",
            recoverable=True,
            recovery_hint="\n".join(lines),
        )
        self.field = field
        self.value = value
        self.file_path = file_path
