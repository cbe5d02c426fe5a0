"""
Custom exception hierarchy for TriggerDeck.

## Exception Hierarchy

```
TriggerDeckError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   └── ConfigValidationError
├── RemoteError
│   ├── RemoteRequestError
│   └── CatalogPayloadError
└── DeviceError
```

Transport and device errors are never fatal: the sync layer and the
device controller catch them, log `technical_message` and keep the last
known good state. Only configuration errors reach the CLI, which shows
`user_message` and `recovery_hint`.
"""

from .base import TriggerDeckError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import DeviceError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_pydantic_error,
    wrap_request_error,
)
from .remote import CatalogPayloadError, RemoteError, RemoteRequestError

__all__ = [
    # Base
    "TriggerDeckError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Device
    "DeviceError",
    # Remote
    "CatalogPayloadError",
    "RemoteError",
    "RemoteRequestError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_request_error",
]
