"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from triggerdeck.model_manager.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".triggerdeck" / "config.json"


class ServerConfiguration(BaseModel):
    """Configuration published by the server at ``/api/v1/configuration``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    websocket_service: str = Field(alias="websocketService")


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Server
    server_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the event server (scheme and host, no trailing path)",
    )
    document_id: str | None = Field(default=None, description="Document whose cues are shown")
    request_timeout: float = Field(
        default=10.0, gt=0, description="Timeout for HTTP requests (seconds)"
    )

    # Sync channels
    poll_interval: float = Field(
        default=2.0, gt=0, description="How often to fetch the full event list (seconds)"
    )
    push_enabled: bool = Field(default=True, description="Subscribe to push updates")
    push_namespace: str = Field(default="/trigger", description="socket.io namespace for push updates")

    # Device
    brightness: int = Field(default=70, ge=0, le=100, description="Key brightness (percent)")
    slot_count: int | None = Field(
        default=None,
        ge=1,
        description="Number of slots (None = device key count, 15 when no device is attached)",
    )

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Require a scheme and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.triggerdeck/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or DEFAULT_CONFIG_PATH, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
