"""Event (cue) records received from the server.

Events are a closed tagged union over ``state``. Each variant is a frozen
pydantic model so a validated catalog can be shared between threads
without copying.

Raw JSON uses camelCase for a few fields (``previewUrl``,
``productionId``); models accept both the alias and the Python name and
ignore fields they don't know about.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from triggerdeck.exceptions import CatalogPayloadError

from .enums import EventState

logger = logging.getLogger(__name__)


class ParameterOption(BaseModel):
    """One choice of a ``selection`` parameter."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: str
    value: str


class EventParameter(BaseModel):
    """Parameter a cue is launched with."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(description="duration, time, string, url, const, set or selection")
    name: str
    parameter: str
    value: Any = None
    options: tuple[ParameterOption, ...] = ()
    required: bool = False


class _EventBase(BaseModel):
    """Fields shared by every event state."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1, description="Stable per-definition identity")
    name: str = ""
    parameters: tuple[EventParameter, ...] = ()
    preview_url: str | None = Field(default=None, alias="previewUrl")
    production_id: str | None = Field(
        default=None,
        alias="productionId",
        description="Identity of the template a running instance came from",
    )
    longdesc: str | None = None
    verb: str | None = None
    trigger: bool = False
    modify: bool = False

    @property
    def is_active(self) -> bool:
        """Check if this event is a running instance."""
        return self.state == EventState.ACTIVE

    @property
    def is_ready(self) -> bool:
        """Check if this event is a launchable template."""
        return self.state == EventState.READY

    def launch_parameters(self) -> list[dict[str, Any]]:
        """Parameters to send with a trigger/modify request (only those with a value)."""
        return [
            {"parameter": p.parameter, "value": p.value}
            for p in self.parameters
            if p.value is not None
        ]


class AbstractEvent(_EventBase):
    """Definition that cannot be launched."""

    state: Literal["abstract"] = "abstract"


class ReadyEvent(_EventBase):
    """Launchable template."""

    state: Literal["ready"] = "ready"


class ActiveEvent(_EventBase):
    """Running instance of a ready template."""

    state: Literal["active"] = "active"


Event = Annotated[Union[AbstractEvent, ReadyEvent, ActiveEvent], Field(discriminator="state")]

_EVENT_LIST = TypeAdapter(list[Event])


def parse_events(payload: Any, channel: str = "unknown") -> list[Event]:
    """
    Validate a raw event list.

    The whole payload is rejected if any record is malformed, so callers
    never see a partially applied list.

    Args:
        payload: JSON text/bytes or an already decoded list
        channel: Channel name used in error messages

    Returns:
        Validated events in payload order

    Raises:
        CatalogPayloadError: If the payload is not a valid event list
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return _EVENT_LIST.validate_json(payload)
        return _EVENT_LIST.validate_python(payload)
    except ValidationError as e:
        raise CatalogPayloadError(str(e), channel=channel) from e


def dump_events(events: list[Event]) -> list[dict[str, Any]]:
    """Serialize events back to their wire form (camelCase aliases)."""
    return _EVENT_LIST.dump_python(events, by_alias=True, exclude_none=True, mode="json")
