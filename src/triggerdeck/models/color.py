"""Key background colors."""

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """8-bit RGB. Frozen, so it can be a module constant and a cache key."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """The ``(r, g, b)`` form Pillow takes."""
        return (self.r, self.g, self.b)
