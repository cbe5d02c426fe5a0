"""Key rendering."""

from .artwork import ArtworkLoader
from .colors import ACTIVE_COLOR, NEUTRAL_COLOR, READY_COLOR
from .renderer import SlotRenderer

__all__ = ["ACTIVE_COLOR", "ArtworkLoader", "NEUTRAL_COLOR", "READY_COLOR", "SlotRenderer"]
