"""Slot table rendering."""

import logging

from triggerdeck.devices import DeviceController
from triggerdeck.models import Event, SlotTable

from .artwork import ArtworkLoader
from .colors import ACTIVE_COLOR, NEUTRAL_COLOR, READY_COLOR

logger = logging.getLogger(__name__)


class SlotRenderer:
    """
    Draws a slot table on the device.

    Every render is a full pass over all slots: empty slots are cleared,
    active events get the success color and ready events the danger
    color. With an artwork loader, events that have a preview show it on
    a frame in their state color instead; if the preview is unavailable,
    still downloading or fails to compose, that slot falls back to the
    flat color and the pass goes on.
    """

    def __init__(self, device: DeviceController, artwork: ArtworkLoader | None = None):
        self._device = device
        self._artwork = artwork

    def render(self, table: SlotTable) -> None:
        """Draw every slot of ``table``."""
        if not self._device.is_present:
            return

        key_count = self._device.key_count
        for index, entry in enumerate(table):
            if index >= key_count:
                break
            if entry is None:
                self._device.clear_key(index)
            else:
                self.render_event(index, entry.event)

    def render_preview(self, table: SlotTable, url: str) -> None:
        """Redraw only the slots whose event uses the preview ``url``."""
        if not self._device.is_present:
            return

        key_count = self._device.key_count
        for index, entry in enumerate(table):
            if index >= key_count:
                break
            if entry is not None and entry.event.preview_url == url:
                self.render_event(index, entry.event)

    def render_event(self, index: int, event: Event) -> None:
        """Draw one event on key ``index``."""
        color = ACTIVE_COLOR if event.is_active else READY_COLOR

        if self._artwork is not None and event.preview_url and self._draw_preview(index, event):
            return

        self._device.fill_color(index, color)

    def _draw_preview(self, index: int, event: Event) -> bool:
        size = self._device.key_size
        if not size:
            return False

        frame = ACTIVE_COLOR if event.is_active else NEUTRAL_COLOR
        try:
            data = self._artwork.compose(event.preview_url, frame, size)
        except Exception as e:
            logger.warning(f"Could not compose preview for event {event.id}: {e}")
            return False

        return data is not None and self._device.fill_image(index, data)
