"""Tests for slot rendering and preview artwork."""

import io
import threading
import time
from unittest.mock import MagicMock, Mock

import pytest
import requests
from PIL import Image

from triggerdeck.deck_ui import ACTIVE_COLOR, NEUTRAL_COLOR, READY_COLOR, ArtworkLoader, SlotRenderer
from triggerdeck.models import QueuedEvent, SlotTable

from factories import active, ready


def _device(key_count: int = 3):
    device = MagicMock()
    device.is_present = True
    device.key_count = key_count
    device.key_size = (72, 72)
    device.fill_image.return_value = True
    return device


def _png(size=(10, 20), color=(0, 0, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _session(content: bytes) -> Mock:
    session = Mock()
    response = Mock()
    response.content = content
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session


@pytest.mark.unit
class TestSlotRenderer:
    """Test full render passes."""

    def test_colors_by_state(self):
        """Test empty, ready and active slots."""
        device = _device()
        table = SlotTable(slots=(
            QueuedEvent(key="a", event=ready("a")),
            None,
            QueuedEvent(key="b", event=active("b-1")),
        ))

        SlotRenderer(device).render(table)

        device.fill_color.assert_any_call(0, READY_COLOR)
        device.clear_key.assert_called_once_with(1)
        device.fill_color.assert_any_call(2, ACTIVE_COLOR)

    def test_slots_beyond_key_count_skipped(self):
        """Test that a table larger than the device only draws existing keys."""
        device = _device(key_count=1)
        table = SlotTable(slots=(None, QueuedEvent(key="a", event=ready("a"))))

        SlotRenderer(device).render(table)

        device.clear_key.assert_called_once_with(0)
        device.fill_color.assert_not_called()

    def test_absent_device_draws_nothing(self):
        """Test that rendering without a device is a no-op."""
        device = _device()
        device.is_present = False

        SlotRenderer(device).render(SlotTable.empty(3))

        device.clear_key.assert_not_called()

    def test_preview_used_when_available(self):
        """Test that preview art replaces the flat color."""
        device = _device()
        artwork = Mock()
        artwork.compose.return_value = b"png"
        event = active("b-1", preview_url="http://img.test/b.png")

        SlotRenderer(device, artwork).render(SlotTable(slots=(QueuedEvent(key="b", event=event),)))

        artwork.compose.assert_called_once_with("http://img.test/b.png", ACTIVE_COLOR, (72, 72))
        device.fill_image.assert_called_once_with(0, b"png")
        device.fill_color.assert_not_called()

    def test_ready_preview_on_neutral_frame(self):
        """Test that ready previews use the neutral frame."""
        device = _device()
        artwork = Mock()
        artwork.compose.return_value = b"png"
        event = ready("a", preview_url="http://img.test/a.png")

        SlotRenderer(device, artwork).render_event(0, event)

        artwork.compose.assert_called_once_with("http://img.test/a.png", NEUTRAL_COLOR, (72, 72))

    def test_missing_preview_falls_back_to_color(self):
        """Test per-slot fallback when the preview is unavailable."""
        device = _device()
        artwork = Mock()
        artwork.compose.return_value = None
        event = ready("a", preview_url="http://img.test/missing.png")

        SlotRenderer(device, artwork).render_event(0, event)

        device.fill_image.assert_not_called()
        device.fill_color.assert_called_once_with(0, READY_COLOR)

    def test_compose_failure_falls_back_for_that_slot_only(self):
        """Test that a preview that cannot be composed does not stop the pass."""
        device = _device()
        artwork = Mock()
        artwork.compose.side_effect = [Image.DecompressionBombError("too big"), b"png"]
        table = SlotTable(slots=(
            QueuedEvent(key="a", event=ready("a", preview_url="http://img.test/bomb.png")),
            QueuedEvent(key="b", event=ready("b", preview_url="http://img.test/b.png")),
            QueuedEvent(key="c", event=ready("c")),
        ))

        SlotRenderer(device, artwork).render(table)

        device.fill_color.assert_any_call(0, READY_COLOR)
        device.fill_image.assert_called_once_with(1, b"png")
        device.fill_color.assert_any_call(2, READY_COLOR)

    def test_failed_image_write_falls_back_to_color(self):
        """Test that a rejected image write still draws the flat color."""
        device = _device()
        device.fill_image.return_value = False
        artwork = Mock()
        artwork.compose.return_value = b"png"

        SlotRenderer(device, artwork).render_event(0, active("b-1", preview_url="http://img.test/b.png"))

        device.fill_color.assert_called_once_with(0, ACTIVE_COLOR)

    def test_render_preview_redraws_matching_slots(self):
        """Test that only slots using the loaded image are redrawn."""
        device = _device()
        artwork = Mock()
        artwork.compose.return_value = b"png"
        table = SlotTable(slots=(
            QueuedEvent(key="a", event=ready("a", preview_url="http://img.test/a.png")),
            None,
            QueuedEvent(key="b", event=ready("b", preview_url="http://img.test/b.png")),
        ))

        SlotRenderer(device, artwork).render_preview(table, "http://img.test/a.png")

        device.fill_image.assert_called_once_with(0, b"png")
        device.clear_key.assert_not_called()
        device.fill_color.assert_not_called()


@pytest.mark.unit
class TestArtworkLoader:
    """Test preview download and composition."""

    def test_compose_returns_png_of_key_size(self):
        """Test composing a preview onto a frame."""
        loader = ArtworkLoader(session=_session(_png()))
        loader.load("http://img.test/a.png")

        data = loader.compose("http://img.test/a.png", ACTIVE_COLOR, (72, 72))

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.size == (72, 72)
            # Corner is frame color, center is artwork
            assert image.getpixel((0, 0)) == ACTIVE_COLOR.to_rgb_tuple()
            assert image.getpixel((36, 36)) == (0, 0, 255)

    def test_download_cached(self):
        """Test that each URL is fetched once."""
        session = _session(_png())
        loader = ArtworkLoader(session=session)

        loader.load("http://img.test/a.png")
        loader.compose("http://img.test/a.png", ACTIVE_COLOR, (72, 72))
        loader.compose("http://img.test/a.png", READY_COLOR, (72, 72))

        session.get.assert_called_once()

    def test_failed_download_cached_as_miss(self):
        """Test that a failing URL returns None and is not retried."""
        session = Mock()
        session.get.side_effect = requests.ConnectionError("refused")
        loader = ArtworkLoader(session=session)

        assert loader.load("http://img.test/a.png") is None
        assert loader.compose("http://img.test/a.png", ACTIVE_COLOR, (72, 72)) is None
        session.get.assert_called_once()

    def test_undecodable_image(self):
        """Test that non-image content is treated as a miss."""
        loader = ArtworkLoader(session=_session(b"<html>not an image</html>"))
        assert loader.load("http://img.test/a.png") is None

    def test_oversized_image_is_a_miss(self, monkeypatch):
        """Test that images over Pillow's pixel limit are rejected, not raised."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        loader = ArtworkLoader(session=_session(_png(size=(100, 100))))

        assert loader.load("http://img.test/huge.png") is None
        assert loader.is_cached("http://img.test/huge.png")

    def test_compose_never_downloads(self):
        """Test that an uncached URL is queued and the caller gets None at once."""
        session = _session(_png())
        loader = ArtworkLoader(session=session)
        loaded = threading.Event()
        urls = []
        loader.on_loaded(lambda url: (urls.append(url), loaded.set()))

        try:
            assert loader.compose("http://img.test/a.png", ACTIVE_COLOR, (72, 72)) is None
            assert loaded.wait(2.0)
            assert urls == ["http://img.test/a.png"]
            assert loader.compose("http://img.test/a.png", ACTIVE_COLOR, (72, 72)) is not None
        finally:
            loader.close()
        session.get.assert_called_once()

    def test_slow_downloads_do_not_block_compose(self):
        """Test that compose returns immediately while downloads hang."""
        release = threading.Event()
        session = Mock()

        def slow_get(url, timeout):
            release.wait(2.0)
            raise requests.Timeout("slow")

        session.get.side_effect = slow_get
        loader = ArtworkLoader(session=session)
        try:
            started = time.monotonic()
            for index in range(3):
                assert loader.compose(f"http://img.test/{index}.png", READY_COLOR, (72, 72)) is None
            assert time.monotonic() - started < 0.5
        finally:
            release.set()
            loader.close()

    def test_request_deduplicated(self):
        """Test that a URL already queued is not queued again."""
        release = threading.Event()
        done = threading.Event()
        session = Mock()

        def get(url, timeout):
            release.wait(2.0)
            raise requests.ConnectionError("refused")

        session.get.side_effect = get
        loader = ArtworkLoader(session=session)
        loader.on_loaded(lambda url: done.set())
        try:
            loader.request("http://img.test/a.png")
            loader.request("http://img.test/a.png")
            release.set()
            assert done.wait(2.0)
        finally:
            loader.close()
        session.get.assert_called_once()

    def test_least_recently_used_evicted(self):
        """Test that the cache keeps at most max_images URLs."""
        session = _session(_png())
        loader = ArtworkLoader(session=session, max_images=2)

        loader.load("http://img.test/a.png")
        loader.load("http://img.test/b.png")
        loader.load("http://img.test/a.png")
        loader.load("http://img.test/c.png")

        assert loader.is_cached("http://img.test/a.png")
        assert not loader.is_cached("http://img.test/b.png")
        assert loader.is_cached("http://img.test/c.png")
        assert session.get.call_count == 3

    def test_clear_forgets_misses(self):
        """Test that clearing the cache allows a retry."""
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")
        loader = ArtworkLoader(session=session)

        loader.load("http://img.test/a.png")
        loader.clear()
        loader.load("http://img.test/a.png")

        assert session.get.call_count == 2

    def test_close_without_downloads(self):
        """Test that closing an unused loader only closes the session."""
        session = Mock()
        ArtworkLoader(session=session).close()
        session.close.assert_called_once()
