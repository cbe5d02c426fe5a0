"""Tests for the Stream Deck controller."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from triggerdeck.devices import DeviceController, list_decks, open_first_deck
from triggerdeck.exceptions import DeviceError
from triggerdeck.models import Color
from triggerdeck.protocols import DeckEvent, DeckObserver

RED = Color(r=255, g=56, b=96)


@pytest.mark.unit
class TestAbsentDevice:
    """Test that every call is a no-op without a device."""

    def test_not_present(self):
        """Test properties without a device."""
        controller = DeviceController()
        assert not controller.is_present
        assert controller.key_count == 0
        assert controller.key_size is None
        assert controller.device_name is None

    def test_calls_are_noops(self):
        """Test that output calls return False and don't raise."""
        controller = DeviceController()
        assert controller.clear_key(0) is False
        assert controller.clear_all_keys() is False
        assert controller.fill_color(0, RED) is False
        assert controller.fill_image(0, b"png") is False
        assert controller.set_brightness(50) is False
        controller.close()
        controller.close()

    def test_handlers_can_register(self):
        """Test that handlers can be registered without a device."""
        controller = DeviceController()
        controller.on_key_up(Mock())
        controller.on_error(Mock())


@pytest.mark.unit
class TestPresentDevice:
    """Test device calls with a working deck."""

    def test_registers_key_callback(self, mock_deck):
        """Test that the key callback is installed on attach."""
        DeviceController(mock_deck)
        mock_deck.set_key_callback.assert_called_once()

    def test_properties(self, mock_deck):
        """Test key count and size."""
        controller = DeviceController(mock_deck)
        assert controller.is_present
        assert controller.key_count == 15
        assert controller.key_size == (72, 72)
        assert controller.device_name == "Stream Deck Original"

    def test_clear_key(self, mock_deck):
        """Test that clearing sends an empty image."""
        controller = DeviceController(mock_deck)
        assert controller.clear_key(3) is True
        mock_deck.set_key_image.assert_called_once_with(3, None)

    def test_clear_all_keys(self, mock_deck):
        """Test that every key is cleared."""
        controller = DeviceController(mock_deck)
        assert controller.clear_all_keys() is True
        assert mock_deck.set_key_image.call_count == 15

    @patch("triggerdeck.devices.controller.solid_key_image")
    def test_fill_color(self, mock_solid, mock_deck):
        """Test filling a key with a color."""
        mock_solid.return_value = b"native"
        controller = DeviceController(mock_deck)

        assert controller.fill_color(2, RED) is True
        mock_solid.assert_called_once_with(mock_deck, RED)
        mock_deck.set_key_image.assert_called_once_with(2, b"native")

    @patch("triggerdeck.devices.controller.encoded_key_image")
    def test_fill_image(self, mock_encoded, mock_deck):
        """Test showing an encoded image."""
        mock_encoded.return_value = b"native"
        controller = DeviceController(mock_deck)

        assert controller.fill_image(1, b"png-bytes") is True
        mock_encoded.assert_called_once_with(mock_deck, b"png-bytes")
        mock_deck.set_key_image.assert_called_once_with(1, b"native")

    def test_out_of_range_key(self, mock_deck):
        """Test that invalid key indices are refused without dropping the device."""
        controller = DeviceController(mock_deck)
        assert controller.clear_key(15) is False
        assert controller.clear_key(-1) is False
        assert controller.is_present
        mock_deck.set_key_image.assert_not_called()

    def test_brightness_clamped(self, mock_deck):
        """Test that brightness is limited to 0-100."""
        controller = DeviceController(mock_deck)
        controller.set_brightness(150)
        mock_deck.set_brightness.assert_called_once_with(100)

    def test_close_resets_and_closes(self, mock_deck):
        """Test closing the deck."""
        controller = DeviceController(mock_deck)
        controller.close()

        mock_deck.reset.assert_called_once()
        mock_deck.close.assert_called_once()
        assert not controller.is_present

        controller.close()
        mock_deck.close.assert_called_once()

    def test_context_manager(self, mock_deck):
        """Test context manager closes the deck."""
        with DeviceController(mock_deck) as controller:
            assert controller.is_present
        mock_deck.close.assert_called_once()


@pytest.mark.unit
class TestKeyEvents:
    """Test key callbacks."""

    def _key_callback(self, mock_deck):
        return mock_deck.set_key_callback.call_args[0][0]

    def test_key_up_notifies(self, mock_deck):
        """Test that releasing a key calls key-up handlers."""
        controller = DeviceController(mock_deck)
        handler = Mock()
        controller.on_key_up(handler)

        self._key_callback(mock_deck)(mock_deck, 4, False)

        handler.assert_called_once_with(4)

    def test_key_down_ignored(self, mock_deck):
        """Test that pressing a key does nothing."""
        controller = DeviceController(mock_deck)
        handler = Mock()
        controller.on_key_up(handler)

        self._key_callback(mock_deck)(mock_deck, 4, True)

        handler.assert_not_called()

    def test_observer_receives_key_up(self, mock_deck):
        """Test DeckObserver registration."""
        controller = DeviceController(mock_deck)
        observer = Mock(spec=DeckObserver)
        controller.register_observer(observer)

        self._key_callback(mock_deck)(mock_deck, 0, False)

        observer.on_deck_event.assert_called_once_with(DeckEvent.KEY_UP, 0)


@pytest.mark.unit
class TestFailureIsolation:
    """Test that a failing device is dropped, never raised."""

    def test_failure_drops_device_and_notifies(self, mock_deck):
        """Test the first failure disables the device and fires error handlers."""
        mock_deck.set_key_image.side_effect = OSError("HID write failed")
        controller = DeviceController(mock_deck)
        on_error = Mock()
        controller.on_error(on_error)

        assert controller.clear_key(0) is False

        assert not controller.is_present
        mock_deck.close.assert_called_once()
        on_error.assert_called_once()
        error = on_error.call_args[0][0]
        assert isinstance(error, DeviceError)
        assert error.operation == "clear_key"
        assert "HID write failed" in error.technical_message

    def test_calls_after_failure_are_noops(self, mock_deck):
        """Test that the device stays absent after a failure."""
        mock_deck.set_brightness.side_effect = OSError("gone")
        controller = DeviceController(mock_deck)
        on_error = Mock()
        controller.on_error(on_error)

        controller.set_brightness(50)
        mock_deck.set_key_image.reset_mock()

        assert controller.clear_all_keys() is False
        assert controller.fill_color(0, RED) is False
        mock_deck.set_key_image.assert_not_called()
        on_error.assert_called_once()

    def test_failing_close_is_contained(self, mock_deck):
        """Test that errors while closing a failed deck are swallowed."""
        mock_deck.set_brightness.side_effect = OSError("gone")
        mock_deck.close.side_effect = OSError("already closed")
        controller = DeviceController(mock_deck)

        assert controller.set_brightness(10) is False
        assert not controller.is_present

    def test_failing_key_callback_registration(self):
        """Test a deck that fails immediately is dropped on attach."""
        deck = MagicMock()
        deck.set_key_callback.side_effect = OSError("no access")

        controller = DeviceController(deck)

        assert not controller.is_present

    def test_key_up_handler_not_called_on_error(self, mock_deck):
        """Test that handlers only see their own event type."""
        mock_deck.set_brightness.side_effect = OSError("gone")
        controller = DeviceController(mock_deck)
        on_key_up = Mock()
        controller.on_key_up(on_key_up)

        controller.set_brightness(10)

        on_key_up.assert_not_called()


@pytest.mark.unit
class TestDiscovery:
    """Test Stream Deck enumeration."""

    @patch("triggerdeck.devices.streamdeck.DeviceManager")
    def test_open_first_deck(self, mock_manager, mock_deck):
        """Test that the first deck is opened."""
        other = MagicMock()
        mock_manager.return_value.enumerate.return_value = [mock_deck, other]

        assert open_first_deck() is mock_deck
        mock_deck.open.assert_called_once()
        other.open.assert_not_called()

    @patch("triggerdeck.devices.streamdeck.DeviceManager")
    def test_no_deck(self, mock_manager):
        """Test that no connected deck means absent mode."""
        mock_manager.return_value.enumerate.return_value = []
        assert open_first_deck() is None

    @patch("triggerdeck.devices.streamdeck.DeviceManager")
    def test_enumeration_failure(self, mock_manager):
        """Test that a missing HID backend means absent mode."""
        mock_manager.return_value.enumerate.side_effect = OSError("no hidapi")
        assert open_first_deck() is None

    @patch("triggerdeck.devices.streamdeck.DeviceManager")
    def test_open_failure(self, mock_manager, mock_deck):
        """Test that a deck that cannot be opened means absent mode."""
        mock_deck.open.side_effect = OSError("busy")
        mock_manager.return_value.enumerate.return_value = [mock_deck]
        assert open_first_deck() is None

    @patch("triggerdeck.devices.streamdeck.DeviceManager")
    def test_list_decks(self, mock_manager, mock_deck):
        """Test describing decks."""
        mock_deck.get_serial_number.return_value = "CL123"
        mock_manager.return_value.enumerate.return_value = [mock_deck]

        decks = list_decks()

        assert decks == [{"index": 0, "type": "Stream Deck Original", "keys": 15, "serial": "CL123"}]
        mock_deck.close.assert_called_once()
