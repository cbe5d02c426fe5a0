"""Stream Deck discovery and native image conversion.

Thin helpers on top of python-elgato-streamdeck. Every function here
talks to hardware and may raise; the controller is the failure boundary.
"""

import io
import logging
from typing import Any

from PIL import Image
from StreamDeck.DeviceManager import DeviceManager
from StreamDeck.ImageHelpers import PILHelper

from triggerdeck.models import Color

from .protocols import Deck

logger = logging.getLogger(__name__)


def list_decks() -> list[dict[str, Any]]:
    """
    Describe the connected Stream Decks without keeping them open.

    Returns:
        One dict per deck with ``index``, ``type``, ``keys`` and ``serial``
        (serial is None if the deck could not be opened)
    """
    result = []
    for index, deck in enumerate(DeviceManager().enumerate()):
        info: dict[str, Any] = {
            "index": index,
            "type": deck.deck_type(),
            "keys": deck.key_count(),
            "serial": None,
        }
        try:
            deck.open()
            try:
                info["serial"] = deck.get_serial_number()
            finally:
                deck.close()
        except Exception as e:
            logger.warning(f"Could not open {info['type']} #{index}: {e}")
        result.append(info)
    return result


def open_first_deck() -> Deck | None:
    """
    Open the first connected Stream Deck.

    Returns:
        The opened deck, or None if no deck is connected or it cannot be
        opened (the application then runs without a device)
    """
    try:
        decks = DeviceManager().enumerate()
    except Exception as e:
        logger.error(f"Stream Deck enumeration failed: {e}")
        return None

    if not decks:
        logger.warning("No Stream Deck connected, running without a device")
        return None

    deck = decks[0]
    try:
        deck.open()
    except Exception as e:
        logger.error(f"Could not open {deck.deck_type()}: {e}")
        return None

    logger.info(f"Opened {deck.deck_type()} with {deck.key_count()} keys")
    return deck


def solid_key_image(deck: Deck, color: Color) -> Any:
    """Native key image filled with one color."""
    image = PILHelper.create_key_image(deck, background=color.to_rgb_tuple())
    return PILHelper.to_native_key_format(deck, image)


def encoded_key_image(deck: Deck, data: bytes) -> Any:
    """
    Native key image from encoded image bytes (PNG, JPEG, ...).

    The image is scaled to fit the key and centered on black.
    """
    with Image.open(io.BytesIO(data)) as source:
        image = PILHelper.create_scaled_key_image(deck, source.convert("RGB"), margins=[0, 0, 0, 0])
    return PILHelper.to_native_key_format(deck, image)
