"""Stream Deck access."""

from .controller import DeviceController
from .protocols import Deck
from .streamdeck import list_decks, open_first_deck

__all__ = ["Deck", "DeviceController", "list_decks", "open_first_deck"]
