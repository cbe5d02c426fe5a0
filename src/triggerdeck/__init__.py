"""TriggerDeck: Stream Deck launcher for live-production cues."""

__version__ = "0.1.0"
