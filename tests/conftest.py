"""Pytest fixtures for tests."""

from unittest.mock import MagicMock

import pytest

from triggerdeck.models import AppConfig, EventParameter

from factories import ready


@pytest.fixture
def config():
    """Application config for document doc-1 on a local server, poll only."""
    return AppConfig(server_url="http://cues.test", document_id="doc-1", push_enabled=False)


@pytest.fixture
def mock_deck():
    """Opened Stream Deck double with 15 keys of 72x72 pixels."""
    deck = MagicMock()
    deck.key_count.return_value = 15
    deck.key_image_format.return_value = {"size": (72, 72), "format": "JPEG"}
    deck.deck_type.return_value = "Stream Deck Original"
    return deck


@pytest.fixture
def event_with_parameters():
    """Ready event with one filled and one empty parameter."""
    return ready(
        "lower-third",
        parameters=[
            EventParameter(type="string", name="Caption", parameter="$caption", value="Rossi"),
            EventParameter(type="duration", name="Duration", parameter="$duration"),
        ],
    )
