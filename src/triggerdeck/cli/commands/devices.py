"""Device command implementations."""

import logging

import click

from triggerdeck.devices import list_decks

logger = logging.getLogger(__name__)


@click.command(name="devices")
def devices():
    """List connected Stream Decks."""
    try:
        decks = list_decks()
    except Exception as e:
        logger.error(f"Stream Deck enumeration failed: {e}")
        raise click.ClickException(f"Could not enumerate Stream Decks: {e}")

    if not decks:
        click.echo("No Stream Decks found.")
        return

    click.echo("Stream Decks:\n")
    for deck in decks:
        serial = deck["serial"] or "unavailable"
        click.echo(f"  [{deck['index']}] {deck['type']} ({deck['keys']} keys, serial {serial})")
