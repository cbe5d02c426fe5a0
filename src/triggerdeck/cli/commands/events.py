"""Events command: one-shot fetch and slot preview."""

import logging

import click

from triggerdeck.cli.settings import load_config
from triggerdeck.core import build_catalog, reconcile
from triggerdeck.exceptions import TriggerDeckError, format_error_for_display
from triggerdeck.models import CatalogChannel, SlotTable, parse_events
from triggerdeck.orchestration import DEFAULT_SLOT_COUNT
from triggerdeck.services import RemoteApi

logger = logging.getLogger(__name__)


@click.command(name="events")
@click.option(
    "--slots",
    type=click.IntRange(min=1),
    default=None,
    help="Number of buttons to assign (default: config slot_count or 15)",
)
@click.pass_context
def events(ctx: click.Context, slots: int | None):
    """
    Fetch the document's events once and show the button assignment.

    Prints the launch queue (ready templates, replaced by their running
    instance where there is one) and how it would be laid out on an
    empty device.
    """
    try:
        config = load_config(ctx)
        if not config.document_id:
            raise click.UsageError("No document id configured (use --document-id)")

        api = RemoteApi(config.server_url, timeout=config.request_timeout)
        try:
            payload = api.fetch_events(config.document_id)
        finally:
            api.close()
        catalog = build_catalog(parse_events(payload, "manual"), CatalogChannel.MANUAL)
    except TriggerDeckError as e:
        logger.error(e.technical_message)
        user_message, recovery_hint = format_error_for_display(e)
        message = user_message + (f"\n{recovery_hint}" if recovery_hint else "")
        raise click.ClickException(message)

    click.echo(f"Active: {len(catalog.active)}  Ready: {len(catalog.ready)}\n")

    click.echo("Queue:")
    if not catalog.queue:
        click.echo("  (empty)")
    for entry in catalog.queue:
        event = entry.event
        click.echo(f"  {entry.key:<24} {event.state:<7} {event.name}")

    count = slots or config.slot_count or DEFAULT_SLOT_COUNT
    table = reconcile(SlotTable.empty(count), catalog)

    click.echo("\nButtons:")
    for index, entry in enumerate(table):
        label = f"{entry.event.name} [{entry.event.state}]" if entry else "-"
        click.echo(f"  {index:>2}: {label}")

    hidden = len(catalog.queue) - table.occupied
    if hidden > 0:
        click.echo(f"\n{hidden} event(s) without button")
