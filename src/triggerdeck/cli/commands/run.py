"""Run command: drive the Stream Deck until interrupted."""

import logging
import sys

import click

from triggerdeck.cli.settings import load_config, log_path

logger = logging.getLogger(__name__)


@click.command(name="run")
@click.option(
    "--artwork/--no-artwork",
    default=True,
    help="Show preview images on keys when events have one (default: enabled)",
)
@click.pass_context
def run(ctx: click.Context, artwork: bool):
    """
    Show the document's cues on the Stream Deck and launch them on key press.

    Runs until Ctrl+C. Works without a connected Stream Deck (the
    assignment is still tracked and logged).
    """
    # Lazy imports to keep --help fast
    from triggerdeck.deck_ui import ArtworkLoader
    from triggerdeck.exceptions import format_error_for_display
    from triggerdeck.orchestration import TriggerLauncher

    logger.info("Starting TriggerDeck")
    launcher = None

    try:
        config = load_config(ctx)
        if not config.document_id:
            raise click.UsageError("No document id configured (use --document-id or 'config save')")

        launcher = TriggerLauncher(
            config,
            artwork=ArtworkLoader(timeout=config.request_timeout) if artwork else None,
        )
        click.echo(f"Following document {config.document_id} on {config.server_url} (Ctrl+C to stop)")
        launcher.run()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.ClickException:
        raise
    except Exception as e:
        logger.exception("Error running application")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        path = log_path(ctx)
        if path:
            click.echo(f"\nFor details, check the log file: {path}", err=True)
        sys.exit(1)
    finally:
        if launcher is not None:
            launcher.shutdown()
