"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from triggerdeck import __version__

from .commands import config, devices, events, run

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers that flood the file at DEBUG
QUIET_LOGGERS = ("socketio", "engineio", "urllib3")


def _console_level(verbose: int, debug: bool) -> int:
    if debug or verbose >= 2:
        return logging.DEBUG
    return logging.INFO if verbose == 1 else logging.WARNING


def _default_log_path(debug: bool) -> Path:
    if debug:
        return Path.cwd() / "triggerdeck-debug.log"
    log_dir = Path.home() / ".triggerdeck" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "triggerdeck.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Attach a rotating file handler and a console handler to the root logger.

    The file gets ``log_level`` (DEBUG with ``--debug``); the console gets
    warnings by default, INFO with ``-v`` and DEBUG with ``-vv``.

    Returns:
        Path of the log file
    """
    console_level = _console_level(verbose, debug)
    file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())
    log_path = log_file or _default_log_path(debug)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    lowest = min(file_level, console_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(lowest)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.INFO, lowest))

    logger.info(f"Logging to {log_path} at {logging.getLevelName(file_level)}")
    return log_path


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="triggerdeck")
@click.option(
    '--config',
    '-c',
    'config_file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.triggerdeck/config.json)'
)
@click.option('--server-url', '-s', type=str, default=None, help='Base URL of the event server')
@click.option('--document-id', '-d', type=str, default=None, help='Document whose cues are shown')
@click.option(
    '--poll-interval',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Seconds between full event fetches (default: 2)'
)
@click.option(
    '--brightness',
    type=click.IntRange(0, 100),
    default=None,
    help='Key brightness in percent (default: 70)'
)
@click.option('--no-push', is_flag=True, help='Do not subscribe to push updates, poll only')
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./triggerdeck-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    config_file: Optional[Path],
    server_url: Optional[str],
    document_id: Optional[str],
    poll_interval: Optional[float],
    brightness: Optional[int],
    no_push: bool,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    TriggerDeck - launch live-production cues from an Elgato Stream Deck.

    Follows the events of one document on the server and keeps the
    launchable ones on the deck's keys. Red keys are ready to launch,
    green keys are running. Pressing a key launches (or modifies) its
    event.

    \b
    Examples:
      # Run with saved settings
      triggerdeck

      # Run against a server and document
      triggerdeck --server-url http://localhost:3000 --document-id 5b0e...

      # Show what would be on the keys
      triggerdeck -d 5b0e... events

      # List connected Stream Decks
      triggerdeck devices
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_file
    ctx.obj["overrides"] = {
        "server_url": server_url,
        "document_id": document_id,
        "poll_interval": poll_interval,
        "brightness": brightness,
        "push_enabled": False if no_push else None,
    }
    ctx.obj["log_path"] = setup_logging(verbose, debug, log_file, log_level)

    # No subcommand: run the launcher
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


cli.add_command(run)
cli.add_command(events)
cli.add_command(devices)
cli.add_command(config)

if __name__ == "__main__":
    cli()
