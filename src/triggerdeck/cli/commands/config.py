"""Config command group."""

import click

from triggerdeck.cli.settings import config_path, load_config


@click.group(name="config")
def config():
    """Show and save triggerdeck settings."""
    pass


@config.command(name="show")
@click.pass_context
def show(ctx: click.Context):
    """Print the effective configuration (file plus command line options)."""
    click.echo(load_config(ctx).model_dump_json(indent=2))


@config.command(name="path")
@click.pass_context
def path(ctx: click.Context):
    """Print the config file location."""
    click.echo(str(config_path(ctx)))


@config.command(name="save")
@click.pass_context
def save(ctx: click.Context):
    """
    Write the effective configuration to the config file.

    \b
    Example:
      triggerdeck --server-url http://cues.local:3000 --document-id abc config save
    """
    target = config_path(ctx)
    load_config(ctx).save(target)
    click.echo(f"Saved configuration to {target}")
