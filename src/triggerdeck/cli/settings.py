"""Resolve the effective configuration for a CLI invocation."""

from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError

from triggerdeck.exceptions import wrap_pydantic_error
from triggerdeck.models import DEFAULT_CONFIG_PATH, AppConfig


def config_path(ctx: click.Context) -> Path:
    """Config file selected with ``--config`` (or the default)."""
    return ctx.find_root().obj.get("config_path") or DEFAULT_CONFIG_PATH


def load_config(ctx: click.Context) -> AppConfig:
    """
    Load the config file and apply command line overrides.

    Raises:
        ConfigFileInvalidError: If the file is not valid JSON
        ConfigValidationError: If the file or an override has an invalid value
    """
    path = config_path(ctx)
    config = AppConfig.load_or_default(path)

    overrides: dict[str, Any] = {
        key: value for key, value in ctx.find_root().obj.get("overrides", {}).items() if value is not None
    }
    if not overrides:
        return config

    try:
        return AppConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as e:
        raise wrap_pydantic_error(e, "command line") from e


def log_path(ctx: click.Context) -> Optional[Path]:
    """Log file chosen for this invocation."""
    return ctx.find_root().obj.get("log_path")
