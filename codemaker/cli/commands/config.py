"""Configuration commands for the CodeMaker CLI."""

from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.table import Table

from codemaker.models.config import CLIConfig, StoredCLIConfig

from ..help_formatter import rich_help_option
from ..utils import console, echo_error, echo_info, echo_success

SECRET_KEYS = {"api_key"}


def _config_file(ctx) -> Path:
    config_path = ctx.obj.get("config_path")
    if config_path:
        return config_path
    return ctx.obj["config"].config_dir / "config.yaml"


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}...{value[-4:]}"


@click.group()
@rich_help_option("-h", "--help")
def config():
    """Show and change CLI configuration.

    Values are stored in ~/.codemaker/config.yaml. Environment variables
    with the CODEMAKER_ prefix (e.g. CODEMAKER_API_KEY) take precedence.

    Examples:
        codemaker config show
        codemaker config set api_key <key>
        codemaker config set extended_source_context_enabled false
        codemaker config path
    """
    pass


@config.command()
@click.pass_context
@rich_help_option("-h", "--help")
def show(ctx):
    """Show the effective configuration."""
    current: CLIConfig = ctx.obj["config"]

    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in current.model_dump(mode="json").items():
        if value is None:
            display = "-"
        elif key in SECRET_KEYS:
            display = _mask(str(value))
        else:
            display = str(value)
        table.add_row(key, display)

    console.print(table)


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@rich_help_option("-h", "--help")
def set_value(ctx, key, value):
    """Set a configuration value.

    Use 'none' to clear an optional value.

    Args:
        key: Configuration key (see 'codemaker config show')
        value: New value
    """
    if key not in CLIConfig.model_fields:
        echo_error(f"Unknown configuration key: {key}")
        echo_info(f"Known keys: {', '.join(sorted(CLIConfig.model_fields))}")
        ctx.exit(1)

    config_file = _config_file(ctx)
    data = {}
    if config_file.exists():
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}

    data[key] = None if value.lower() in ("none", "null", "") else value

    try:
        validated = StoredCLIConfig(**{k: v for k, v in data.items() if v is not None})
    except ValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else key
        echo_error(f"Invalid value for {field}: {error['msg']}")
        ctx.exit(1)

    validated.save_to_file(config_file)

    stored = getattr(validated, key)
    shown = _mask(str(stored)) if key in SECRET_KEYS and stored else stored
    echo_success(f"{key} = {shown}")


@config.command()
@click.pass_context
@rich_help_option("-h", "--help")
def path(ctx):
    """Show the configuration file path."""
    console.print(str(_config_file(ctx)))
