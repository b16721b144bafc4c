"""Main CLI entry point for CodeMaker."""

from pathlib import Path

import click
from rich.console import Console

from codemaker.core.logging import setup_logging
from codemaker.models.config import CLIConfig

from .config import get_config, set_config
from .help_formatter import rich_help_option
from .utils import echo_error

console = Console()


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version information")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to use instead of ~/.codemaker/config.yaml",
)
@rich_help_option("-h", "--help")
@click.pass_context
def cli(ctx, version, verbose, config_path):
    """CodeMaker - AI code generation from the command line.

    Generates, edits and documents source files and whole source trees
    with the CodeMaker service. Cross-file context is discovered and sent
    along with each file.

    Examples:
        codemaker config set api_key <key>          # Configure the API key
        codemaker generate code src/                # Generate code in a tree
        codemaker generate docs src/app.py          # Document a file
        codemaker generate graph src/app.py         # Regenerate with dependencies
        codemaker complete src/app.py 120           # Complete at an offset
        codemaker assistant ask "What is a monad?"  # Chat with the assistant
    """
    if version:
        from codemaker import __version__

        console.print(f"CodeMaker CLI v{__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()

    ctx.ensure_object(dict)

    config = (
        CLIConfig.load_from_file(config_path) if config_path else get_config()
    )
    if verbose:
        config = config.model_copy(update={"verbose": True, "log_level": "DEBUG"})

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    set_config(config)

    if not config.color:
        console.no_color = True

    setup_logging(
        config.log_level,
        log_file=config.log_file,
        color=None if config.color else False,
    )


def register_commands():
    """Register all command groups."""
    try:
        from .commands.generate import generate, predict

        cli.add_command(generate)
        cli.add_command(predict)
    except ImportError as e:
        echo_error(f"Failed to load generate commands: {e}")

    try:
        from .commands.complete import complete

        cli.add_command(complete)
    except ImportError as e:
        echo_error(f"Failed to load complete command: {e}")

    try:
        from .commands.assistant import assistant

        cli.add_command(assistant)
    except ImportError as e:
        echo_error(f"Failed to load assistant commands: {e}")

    try:
        from .commands.models import models

        cli.add_command(models)
    except ImportError as e:
        echo_error(f"Failed to load models command: {e}")

    try:
        from .commands.status import status

        cli.add_command(status)
    except ImportError as e:
        echo_error(f"Failed to load status command: {e}")

    try:
        from .commands.config import config

        cli.add_command(config)
    except ImportError as e:
        echo_error(f"Failed to load config commands: {e}")


# Register commands when module is imported
register_commands()


if __name__ == "__main__":
    cli()
