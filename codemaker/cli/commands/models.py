"""Model listing command for the CodeMaker CLI."""

import click
from rich.table import Table

from ..config import get_config, get_service
from ..help_formatter import rich_help_option
from ..utils import console, echo_info, run


@click.command()
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
@rich_help_option("-h", "--help")
def models(output_format):
    """List the generation models available to your API key.

    Select one with: codemaker config set model <id>
    """
    service = get_service()
    available = run(service.list_models())

    if output_format == "json":
        console.print_json(data=[m.model_dump() for m in available])
        return

    if not available:
        echo_info("No models available")
        return

    selected = get_config().model
    table = Table(title="Models")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Selected", justify="center")
    for model in available:
        table.add_row(model.id, model.name or "-", "✓" if model.id == selected else "")
    console.print(table)
