"""Code completion command for the CodeMaker CLI."""

from pathlib import Path

import click

from ..config import get_service
from ..help_formatter import rich_help_option
from ..utils import console, echo_info, run


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("offset", type=click.IntRange(min=0))
@click.option("--multiline", is_flag=True, help="Allow multi-line completions")
@rich_help_option("-h", "--help")
def complete(file, offset, multiline):
    """Complete code at a character offset of a file.

    The suggestion is printed; the file is not modified.

    Examples:
        codemaker complete src/app.py 120
        codemaker complete src/app.py 120 --multiline
    """
    service = get_service()
    suggestion = run(service.completion(file, offset, multiline))

    if suggestion:
        console.print(suggestion, markup=False, highlight=False)
    else:
        echo_info("No completion")
