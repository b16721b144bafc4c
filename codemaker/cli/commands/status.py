"""Service status command for the CodeMaker CLI."""

import sys

import click

from ..config import get_config, get_service
from ..help_formatter import rich_help_option
from ..utils import echo_error, echo_info, echo_success, echo_warning, run


@click.command()
@rich_help_option("-h", "--help")
def status():
    """Check the configured endpoint and API key.

    Exits with status 1 when the CodeMaker API cannot be reached.

    Examples:
        codemaker status
        CODEMAKER_ENDPOINT=http://localhost:8080 codemaker status
    """
    config = get_config()
    echo_info(f"Endpoint: {config.endpoint}")

    if config.api_key:
        echo_success("API key configured")
    else:
        echo_warning("No API key configured")
        echo_info("Run: codemaker config set api_key <key>")

    service = get_service()
    if run(service.health_check()):
        echo_success("CodeMaker API is healthy")
    else:
        echo_error("CodeMaker API is not reachable")
        sys.exit(1)
