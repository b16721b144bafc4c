"""Assistant commands for the CodeMaker CLI."""

import base64
from pathlib import Path

import click
from rich.markdown import Markdown
from rich.table import Table

from codemaker.models.api.common import Vote

from ..config import get_service
from ..help_formatter import rich_help_option
from ..utils import console, echo_success, run


@click.group()
@rich_help_option("-h", "--help")
def assistant():
    """Chat with the CodeMaker assistant.

    Examples:
        codemaker assistant ask "How do I read a file in Go?"
        codemaker assistant code "Add input validation" src/app.py
        codemaker assistant speech "Hello" --output hello.mp3
        codemaker assistant feedback <session-id> <message-id> up
    """
    pass


def _print_session(session_id: str | None, message_id: str | None) -> None:
    if not session_id and not message_id:
        return
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column(style="dim")
    if session_id:
        table.add_row("Session", session_id)
    if message_id:
        table.add_row("Message", message_id)
    console.print(table)


@assistant.command()
@click.argument("message")
@rich_help_option("-h", "--help")
def ask(message):
    """Ask the assistant a question.

    Args:
        message: Question or instruction
    """
    service = get_service()
    response = run(service.assistant_completion(message))

    console.print(Markdown(response.message))
    _print_session(response.session_id, response.message_id)


@assistant.command()
@click.argument("message")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@rich_help_option("-h", "--help")
def code(message, file):
    """Ask the assistant about a file.

    When the assistant returns new source code, FILE is replaced with it.

    Args:
        message: Question or instruction
        file: Source file the message is about
    """
    service = get_service()
    response = run(service.assistant_code_completion(message, file))

    if response.message:
        console.print(Markdown(response.message))
    if response.output.source:
        echo_success(f"Updated {file}")
    _print_session(response.session_id, response.message_id)


@assistant.command()
@click.argument("message")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("speech.mp3"),
    help="Audio file to write",
)
@click.option("--stream", is_flag=True, help="Stream audio chunks as they arrive")
@rich_help_option("-h", "--help")
def speech(message, output, stream):
    """Convert a message to speech.

    Args:
        message: Text to speak
    """
    service = get_service()

    async def collect() -> bytes:
        if not stream:
            response = await service.assistant_speech(message)
            return base64.b64decode(response.audio)

        audio = bytearray()
        async for chunk in service.assistant_speech_stream(message):
            audio.extend(base64.b64decode(chunk.audio))
        return bytes(audio)

    audio = run(collect())
    output.write_bytes(audio)
    echo_success(f"Wrote {len(audio)} bytes of audio to {output}")


@assistant.command()
@click.argument("session_id")
@click.argument("message_id")
@click.argument("vote", type=click.Choice([v.value for v in Vote]))
@rich_help_option("-h", "--help")
def feedback(session_id, message_id, vote):
    """Vote on an assistant message."""
    service = get_service()
    run(service.assistant_feedback(session_id, message_id, Vote(vote)))
    echo_success("Feedback registered")
