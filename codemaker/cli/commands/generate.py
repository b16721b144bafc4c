"""Code generation commands for the CodeMaker CLI."""

from pathlib import Path

import click

from codemaker.models.api.common import LanguageCode, Modify, Visibility

from ..help_formatter import rich_help_option
from ..utils import run_job

path_argument = click.argument(
    "path", type=click.Path(exists=True, path_type=Path)
)

modify_option = click.option(
    "--modify",
    type=click.Choice([m.value for m in Modify]),
    default=Modify.NONE.value,
    help="How existing code at the code path is altered",
)

code_path_option = click.option(
    "--code-path",
    help="Limit generation to one element, e.g. 'MyClass.my_method' or '@120'",
)


@click.group()
@rich_help_option("-h", "--help")
def generate():
    """Generate, edit and fix code in files or whole source trees.

    Every supported file under PATH is sent to CodeMaker and replaced
    with the result. A failure in one file does not stop the others;
    press Ctrl-C to cancel the remaining files.

    Examples:
        codemaker generate code src/                     # Implement missing code
        codemaker generate inline src/app.py             # Inline code generation
        codemaker generate edit src/app.py -p "Use pathlib"
        codemaker generate docs src/ --language de       # German documentation
        codemaker generate fix src/app.py                # Fix syntax errors
        codemaker generate graph src/app.py              # Dependencies first
    """
    pass


@generate.command()
@path_argument
@modify_option
@code_path_option
@rich_help_option("-h", "--help")
def code(path, modify, code_path):
    """Generate missing code.

    Args:
        path: File or directory to process
    """
    run_job(lambda service: service.generate_code(path, Modify(modify), code_path))


@generate.command()
@path_argument
@modify_option
@code_path_option
@rich_help_option("-h", "--help")
def inline(path, modify, code_path):
    """Generate inline code inside existing function bodies."""
    run_job(
        lambda service: service.generate_inline_code(path, Modify(modify), code_path)
    )


@generate.command()
@path_argument
@click.option("--prompt", "-p", required=True, help="Edit instruction")
@modify_option
@code_path_option
@rich_help_option("-h", "--help")
def edit(path, prompt, modify, code_path):
    """Edit code following a free-text instruction.

    Args:
        path: File or directory to process
        prompt: What to change
    """
    run_job(
        lambda service: service.edit_code(path, Modify(modify), code_path, prompt)
    )


@generate.command()
@path_argument
@modify_option
@code_path_option
@click.option(
    "--language",
    "text_language",
    type=click.Choice([c.value for c in LanguageCode]),
    help="Language of the generated documentation",
)
@click.option("--indent", "override_indent", type=int, help="Override indentation")
@click.option(
    "--min-lines",
    "minimal_lines_length",
    type=int,
    help="Only document elements with at least this many lines",
)
@click.option(
    "--visibility",
    type=click.Choice([v.value for v in Visibility]),
    help="Document all elements or only public ones",
)
@rich_help_option("-h", "--help")
def docs(path, modify, code_path, text_language, override_indent, minimal_lines_length, visibility):
    """Generate documentation comments."""
    run_job(
        lambda service: service.generate_documentation(
            path,
            Modify(modify),
            code_path,
            text_language=LanguageCode(text_language) if text_language else None,
            override_indent=override_indent,
            minimal_lines_length=minimal_lines_length,
            visibility=Visibility(visibility) if visibility else None,
        )
    )


@generate.command()
@path_argument
@modify_option
@code_path_option
@rich_help_option("-h", "--help")
def fix(path, modify, code_path):
    """Fix syntax errors."""
    run_job(lambda service: service.fix_syntax(path, Modify(modify), code_path))


@generate.command()
@path_argument
@rich_help_option("-h", "--help")
def graph(path):
    """Generate code for files and, first, for the files they depend on.

    Dependencies discovered by CodeMaker are regenerated in code mode
    before the file that uses them, up to 16 levels deep. Each file is
    regenerated at most once per run.
    """
    run_job(lambda service: service.generate_source_graph_code(path))


@click.command()
@path_argument
@rich_help_option("-h", "--help")
def predict(path):
    """Run predictive generation for a file or source tree.

    Examples:
        codemaker predict src/
    """
    run_job(lambda service: service.predict(path))
