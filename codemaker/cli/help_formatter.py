"""Rich-enabled help output for Click commands."""

import click
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class RichHelpFormatter:
    """Renders a command's help page as a Rich panel."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def format_help(self, ctx: click.Context) -> None:
        command = ctx.command
        parts = [Text.from_markup(f"[bold yellow]Usage:[/bold yellow] {self._usage(ctx)}")]

        if command.help:
            parts.append(Text(""))
            for block in command.help.split("\n\n"):
                parts.append(self._help_block(block))

        options = self._options_table(ctx)
        if options is not None:
            parts.append(Text(""))
            parts.append(Text.from_markup("[bold yellow]Options:[/bold yellow]"))
            parts.append(options)

        if isinstance(command, click.Group) and command.commands:
            parts.append(Text(""))
            parts.append(Text.from_markup("[bold yellow]Commands:[/bold yellow]"))
            parts.append(self._commands_table(command))

        self.console.print(
            Panel(
                Group(*parts),
                title=f"[bold blue]{ctx.command_path}[/bold blue]",
                border_style="blue",
                padding=(1, 2),
            )
        )

    def _usage(self, ctx: click.Context) -> str:
        pieces = [f"[bold green]{ctx.command_path}[/bold green]", "[dim]\\[OPTIONS][/dim]"]
        for param in ctx.command.params:
            if isinstance(param, click.Argument):
                name = param.name.upper()
                pieces.append(f"[yellow]{name}[/yellow]" if param.required else f"[dim]\\[{name}][/dim]")
        if isinstance(ctx.command, click.Group):
            pieces.append("[cyan]COMMAND[/cyan]")
        return " ".join(pieces)

    def _help_block(self, block: str) -> Text:
        lines = []
        for line in block.splitlines():
            stripped = line.strip()
            if stripped.startswith("codemaker "):
                lines.append(f"    [dim green]{escape(stripped)}[/dim green]")
            elif stripped.endswith(":") and not line.startswith(" "):
                lines.append(f"[bold yellow]{escape(stripped)}[/bold yellow]")
            else:
                lines.append(f"  {escape(stripped)}")
        return Text.from_markup("\n".join(lines))

    def _options_table(self, ctx: click.Context) -> Table | None:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", no_wrap=True)
        table.add_column()

        rows = 0
        for param in ctx.command.params:
            if not isinstance(param, click.Option) or param.hidden:
                continue
            names = ", ".join(param.opts + param.secondary_opts)
            if not param.is_flag:
                choices = getattr(param.type, "choices", None)
                names += f" [{'|'.join(choices)}]" if choices else f" {param.type.name.upper()}"
            help_text = param.help or ""
            if param.default not in (None, "", ()) and not param.is_flag:
                default = getattr(param.default, "value", param.default)
                help_text += f" (default: {default})"
            table.add_row(Text(names), Text(help_text))
            rows += 1

        return table if rows else None

    def _commands_table(self, group: click.Group) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="green", no_wrap=True)
        table.add_column()
        for name, command in sorted(group.commands.items()):
            table.add_row(Text(name), Text(command.get_short_help_str(limit=70)))
        return table


def rich_help_option(*param_decls, **kwargs):
    """Help option that prints the Rich formatted help page."""

    def decorator(f):
        def callback(ctx, param, value):
            if not value or ctx.resilient_parsing:
                return

            RichHelpFormatter().format_help(ctx)
            ctx.exit()

        kwargs.setdefault("is_flag", True)
        kwargs.setdefault("expose_value", False)
        kwargs.setdefault("is_eager", True)
        kwargs.setdefault("help", "Show this message and exit.")
        kwargs["callback"] = callback

        return click.option(*param_decls, **kwargs)(f)

    return decorator
