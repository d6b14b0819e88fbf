"""Main entry point for the reasonkit CLI.

This module provides a small command-line interface, built with Click, for
inspecting signatures, the prompts the ReAct loop derives from them, and the
active configuration.
"""

from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from reasonkit import __version__
from reasonkit.config import get_settings
from reasonkit.errors import ReasonkitError
from reasonkit.logging import setup_logging, setup_logging_from_settings
from reasonkit.react import ReAct
from reasonkit.signature import Signature
from reasonkit.tools import FunctionTool, ToolResult
from reasonkit.ui.formatters import format_config_table, format_signature_table


def _get_console(no_color: bool = False) -> Console:
    return Console(no_color=no_color, highlight=False)


def _placeholder(**kwargs: Any) -> ToolResult:
    return ToolResult.error_result(error="tool is not executable from the CLI")


def _parse_tool_option(value: str) -> FunctionTool:
    name, sep, description = value.partition("=")
    name = name.strip()
    if not sep or not name or not description.strip():
        raise click.BadParameter(f"expected name=description, got {value!r}", param_hint="--tool")
    return FunctionTool(name=name, description=description.strip(), func=_placeholder)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug mode (very detailed logging)")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool, no_color: bool):
    """reasonkit - composable reasoning modules for language-model programs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["no_color"] = no_color

    if debug:
        setup_logging(level="DEBUG")
    elif verbose:
        setup_logging(level="INFO")
    else:
        setup_logging_from_settings()


@cli.command()
@click.argument("text")
@click.pass_context
def signature(ctx: click.Context, text: str):
    """Parse a signature such as 'question -> answer' and show its fields."""
    console = _get_console(ctx.obj["no_color"])
    try:
        sig = Signature.define(text)
    except ReasonkitError as e:
        raise click.ClickException(str(e)) from e

    console.print(format_signature_table(sig))


@cli.command(name="react-prompt")
@click.argument("text")
@click.option(
    "--tool",
    "tool_specs",
    multiple=True,
    help="Tool as name=description (repeatable)",
)
@click.option("--max-steps", type=int, default=None, help="Step budget (default from settings)")
@click.pass_context
def react_prompt(ctx: click.Context, text: str, tool_specs: tuple[str, ...], max_steps: int | None):
    """Show the step and extract signatures ReAct derives for a task."""
    console = _get_console(ctx.obj["no_color"])
    tools = [_parse_tool_option(spec) for spec in tool_specs]

    try:
        react = ReAct(text, tools, max_steps=max_steps)
    except (ReasonkitError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    console.print(format_signature_table(react.step_signature))
    console.print(
        Panel(Text(react.step_signature.instructions), title="Step instructions", border_style="blue")
    )
    console.print(format_signature_table(react.extractor.call_signature))
    console.print(f"[dim]max_steps={react.max_steps}[/dim]")


@cli.command()
@click.pass_context
def config(ctx: click.Context):
    """Show current configuration."""
    console = _get_console(ctx.obj["no_color"])
    settings = get_settings()

    console.print(format_config_table(settings.model_dump_safe()))

    if ctx.obj["verbose"]:
        console.print("\n[dim]Configuration loaded from:[/dim]")
        console.print("  - Environment variables (REASONKIT_*)")
        console.print("  - .env file (if present)")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"reasonkit {__version__}")


if __name__ == "__main__":
    cli()
