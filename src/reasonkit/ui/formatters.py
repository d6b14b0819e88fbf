"""Output formatting utilities for reasonkit.

This module provides functions for rendering signatures, ReAct trajectories
and predictions as rich renderables for display in the terminal.
"""

from collections.abc import Mapping
from typing import Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reasonkit.prediction import Prediction
from reasonkit.react.trajectory import Trajectory, render_args
from reasonkit.signature import Signature


def truncate_text(
    text: str,
    max_length: int = 500,
    suffix: str = "... (truncated)",
) -> str:
    """Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add when truncated

    Returns:
        str: Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def format_signature_table(signature: Signature) -> Table:
    """Format a signature's fields as a table.

    Inputs are listed before outputs, each in declaration order.

    Args:
        signature: Signature to display

    Returns:
        Table: Rich Table with one row per field
    """
    table = Table(title=f"Signature: {signature.name}  ({signature})", show_header=True)
    table.add_column("Role", style="magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Required")
    table.add_column("Description")

    for role, fields in (("input", signature.input_fields), ("output", signature.output_fields)):
        for field in fields:
            description = field.description
            if field.one_of:
                description += f" (one of: {', '.join(map(str, field.one_of))})"
            table.add_row(
                role,
                field.name,
                field.type.value,
                "yes" if field.required else "no",
                Text(description),
            )

    if signature.instructions:
        table.caption = escape(truncate_text(signature.instructions, max_length=200))

    return table


def format_trajectory_table(
    trajectory: Trajectory,
    max_observation_length: int = 200,
) -> Table:
    """Format a ReAct trajectory as a table, one row per step.

    Steps whose observation is an error are styled red.

    Args:
        trajectory: Trajectory to display
        max_observation_length: Truncate observations beyond this length

    Returns:
        Table: Rich Table of steps
    """
    table = Table(title=f"Trajectory ({len(trajectory)} steps)", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Thought")
    table.add_column("Tool", style="cyan")
    table.add_column("Args")
    table.add_column("Observation")

    for record in trajectory:
        table.add_row(
            str(record.index + 1),
            Text(truncate_text(record.thought, max_length=max_observation_length)),
            Text(record.tool_name),
            Text(truncate_text(render_args(record.args), max_length=max_observation_length)),
            Text(truncate_text(record.observation, max_length=max_observation_length)),
            style="red" if record.is_error else None,
        )

    return table


def format_prediction_panel(
    prediction: Prediction | Mapping[str, Any],
    title: str = "Prediction",
    hide: tuple[str, ...] = ("trajectory",),
) -> Panel:
    """Format a prediction's fields in a panel.

    Args:
        prediction: Prediction (or any mapping) to display
        title: Panel title
        hide: Field names to leave out (the raw trajectory by default)

    Returns:
        Panel: Rich Panel with one "name: value" line per field
    """
    lines = [
        f"[cyan]{name}[/cyan]: {escape(truncate_text(str(value)))}"
        for name, value in prediction.items()
        if name not in hide
    ]
    return Panel(
        "\n".join(lines) or "[dim](no fields)[/dim]",
        title=title,
        border_style="green",
        padding=(0, 1),
    )


def format_config_table(config: Mapping[str, Any]) -> Table:
    """Format settings as a two-column table."""
    table = Table(title="reasonkit Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="blue")

    for key, value in config.items():
        table.add_row(key, str(value))

    return table
