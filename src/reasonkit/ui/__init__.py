"""Terminal rendering for reasonkit.

This module provides the rich formatters used by the CLI to display
signatures, ReAct trajectories, predictions and settings.
"""

from reasonkit.ui.formatters import (
    format_config_table,
    format_prediction_panel,
    format_signature_table,
    format_trajectory_table,
    truncate_text,
)

__all__ = [
    "format_config_table",
    "format_prediction_panel",
    "format_signature_table",
    "format_trajectory_table",
    "truncate_text",
]
