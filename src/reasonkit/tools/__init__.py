"""Tool system for reasonkit.

This module provides the foundation for building tools and the dispatch
table the ReAct loop uses to call them.
"""

from reasonkit.tools.base import (
    BaseTool,
    FunctionTool,
    ToolResult,
    tool,
)
from reasonkit.tools.table import FINISH, ToolTable

__all__ = [
    # Base classes
    "BaseTool",
    "FunctionTool",
    "ToolResult",
    "tool",
    # Dispatch
    "FINISH",
    "ToolTable",
]
