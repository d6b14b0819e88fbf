"""Tool dispatch table used by the ReAct loop.

The table is built once from a list of tools and never changes afterwards.
Lookups are by name; ``finish`` is reserved for the loop's own termination
signal and can never name a tool.
"""

from collections.abc import Iterator, Sequence
from typing import Any

from reasonkit.errors import ToolConfigurationError
from reasonkit.logging import get_logger
from reasonkit.tools.base import BaseTool, ToolResult

logger = get_logger("reasonkit.tools.table")

FINISH = "finish"


class ToolTable:
    """Immutable name -> tool map with a single execute() entry point.

    Example:
        >>> table = ToolTable([search_tool, calculator_tool])
        >>> result = await table.execute("search", {"query": "python"})
    """

    def __init__(self, tools: Sequence[BaseTool] = ()):
        """Build the table.

        Args:
            tools: Tools to register

        Raises:
            ToolConfigurationError: If an entry is not a tool, has an empty
                name, reuses a name, or is named ``finish``
        """
        tools_by_name: dict[str, BaseTool] = {}

        for entry in tools:
            if not isinstance(entry, BaseTool):
                raise ToolConfigurationError(
                    f"Tools must be BaseTool instances; got {entry!r}"
                )

            name = entry.name
            if not isinstance(name, str) or not name.strip():
                raise ToolConfigurationError(f"Tool {entry!r} has an empty name")
            if name == FINISH:
                raise ToolConfigurationError(
                    f"'{FINISH}' is reserved and cannot be used as a tool name"
                )
            if name in tools_by_name:
                raise ToolConfigurationError(f"Duplicate tool name: '{name}'")

            tools_by_name[name] = entry

        self._tools = tools_by_name

    async def execute(self, name: str, args: Any) -> ToolResult:
        """Execute a tool by name.

        Unknown names produce an error result; known tools' results are
        returned unchanged.

        Args:
            name: Tool name
            args: Raw arguments for the tool

        Returns:
            ToolResult: Result of the execution
        """
        tool = self._tools.get(name) if isinstance(name, str) else None
        if tool is None:
            logger.debug("Unknown tool requested", tool_name=name, available=self.names())
            return ToolResult.error_result(error=f"unknown tool: {name}")

        return await tool.run(args)

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Tool names in sorted order."""
        return sorted(self._tools)

    def describe(self) -> str:
        """Prompt lines describing every tool, in sorted name order."""
        return "\n".join(self._tools[name].describe() for name in self.names())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools[name] for name in self.names())

    def __repr__(self) -> str:
        return f"<ToolTable: {len(self._tools)} tools ({', '.join(self.names())})>"
