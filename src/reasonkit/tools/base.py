"""Base infrastructure for tools.

This module provides the foundational classes for building tools that the
ReAct loop can call: result handling, parameter validation, timeouts, and a
wrapper that turns plain functions into tools.
"""

import asyncio
import inspect
import json
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

# Type variable for tool parameters
TParams = TypeVar("TParams", bound=BaseModel)


class ToolResult(BaseModel):
    """Result from tool execution.

    Contains the execution result, success status, error information,
    and metadata about the execution.
    """

    success: bool = Field(..., description="Whether the tool executed successfully")
    data: Any = Field(default=None, description="The actual result data")
    error: Any = Field(default=None, description="Error message or value if failed")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Execution metadata (time, etc.)",
    )

    @classmethod
    def success_result(cls, data: Any, **metadata: Any) -> "ToolResult":
        """Create a successful result.

        Args:
            data: The result data
            **metadata: Additional metadata

        Returns:
            ToolResult: Successful tool result
        """
        return cls(success=True, data=data, error=None, metadata=metadata)

    @classmethod
    def error_result(cls, error: Any, **metadata: Any) -> "ToolResult":
        """Create an error result.

        Args:
            error: Error message (or any value describing the failure)
            **metadata: Additional metadata

        Returns:
            ToolResult: Error tool result
        """
        return cls(success=False, data=None, error=error, metadata=metadata)

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.data}"
        else:
            return f"Error: {self.error}"


class BaseTool(ABC, Generic[TParams]):
    """Abstract base class for all tools.

    Subclasses must implement:
    - execute() - The actual tool logic

    Subclasses set ``name`` and ``description``. ``parameters_schema`` is
    optional; without it, execute() receives the raw argument dict.
    """

    name: str
    description: str
    parameters_schema: type[BaseModel] | None = None
    timeout: float | None = None

    def __init__(self):
        """Initialize the tool.

        Validates that required class attributes are set.
        """
        for attr in ("name", "description"):
            if not getattr(self, attr, None):
                raise ValueError(
                    f"Tool must define '{attr}' class attribute. "
                    f"Subclass {self.__class__.__name__} is missing it."
                )

        if self.parameters_schema is not None and not (
            isinstance(self.parameters_schema, type)
            and issubclass(self.parameters_schema, BaseModel)
        ):
            raise ValueError(
                f"parameters_schema must be a Pydantic BaseModel subclass, "
                f"got {type(self.parameters_schema)}"
            )

    @abstractmethod
    async def execute(self, params: Any) -> ToolResult:
        """Execute the tool with validated parameters.

        Args:
            params: Validated parameters (a parameters_schema instance, or the
                raw argument dict when the tool declares no schema)

        Returns:
            ToolResult: Result of the execution
        """
        pass

    def validate_params(self, raw_params: Mapping[str, Any]) -> Any:
        """Parse and validate raw parameters.

        Raises:
            ValidationError: If parameters are invalid
        """
        if self.parameters_schema is None:
            return dict(raw_params)
        return self.parameters_schema(**raw_params)

    def args_schema(self) -> dict[str, Any] | None:
        """JSON Schema of the tool's parameters, without titles."""
        if self.parameters_schema is None:
            return None
        schema = self.parameters_schema.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return schema

    def describe(self) -> str:
        """One-line description used in prompts."""
        line = f"- {self.name}: {self.description}"
        schema = self.args_schema()
        if schema and schema.get("properties"):
            line += f" Args: {json.dumps(schema['properties'], sort_keys=True)}"
        return line

    async def run(
        self,
        raw_params: Any,
        timeout: float | None = None,
    ) -> ToolResult:
        """Run the tool with parameter validation and error handling.

        This is the main entry point for tool execution. It handles:
        - Parameter validation
        - Execution timing and timeout
        - Error catching
        - Result wrapping

        Args:
            raw_params: Raw arguments (expected to be a mapping)
            timeout: Seconds before giving up (tool default if None)

        Returns:
            ToolResult: Execution result
        """
        start_time = time.perf_counter()
        limit = timeout if timeout is not None else self.timeout

        if not isinstance(raw_params, Mapping):
            return ToolResult.error_result(
                error=(
                    f"Tool arguments must be a JSON object, "
                    f"got {type(raw_params).__name__}"
                ),
                execution_time=time.perf_counter() - start_time,
            )

        try:
            validated_params = self.validate_params(raw_params)

            if limit is not None:
                result = await asyncio.wait_for(self.execute(validated_params), limit)
            else:
                result = await self.execute(validated_params)

            # Timing goes on a copy; the tool's own result object is never mutated.
            return result.model_copy(
                update={
                    "metadata": {
                        **result.metadata,
                        "execution_time": time.perf_counter() - start_time,
                    }
                }
            )

        except ValidationError as e:
            return ToolResult.error_result(
                error=f"Parameter validation failed: {e}",
                execution_time=time.perf_counter() - start_time,
            )

        except TimeoutError:
            return ToolResult.error_result(
                error=f"Tool execution timed out after {limit}s",
                execution_time=time.perf_counter() - start_time,
            )

        except Exception as e:
            return ToolResult.error_result(
                error=f"Tool execution failed: {type(e).__name__}: {e}",
                execution_time=time.perf_counter() - start_time,
            )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name='{self.name}'>"


class FunctionTool(BaseTool):
    """Tool backed by a plain function.

    Arguments are passed as keyword arguments. Sync functions run in a worker
    thread. A returned ToolResult passes through unchanged; any other return
    value becomes a success result.
    """

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable[..., Any],
        parameters_schema: type[BaseModel] | None = None,
        timeout: float | None = None,
    ):
        self.name = name
        self.description = description
        self.func = func
        self.parameters_schema = parameters_schema
        self.timeout = timeout
        super().__init__()

    async def execute(self, params: Any) -> ToolResult:
        kwargs = params.model_dump() if isinstance(params, BaseModel) else dict(params)

        if inspect.iscoroutinefunction(self.func):
            value = await self.func(**kwargs)
        else:
            value = await asyncio.to_thread(self.func, **kwargs)

        if isinstance(value, ToolResult):
            return value
        return ToolResult.success_result(data=value)


def tool(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
    parameters_schema: type[BaseModel] | None = None,
    timeout: float | None = None,
) -> Any:
    """Decorator turning a function into a :class:`FunctionTool`.

    Example:
        >>> @tool
        ... def search(query: str) -> str:
        ...     '''Search the knowledge base.'''
        ...     return lookup(query)
    """

    def wrap(f: Callable[..., Any]) -> FunctionTool:
        return FunctionTool(
            name=name or f.__name__,
            description=description or inspect.getdoc(f) or f"Call the {f.__name__} function",
            func=f,
            parameters_schema=parameters_schema,
            timeout=timeout,
        )

    if func is not None:
        return wrap(func)
    return wrap
