"""Trajectory records produced by the ReAct loop.

The trajectory is kept as an ordered list of step records and rendered to
text only when it is handed to a model or returned to the caller. Each
rendered step looks like::

    (blank line)
    Step 1
    Thought: I should look this up.
    Tool: search
    Args: {"query": "capital of France"}
    Observation: Paris
"""

import json
import reprlib
from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from reasonkit.config import get_settings
from reasonkit.tools.base import ToolResult

MAX_STEPS_REACHED = "max steps reached"

_ARGS_MAX_ITEMS = 50


class ObservationKind(str, Enum):
    """Whether a step's observation came from a successful tool call."""

    OK = "ok"
    ERROR = "error"

    @property
    def label(self) -> str:
        return "Observation" if self is ObservationKind.OK else "Observation (error)"

    def __str__(self) -> str:
        return self.value


def _inspect(value: Any, max_items: int, max_chars: int) -> str:
    inspector = reprlib.Repr()
    inspector.maxlevel = 6
    inspector.maxlist = max_items
    inspector.maxtuple = max_items
    inspector.maxdict = max_items
    inspector.maxset = max_items
    inspector.maxfrozenset = max_items
    inspector.maxdeque = max_items
    inspector.maxarray = max_items
    inspector.maxstring = max_chars
    inspector.maxlong = max_chars
    inspector.maxother = max_chars

    text = inspector.repr(value)
    if len(text) > max_chars:
        text = text[: max_chars - 3] + "..."
    return text


def render_observation(value: Any) -> str:
    """Render a tool result or error as text.

    Strings pass through unchanged; anything else is rendered with a bounded
    inspection so a runaway tool cannot blow up the trajectory.
    """
    if isinstance(value, str):
        return value
    settings = get_settings()
    return _inspect(value, settings.observation_max_items, settings.observation_max_chars)


def render_args(args: Any) -> str:
    """Render tool arguments as JSON, falling back to a bounded inspection."""
    try:
        return json.dumps(args, ensure_ascii=False)
    except (TypeError, ValueError):
        return _inspect(args, _ARGS_MAX_ITEMS, get_settings().observation_max_chars)


class StepRecord(BaseModel):
    """One thought/tool/observation step of the loop."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., description="Zero-based step index", ge=0)
    thought: str = Field(default="", description="Model's reasoning for this step")
    tool_name: str = Field(..., description="Tool the model chose")
    args: Any = Field(default_factory=dict, description="Arguments passed to the tool")
    observation: str = Field(default="", description="Tool result or error, as text")
    kind: ObservationKind = Field(default=ObservationKind.OK, description="ok or error")

    @classmethod
    def from_tool_result(
        cls,
        index: int,
        thought: Any,
        tool_name: str,
        args: Any,
        result: ToolResult,
    ) -> "StepRecord":
        if result.success:
            kind, observation = ObservationKind.OK, render_observation(result.data)
        else:
            kind, observation = ObservationKind.ERROR, render_observation(result.error)

        return cls(
            index=index,
            thought="" if thought is None else str(thought),
            tool_name=str(tool_name),
            args=args,
            observation=observation,
            kind=kind,
        )

    @classmethod
    def max_steps_reached(cls, max_steps: int) -> "StepRecord":
        """Synthetic final record appended when the step budget runs out."""
        return cls(
            index=max_steps,
            thought="",
            tool_name="finish",
            args={},
            observation=MAX_STEPS_REACHED,
            kind=ObservationKind.ERROR,
        )

    @property
    def is_error(self) -> bool:
        return self.kind is ObservationKind.ERROR

    def render(self) -> str:
        return (
            f"\nStep {self.index + 1}\n"
            f"Thought: {self.thought.strip()}\n"
            f"Tool: {self.tool_name}\n"
            f"Args: {render_args(self.args)}\n"
            f"{self.kind.label}: {self.observation.strip()}\n"
        )


class Trajectory:
    """Append-only ordered sequence of step records for one loop invocation."""

    def __init__(self) -> None:
        self._records: list[StepRecord] = []

    def append(self, record: StepRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> tuple[StepRecord, ...]:
        return tuple(self._records)

    def render(self) -> str:
        """Full trajectory text ("" when no step has run)."""
        return "".join(record.render() for record in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> StepRecord:
        return self._records[index]

    def __repr__(self) -> str:
        return f"<Trajectory: {len(self._records)} steps>"
