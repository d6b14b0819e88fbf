"""Optimizable parameters exposed by reasoning modules.

A parameter is the unit of introspection and mutation used by optimization
and persistence workflows: a named, typed value plus the history of values
it has held.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ParameterKind(str, Enum):
    """What a parameter controls."""

    PROMPT = "prompt"
    EXAMPLES = "examples"
    WEIGHTS = "weights"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


class Parameter(BaseModel):
    """Immutable named value with update history (most recent first)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Dotted parameter name, e.g. 'predict.examples'")
    kind: ParameterKind = Field(..., description="Parameter kind")
    value: Any = Field(default=None, description="Current value")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")
    history: tuple[Any, ...] = Field(default=(), description="Values held, newest first")

    @model_validator(mode="before")
    @classmethod
    def seed_history(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("history"):
            data = {**data, "history": (data.get("value"),)}
        return data

    def update(self, value: Any) -> "Parameter":
        """Return a copy holding ``value``, with the new value pushed onto history."""
        return self.model_copy(update={"value": value, "history": (value, *self.history)})

    def revert(self) -> "Parameter":
        """Return a copy holding the previous value, or ``self`` if there is none."""
        if len(self.history) < 2:
            return self
        previous, *rest = self.history[1:]
        return self.model_copy(update={"value": previous, "history": (previous, *rest)})

    def renamed(self, name: str) -> "Parameter":
        return self.model_copy(update={"name": name})
