"""Adapter interface consumed by the prediction modules.

An adapter renders a signature plus few-shot examples into a model request,
calls the model, and parses the response back into typed output fields. It
owns both retry budgets. reasonkit only consumes adapters through
:meth:`Adapter.run`; concrete adapters live outside this package.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from reasonkit.errors import ReasonkitError
from reasonkit.prediction import Example
from reasonkit.signature import Signature


class AdapterError(ReasonkitError):
    """Base exception for failures raised by adapters."""

    pass


class AdapterNotConfiguredError(AdapterError):
    """Exception raised when no adapter is passed and none is configured."""

    def __init__(self) -> None:
        super().__init__(
            "No adapter configured. Pass adapter=... to the module or call "
            "reasonkit.adapters.configure(adapter=...)"
        )


class CallMeta(BaseModel):
    """Identifies one adapter call for lifecycle callbacks."""

    model_config = ConfigDict(frozen=True)

    call_id: str = Field(..., description="Unique id of this adapter call")
    adapter: str = Field(..., description="Adapter class name")
    signature_name: str = Field(..., description="Name of the signature being run")


class AdapterCallback:
    """Lifecycle hooks around adapter calls.

    Subclasses override the hooks they care about. Callbacks are for
    observability; an exception raised by a callback is logged and never
    breaks the prediction call.
    """

    def on_adapter_start(self, meta: CallMeta, payload: dict[str, Any]) -> None:
        """Called before the adapter runs."""

    def on_adapter_end(self, meta: CallMeta, payload: dict[str, Any]) -> None:
        """Called after the adapter returns or raises.

        ``payload`` carries ``outputs`` on success or ``error`` on failure.
        """


class Adapter(ABC):
    """Signature adapter: formatting, transport, parsing, and retries."""

    @abstractmethod
    async def run(
        self,
        signature: Signature,
        inputs: Mapping[str, Any],
        examples: Sequence[Example],
        *,
        callbacks: Sequence[AdapterCallback] = (),
        max_retries: int = 3,
        max_output_retries: int = 0,
    ) -> dict[str, Any]:
        """Produce output fields for ``signature`` given ``inputs``.

        Args:
            signature: Signature to satisfy (instructions already final)
            inputs: Input field values
            examples: Few-shot examples
            callbacks: Lifecycle callbacks for finer-grained events
            max_retries: Request-level retry budget
            max_output_retries: Output-validation retry budget

        Returns:
            dict: Output field name to value

        Raises:
            AdapterError: If the model call or output parsing fails after retries
        """

    @property
    def name(self) -> str:
        return type(self).__name__
