"""Direct prediction module.

Predict validates inputs against its signature, hands the call to the
adapter pipeline with its stored examples and retry budgets, and wraps the
returned fields in a Prediction.
"""

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from reasonkit.adapters import pipeline
from reasonkit.adapters.base import Adapter, AdapterCallback
from reasonkit.config import get_settings
from reasonkit.modules.base import Module
from reasonkit.parameter import Parameter, ParameterKind
from reasonkit.prediction import Example, Prediction
from reasonkit.signature import Signature, SignatureSpec, ensure_signature

EXAMPLES_PARAMETER = "predict.examples"
INSTRUCTIONS_PARAMETER = "predict.instructions"


class Predict(Module):
    """Basic signature-driven prediction.

    Example:
        >>> qa = Predict("question -> answer", adapter=my_adapter)
        >>> pred = await qa.forward({"question": "What is 2+2?"})
        >>> pred.answer
    """

    supports_parameters = True

    def __init__(
        self,
        signature: Signature | str | type[SignatureSpec],
        *,
        examples: Sequence[Example] = (),
        max_retries: int | None = None,
        max_output_retries: int | None = None,
        adapter: Adapter | None = None,
        callbacks: Sequence[AdapterCallback] = (),
    ):
        """Initialize the module.

        Args:
            signature: Signature, arrow string, or SignatureSpec subclass
            examples: Few-shot examples
            max_retries: Request-level retry budget (settings default if None)
            max_output_retries: Output-validation retry budget (settings default if None)
            adapter: Adapter override (configured default if None)
            callbacks: Adapter lifecycle callbacks for this module
        """
        settings = get_settings()
        self.signature = ensure_signature(signature)
        self.examples: tuple[Example, ...] = tuple(examples)
        self.max_retries = settings.predict_max_retries if max_retries is None else max_retries
        self.max_output_retries = (
            settings.predict_max_output_retries
            if max_output_retries is None
            else max_output_retries
        )
        self.adapter = adapter
        self.callbacks: tuple[AdapterCallback, ...] = tuple(callbacks)

    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        self.signature.validate_inputs(inputs)

        outputs = await pipeline.run(
            self.signature,
            dict(inputs),
            self.examples,
            adapter=self.adapter,
            callbacks=self.callbacks,
            max_retries=self.max_retries,
            max_output_retries=self.max_output_retries,
        )
        return Prediction(outputs)

    def parameters(self) -> list[Parameter]:
        return signature_parameters(self.signature, self.examples)

    def update_parameters(self, parameters: Sequence[Parameter]) -> "Predict":
        examples, instructions = resolve_parameter_updates(
            parameters, self.examples, self.signature.instructions
        )
        updated = copy.copy(self)
        updated.examples = examples
        updated.signature = self.signature.with_instructions(instructions)
        return updated

    def __repr__(self) -> str:
        return f"<Predict signature='{self.signature}' examples={len(self.examples)}>"


def signature_parameters(signature: Signature, examples: Sequence[Example]) -> list[Parameter]:
    """Parameters shared by the prediction modules: examples, then instructions if set."""
    params = [Parameter(name=EXAMPLES_PARAMETER, kind=ParameterKind.EXAMPLES, value=list(examples))]
    if signature.instructions is not None:
        params.append(
            Parameter(
                name=INSTRUCTIONS_PARAMETER,
                kind=ParameterKind.PROMPT,
                value=signature.instructions,
            )
        )
    return params


def resolve_parameter_updates(
    parameters: Sequence[Parameter],
    examples: tuple[Example, ...],
    instructions: str | None,
) -> tuple[tuple[Example, ...], str | None]:
    """Fold known parameters into (examples, instructions).

    Unknown names and values of the wrong shape are ignored.
    """
    for param in parameters:
        if param.name == EXAMPLES_PARAMETER and isinstance(param.value, (list, tuple)):
            examples = tuple(param.value)
        elif param.name == INSTRUCTIONS_PARAMETER and isinstance(param.value, str):
            instructions = param.value
    return examples, instructions
