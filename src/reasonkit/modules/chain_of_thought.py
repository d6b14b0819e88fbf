"""Chain of Thought reasoning module.

Extends direct prediction with step-by-step reasoning: a leading reasoning
output field is added to the signature and a fixed directive is appended to
the instructions, encouraging the model to show its work before producing
the final answer. Both augmentations happen once, at construction.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from reasonkit.adapters.base import Adapter, AdapterCallback
from reasonkit.modules.base import Module
from reasonkit.modules.predict import (
    Predict,
    resolve_parameter_updates,
    signature_parameters,
)
from reasonkit.parameter import Parameter
from reasonkit.prediction import Example, Prediction
from reasonkit.signature import FieldSpec, FieldType, Signature, SignatureSpec, ensure_signature

REASONING_DESCRIPTION = "Think step by step to solve this problem"

REASONING_DIRECTIVE = (
    "Think step by step and show your reasoning before providing the final answer.\n"
    "Break down the problem and explain your thought process clearly."
)


def add_reasoning_field(signature: Signature, field_name: str = "reasoning") -> Signature:
    """Return ``signature`` with a leading required reasoning output field.

    Applying this twice yields the same field set: an existing field with the
    same name is moved to the front rather than duplicated.
    """
    reasoning = FieldSpec(
        name=field_name,
        type=FieldType.STRING,
        description=REASONING_DESCRIPTION,
        required=True,
        default=None,
    )
    remaining = tuple(f for f in signature.output_fields if f.name != field_name)
    return signature.model_copy(update={"output_fields": remaining}).prepend_output_field(
        reasoning
    )


def add_reasoning_instructions(signature: Signature) -> Signature:
    """Return ``signature`` with the step-by-step directive appended to its instructions."""
    segments = [signature.instructions or "", REASONING_DIRECTIVE]
    combined = "\n\n".join(s for s in segments if s)
    return signature.with_instructions(combined)


class ChainOfThought(Module):
    """Prediction that asks the model to reason before answering.

    The returned prediction carries the reasoning field (``reasoning`` by
    default) in addition to the signature's own outputs.
    """

    supports_parameters = True

    def __init__(
        self,
        signature: Signature | str | type[SignatureSpec],
        *,
        examples: Sequence[Example] = (),
        max_retries: int | None = None,
        max_output_retries: int | None = None,
        reasoning_field: str = "reasoning",
        adapter: Adapter | None = None,
        callbacks: Sequence[AdapterCallback] = (),
    ):
        """Initialize the module.

        Args:
            signature: Signature, arrow string, or SignatureSpec subclass
            examples: Few-shot examples
            max_retries: Request-level retry budget (settings default if None)
            max_output_retries: Output-validation retry budget (settings default if None)
            reasoning_field: Name of the injected reasoning output field
            adapter: Adapter override (configured default if None)
            callbacks: Adapter lifecycle callbacks for this module
        """
        self.reasoning_field = reasoning_field
        # Augmented fields, instructions as given; the directive only lives on
        # the predictor's call signature.
        self.signature = add_reasoning_field(ensure_signature(signature), reasoning_field)
        self.predictor = Predict(
            add_reasoning_instructions(self.signature),
            examples=examples,
            max_retries=max_retries,
            max_output_retries=max_output_retries,
            adapter=adapter,
            callbacks=callbacks,
        )

    @property
    def examples(self) -> tuple[Example, ...]:
        return self.predictor.examples

    @property
    def adapter(self) -> Adapter | None:
        return self.predictor.adapter

    @property
    def call_signature(self) -> Signature:
        """Signature actually sent to the adapter (fields and directive applied)."""
        return self.predictor.signature

    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        return await self.predictor.forward(inputs)

    def parameters(self) -> list[Parameter]:
        return signature_parameters(self.signature, self.examples)

    def update_parameters(self, parameters: Sequence[Parameter]) -> "ChainOfThought":
        examples, instructions = resolve_parameter_updates(
            parameters, self.examples, self.signature.instructions
        )
        return ChainOfThought(
            self.signature.with_instructions(instructions),
            examples=examples,
            max_retries=self.predictor.max_retries,
            max_output_retries=self.predictor.max_output_retries,
            reasoning_field=self.reasoning_field,
            adapter=self.predictor.adapter,
            callbacks=self.predictor.callbacks,
        )

    def __repr__(self) -> str:
        return (
            f"<ChainOfThought signature='{self.signature}' "
            f"reasoning_field='{self.reasoning_field}'>"
        )
