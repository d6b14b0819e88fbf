"""Signature-driven ReAct (Reasoning + Acting) module.

The loop alternates model-proposed actions with tool execution:

1. A :class:`Predict` step predictor sees the task inputs plus the trajectory
   so far and proposes ``next_thought``, ``next_tool_name`` and
   ``next_tool_args``.
2. The named tool runs; its result (or error) is appended to the trajectory
   as one step record.
3. This repeats until the predictor chooses ``finish`` or the step budget
   runs out. Running out is not a failure: a synthetic "max steps reached"
   record is appended and the loop proceeds with what it has.
4. A :class:`ChainOfThought` extractor reads the inputs plus the final
   trajectory and produces the task's output fields.

The loop itself never retries anything; retries live in the adapter used by
the two delegates. Tool failures are fed back to the model as error
observations rather than aborting the loop.
"""

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from reasonkit.adapters.base import Adapter
from reasonkit.config import get_settings
from reasonkit.errors import InvalidStepOutputsError
from reasonkit.logging import get_logger
from reasonkit.modules.base import Module
from reasonkit.modules.chain_of_thought import ChainOfThought
from reasonkit.modules.predict import Predict
from reasonkit.parameter import Parameter
from reasonkit.prediction import Prediction
from reasonkit.react.trajectory import StepRecord, Trajectory
from reasonkit.signature import FieldSpec, FieldType, Signature, SignatureSpec, ensure_signature
from reasonkit.tools.base import BaseTool
from reasonkit.tools.table import FINISH, ToolTable

logger = get_logger("reasonkit.react.module")

TRAJECTORY_FIELD = "trajectory"
DECISION_FIELDS = ("next_thought", "next_tool_name", "next_tool_args")

STEP_PARAMETER_PREFIX = "step."
EXTRACT_PARAMETER_PREFIX = "extract."


def step_instructions(tools: ToolTable) -> str:
    """Instructions for the step predictor: available tools and allowed names."""
    allowed = ", ".join([*tools.names(), FINISH])
    tool_lines = tools.describe() or "(no tools available)"

    return (
        "You are a tool-using agent.\n"
        "\n"
        "Choose the next tool to call, or choose finish when you can answer.\n"
        "\n"
        "Available tools:\n"
        f"{tool_lines}\n"
        "\n"
        "IMPORTANT:\n"
        f"- next_tool_name MUST be one of: {allowed}\n"
        "- next_tool_args MUST be a valid JSON object ({} if no args)"
    )


def build_step_signature(base: Signature, tools: ToolTable) -> Signature:
    """Base inputs + trajectory -> the three fixed decision fields."""
    trajectory = FieldSpec(
        name=TRAJECTORY_FIELD,
        type=FieldType.STRING,
        description="Current tool-use trajectory so far",
        required=True,
        default="",
    )
    outputs = (
        FieldSpec(
            name="next_thought",
            type=FieldType.STRING,
            description="Reasoning about what to do next",
        ),
        FieldSpec(
            name="next_tool_name",
            type=FieldType.STRING,
            description="Which tool to call next (or 'finish')",
            one_of=(*tools.names(), FINISH),
        ),
        FieldSpec(
            name="next_tool_args",
            type=FieldType.JSON,
            description="Tool arguments as a JSON object",
            default={},
        ),
    )

    return Signature(
        name="react_step",
        input_fields=(*base.input_fields, trajectory),
        output_fields=outputs,
        instructions=step_instructions(tools),
    )


def build_extract_signature(base: Signature) -> Signature:
    """Base inputs + trajectory -> base outputs, keeping base instructions."""
    trajectory = FieldSpec(
        name=TRAJECTORY_FIELD,
        type=FieldType.STRING,
        description="Full tool-use trajectory",
        required=True,
        default="",
    )
    return Signature(
        name="react_extract",
        input_fields=(*base.input_fields, trajectory),
        output_fields=base.output_fields,
        instructions=base.instructions,
    )


class ReAct(Module):
    """Bounded tool-using reasoning loop with a final extraction step.

    Example:
        >>> react = ReAct("question -> answer", [search], max_steps=5)
        >>> pred = await react.forward({"question": "Who wrote Dune?"})
        >>> pred.answer, pred.trajectory

    The configuration (signatures, tool table, delegates) is fixed at
    construction; update_parameters() returns a new instance.
    """

    supports_parameters = True

    def __init__(
        self,
        signature: Signature | str | type[SignatureSpec],
        tools: Sequence[BaseTool] | ToolTable = (),
        *,
        max_steps: int | None = None,
        adapter: Adapter | None = None,
    ):
        """Initialize the loop.

        Args:
            signature: Task signature, arrow string, or SignatureSpec subclass
            tools: Tools the loop may call (or a prebuilt ToolTable)
            max_steps: Step budget (settings default, 10, if None)
            adapter: Adapter override shared by both delegates

        Raises:
            ToolConfigurationError: If the tools cannot form a dispatch table
            SignatureError: If the derived signatures are invalid
            ValueError: If max_steps is below 1
        """
        if max_steps is None:
            max_steps = get_settings().react_max_steps
        if max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {max_steps}")

        self.signature = ensure_signature(signature)
        self.tools = tools if isinstance(tools, ToolTable) else ToolTable(tools)
        self.max_steps = max_steps
        self.adapter = adapter

        self.step_signature = build_step_signature(self.signature, self.tools)
        self.extract_signature = build_extract_signature(self.signature)

        self.step_predictor = Predict(self.step_signature, adapter=adapter)
        self.extractor = ChainOfThought(self.extract_signature, adapter=adapter)

    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        prediction, _ = await self.forward_with_trajectory(inputs)
        return prediction

    async def forward_with_trajectory(
        self,
        inputs: Mapping[str, Any],
    ) -> tuple[Prediction, Trajectory]:
        """Run the loop, returning the prediction and the structured trajectory.

        Raises:
            InputValidationError: If the base inputs are invalid (before any call)
            InvalidStepOutputsError: If a step prediction lacks a decision field
            Exception: Step predictor or extractor failures, unchanged
        """
        self.signature.validate_inputs(inputs)

        logger.info(
            "ReAct loop starting",
            signature=self.signature.name,
            max_steps=self.max_steps,
            tools=self.tools.names(),
        )

        trajectory, exhausted = await self._run_steps(inputs)
        rendered = trajectory.render()

        prediction = await self.extractor.forward({**inputs, TRAJECTORY_FIELD: rendered})
        logger.info(
            "ReAct loop complete",
            signature=self.signature.name,
            records=len(trajectory),
            exhausted=exhausted,
        )
        return prediction.with_fields(**{TRAJECTORY_FIELD: rendered}), trajectory

    async def _run_steps(self, inputs: Mapping[str, Any]) -> tuple[Trajectory, bool]:
        """Run the step loop; the flag is True when the step budget ran out."""
        trajectory = Trajectory()

        for step in range(self.max_steps):
            decision = await self.step_predictor.forward(
                {**inputs, TRAJECTORY_FIELD: trajectory.render()}
            )

            missing = [name for name in DECISION_FIELDS if name not in decision]
            if missing:
                raise InvalidStepOutputsError(decision.to_dict(), missing)

            tool_name = decision["next_tool_name"]
            if tool_name == FINISH:
                logger.debug("Step predictor chose finish", step=step + 1)
                return trajectory, False

            args = decision["next_tool_args"]
            result = await self.tools.execute(tool_name, args)
            logger.debug(
                "ReAct step completed",
                step=step + 1,
                tool_name=tool_name,
                success=result.success,
            )

            trajectory.append(
                StepRecord.from_tool_result(
                    step, decision["next_thought"], tool_name, args, result
                )
            )

        logger.warning("ReAct step budget exhausted", max_steps=self.max_steps)
        trajectory.append(StepRecord.max_steps_reached(self.max_steps))
        return trajectory, True

    def parameters(self) -> list[Parameter]:
        step = [
            p.renamed(STEP_PARAMETER_PREFIX + p.name) for p in self.step_predictor.parameters()
        ]
        extract = [
            p.renamed(EXTRACT_PARAMETER_PREFIX + p.name) for p in self.extractor.parameters()
        ]
        return step + extract

    def update_parameters(self, parameters: Sequence[Parameter]) -> "ReAct":
        step: list[Parameter] = []
        extract: list[Parameter] = []
        for param in parameters:
            if param.name.startswith(STEP_PARAMETER_PREFIX):
                step.append(param.renamed(param.name[len(STEP_PARAMETER_PREFIX):]))
            elif param.name.startswith(EXTRACT_PARAMETER_PREFIX):
                extract.append(param.renamed(param.name[len(EXTRACT_PARAMETER_PREFIX):]))

        updated = copy.copy(self)
        updated.step_predictor = self.step_predictor.update_parameters(step)
        updated.extractor = self.extractor.update_parameters(extract)
        # Signatures describe the delegates, so they follow the updates.
        updated.step_signature = updated.step_predictor.signature
        updated.extract_signature = self.extract_signature.with_instructions(
            updated.extractor.signature.instructions
        )
        return updated

    def __repr__(self) -> str:
        return (
            f"<ReAct signature='{self.signature}' "
            f"tools={self.tools.names()} max_steps={self.max_steps}>"
        )
