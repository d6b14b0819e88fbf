"""ReAct control loop and its trajectory records."""

from reasonkit.react.module import (
    DECISION_FIELDS,
    TRAJECTORY_FIELD,
    ReAct,
    build_extract_signature,
    build_step_signature,
    step_instructions,
)
from reasonkit.react.trajectory import (
    MAX_STEPS_REACHED,
    ObservationKind,
    StepRecord,
    Trajectory,
    render_args,
    render_observation,
)

__all__ = [
    # Loop
    "ReAct",
    "DECISION_FIELDS",
    "TRAJECTORY_FIELD",
    "build_step_signature",
    "build_extract_signature",
    "step_instructions",
    # Trajectory
    "MAX_STEPS_REACHED",
    "ObservationKind",
    "StepRecord",
    "Trajectory",
    "render_args",
    "render_observation",
]
