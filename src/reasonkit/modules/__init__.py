"""Reasoning modules and the protocol they share."""

from reasonkit.modules.base import (
    Module,
    Parallel,
    Sequential,
    apply_parameters,
    compose,
    export_parameters,
    parallel,
)
from reasonkit.modules.chain_of_thought import (
    ChainOfThought,
    add_reasoning_field,
    add_reasoning_instructions,
)
from reasonkit.modules.predict import Predict

__all__ = [
    # Protocol
    "Module",
    "Sequential",
    "Parallel",
    "compose",
    "parallel",
    "export_parameters",
    "apply_parameters",
    # Modules
    "Predict",
    "ChainOfThought",
    "add_reasoning_field",
    "add_reasoning_instructions",
]
