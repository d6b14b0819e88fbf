"""Module protocol shared by every reasoning module.

Every module exposes ``forward(inputs)``. The parameter operations have
no-op defaults so that any module can be introspected and updated uniformly;
modules that really carry parameters set ``supports_parameters = True``.

Two combinators build modules out of modules:

- :func:`compose` runs stages in sequence, feeding each stage's prediction
  fields into the next stage.
- :func:`parallel` runs modules concurrently on identical inputs and merges
  their predictions.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from reasonkit.errors import UnsupportedParametersError
from reasonkit.logging import get_logger
from reasonkit.parameter import Parameter
from reasonkit.prediction import Prediction

logger = get_logger("reasonkit.modules.base")


class Module(ABC):
    """Abstract base class for reasoning modules.

    Subclasses must implement:
    - forward() - run the module on a mapping of inputs

    Subclasses carrying optimizable state override parameters() and
    update_parameters() and set ``supports_parameters = True``.
    """

    supports_parameters: bool = False

    @abstractmethod
    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        """Run the module.

        Args:
            inputs: Input field values

        Returns:
            Prediction: Named output fields

        Raises:
            ReasonkitError: On validation or protocol failures
            Exception: Delegate failures, propagated unchanged
        """

    def parameters(self) -> list[Parameter]:
        """Get the module's optimizable parameters (none by default)."""
        return []

    def update_parameters(self, parameters: Sequence[Parameter]) -> "Module":
        """Return a module with ``parameters`` applied (``self`` by default)."""
        return self

    async def __call__(self, inputs: Mapping[str, Any] | None = None, **kwargs: Any) -> Prediction:
        merged = {**(inputs or {}), **kwargs}
        return await self.forward(merged)


class Sequential(Module):
    """Pipeline of modules: each stage's outputs are the next stage's inputs."""

    def __init__(self, modules: Sequence[Module]):
        if not modules:
            raise ValueError("compose() requires at least one module")
        self.modules: tuple[Module, ...] = tuple(modules)

    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        current: Mapping[str, Any] = inputs

        for index, module in enumerate(self.modules):
            logger.debug(
                "Sequential stage starting",
                stage=index,
                module=type(module).__name__,
            )
            # A failing stage raises; later stages never run.
            prediction = await module.forward(current)
            current = prediction.to_dict()
            logger.debug("Sequential stage completed", stage=index, fields=sorted(current))

        return Prediction(current)

    def __repr__(self) -> str:
        names = ", ".join(type(m).__name__ for m in self.modules)
        return f"<Sequential [{names}]>"


class Parallel(Module):
    """Run modules concurrently on the same inputs and merge their predictions.

    All branches are joined before returning. If any branch fails, the failure
    of the lowest-index failing branch is raised, independent of completion
    order. Otherwise fields are merged in index order, later branches
    overwriting earlier ones on key collision.
    """

    def __init__(self, modules: Sequence[Module]):
        if not modules:
            raise ValueError("parallel() requires at least one module")
        self.modules: tuple[Module, ...] = tuple(modules)

    async def forward(self, inputs: Mapping[str, Any]) -> Prediction:
        logger.debug("Parallel branches starting", branches=len(self.modules))

        results = await asyncio.gather(
            *(module.forward(dict(inputs)) for module in self.modules),
            return_exceptions=True,
        )

        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.debug(
                    "Parallel branch failed",
                    branch=index,
                    module=type(self.modules[index]).__name__,
                    error=f"{type(result).__name__}: {result}",
                )
                raise result

        merged: dict[str, Any] = {}
        for prediction in results:
            merged.update(prediction)
        logger.debug("Parallel branches completed", branches=len(self.modules))
        return Prediction(merged)

    def __repr__(self) -> str:
        names = ", ".join(type(m).__name__ for m in self.modules)
        return f"<Parallel [{names}]>"


def compose(modules: Sequence[Module]) -> Sequential:
    """Compose modules into a sequential pipeline."""
    return Sequential(modules)


def parallel(modules: Sequence[Module]) -> Parallel:
    """Combine modules to run concurrently with merged outputs."""
    return Parallel(modules)


def export_parameters(module: Module) -> list[Parameter]:
    """Export a module's parameters, distinguishing "none" from "unsupported".

    Raises:
        UnsupportedParametersError: If the module does not support parameters
    """
    if not module.supports_parameters:
        raise UnsupportedParametersError(module)
    return module.parameters()


def apply_parameters(module: Module, parameters: Sequence[Parameter]) -> Module:
    """Apply parameters to a module that supports them.

    Raises:
        UnsupportedParametersError: If the module does not support parameters
    """
    if not module.supports_parameters:
        raise UnsupportedParametersError(module)
    return module.update_parameters(parameters)
