"""Adapter boundary for reasonkit.

This module exposes the adapter interface and the pipeline functions that
prediction modules use to reach it.
"""

from reasonkit.adapters.base import (
    Adapter,
    AdapterCallback,
    AdapterError,
    AdapterNotConfiguredError,
    CallMeta,
)
from reasonkit.adapters.pipeline import (
    active_adapter,
    configure,
    reset,
    run,
)

__all__ = [
    # Interface
    "Adapter",
    "AdapterCallback",
    "AdapterError",
    "AdapterNotConfiguredError",
    "CallMeta",
    # Pipeline
    "active_adapter",
    "configure",
    "reset",
    "run",
]
