"""Single boundary between prediction modules and the active adapter.

Responsibilities:
- resolve the active adapter (module override > configured default)
- merge global and program callbacks (global first)
- emit start/end lifecycle events around the adapter call
- propagate adapter failures unchanged
"""

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from reasonkit.adapters.base import (
    Adapter,
    AdapterCallback,
    AdapterNotConfiguredError,
    CallMeta,
)
from reasonkit.logging import AsyncTimer, get_logger
from reasonkit.prediction import Example
from reasonkit.signature import Signature

logger = get_logger("reasonkit.adapters.pipeline")

_default_adapter: Adapter | None = None
_global_callbacks: list[AdapterCallback] = []


def configure(
    adapter: Adapter | None = None,
    callbacks: Sequence[AdapterCallback] | None = None,
) -> None:
    """Set the process-wide default adapter and/or global callbacks.

    Arguments left as None keep their current value.
    """
    global _default_adapter, _global_callbacks
    if adapter is not None:
        _default_adapter = adapter
        logger.info("Default adapter configured", adapter=adapter.name)
    if callbacks is not None:
        _global_callbacks = list(callbacks)


def reset() -> None:
    """Clear the configured adapter and global callbacks (useful for testing)."""
    global _default_adapter, _global_callbacks
    _default_adapter = None
    _global_callbacks = []


def active_adapter(override: Adapter | None = None) -> Adapter:
    """Resolve the adapter for a call.

    Raises:
        AdapterNotConfiguredError: If there is no override and no default
    """
    if override is not None:
        return override
    if _default_adapter is not None:
        return _default_adapter
    raise AdapterNotConfiguredError()


def _emit(
    callbacks: Sequence[AdapterCallback],
    event: str,
    meta: CallMeta,
    payload: dict[str, Any],
) -> None:
    for callback in callbacks:
        try:
            getattr(callback, event)(meta, payload)
        except Exception as e:
            logger.warning(
                "Adapter callback failed",
                callback=type(callback).__name__,
                event=event,
                error=f"{type(e).__name__}: {e}",
            )


async def run(
    signature: Signature,
    inputs: Mapping[str, Any],
    examples: Sequence[Example] = (),
    *,
    adapter: Adapter | None = None,
    callbacks: Sequence[AdapterCallback] = (),
    max_retries: int = 3,
    max_output_retries: int = 0,
) -> dict[str, Any]:
    """Run ``signature`` through the active adapter.

    Returns:
        dict: Output fields produced by the adapter

    Raises:
        AdapterNotConfiguredError: If no adapter can be resolved
        Exception: Whatever the adapter raises, unchanged
    """
    resolved = active_adapter(adapter)
    merged_callbacks = [*_global_callbacks, *callbacks]
    meta = CallMeta(
        call_id=uuid.uuid4().hex,
        adapter=resolved.name,
        signature_name=signature.name,
    )

    _emit(merged_callbacks, "on_adapter_start", meta, {"input_keys": sorted(inputs)})

    try:
        async with AsyncTimer(f"adapter call ({signature.name})", logger):
            outputs = await resolved.run(
                signature,
                inputs,
                examples,
                callbacks=merged_callbacks,
                max_retries=max_retries,
                max_output_retries=max_output_retries,
            )
    except Exception as e:
        logger.debug(
            "Adapter call failed",
            call_id=meta.call_id,
            signature=signature.name,
            error=f"{type(e).__name__}: {e}",
        )
        _emit(merged_callbacks, "on_adapter_end", meta, {"error": e})
        raise

    _emit(merged_callbacks, "on_adapter_end", meta, {"outputs": outputs})
    return dict(outputs)
