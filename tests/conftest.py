"""Pytest configuration and fixtures for reasonkit tests."""

from collections.abc import Mapping, Sequence
from typing import Any

import pytest
import structlog

from reasonkit.adapters import pipeline
from reasonkit.adapters.base import Adapter, AdapterCallback, AdapterError
from reasonkit.config import Settings
from reasonkit.prediction import Example
from reasonkit.signature import Signature
from reasonkit.tools import FunctionTool


class ScriptedAdapter(Adapter):
    """Adapter returning canned outputs and recording every call.

    Responses are consumed in order, either from one shared queue or from a
    per-signature-name queue. A response may be a dict, an exception to
    raise, or a callable ``(signature, inputs) -> dict``. When a queue runs
    dry, ``repeat`` supplies a response for that signature name.
    """

    def __init__(
        self,
        responses: Sequence[Any] = (),
        *,
        by_signature: Mapping[str, Sequence[Any]] | None = None,
        repeat: Mapping[str, Any] | None = None,
    ):
        self.responses = list(responses)
        self.by_signature = {name: list(queue) for name, queue in (by_signature or {}).items()}
        self.repeat = dict(repeat or {})
        self.calls: list[dict[str, Any]] = []

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
        self.calls.append(
            {
                "signature": signature,
                "inputs": dict(inputs),
                "examples": tuple(examples),
                "callbacks": tuple(callbacks),
                "max_retries": max_retries,
                "max_output_retries": max_output_retries,
            }
        )

        queue = self.by_signature.get(signature.name, self.responses)
        if queue:
            response = queue.pop(0)
        elif signature.name in self.repeat:
            response = self.repeat[signature.name]
        else:
            raise AdapterError(f"No scripted response for signature '{signature.name}'")

        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(signature, inputs)
        return dict(response)

    def calls_for(self, signature_name: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["signature"].name == signature_name]


class RecordingCallback(AdapterCallback):
    """Callback that records lifecycle events as (label, event, payload)."""

    def __init__(self, label: str, events: list[tuple[str, str, dict[str, Any]]]):
        self.label = label
        self.events = events

    def on_adapter_start(self, meta, payload):
        self.events.append((self.label, "start", payload))

    def on_adapter_end(self, meta, payload):
        self.events.append((self.label, "end", payload))


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Reset the adapter pipeline, cached settings and logging around every test."""
    monkeypatch.setattr("reasonkit.config._settings", None)
    monkeypatch.setattr(
        "reasonkit.config.Settings.model_config",
        {**Settings.model_config, "env_file": None},
    )
    pipeline.reset()
    yield
    pipeline.reset()
    structlog.reset_defaults()


@pytest.fixture
def make_adapter():
    """Factory for scripted adapters."""
    return ScriptedAdapter


@pytest.fixture
def search_tool():
    """Tool that answers any query with 'result-<query>'."""

    def search(query: str) -> str:
        """Search the knowledge base."""
        return f"result-{query}"

    return FunctionTool(name="search", description="Search the knowledge base", func=search)


@pytest.fixture
def echo_tool():
    """Tool that echoes its text argument."""

    async def echo(text: str = "") -> str:
        return text

    return FunctionTool(name="echo", description="Echo the given text", func=echo)


@pytest.fixture
def make_callback():
    """Factory for recording callbacks."""
    return RecordingCallback
