"""Tests for the module protocol and combinators."""

import asyncio

import pytest

from reasonkit.errors import UnsupportedParametersError
from reasonkit.modules.base import (
    Module,
    Parallel,
    Sequential,
    apply_parameters,
    compose,
    export_parameters,
    parallel,
)
from reasonkit.parameter import Parameter, ParameterKind
from reasonkit.prediction import Prediction


class StaticModule(Module):
    """Returns fixed outputs after an optional delay, recording its inputs."""

    def __init__(self, outputs, delay=0.0):
        self.outputs = outputs
        self.delay = delay
        self.seen = []
        self.finished = False

    async def forward(self, inputs):
        self.seen.append(dict(inputs))
        if self.delay:
            await asyncio.sleep(self.delay)
        self.finished = True
        return Prediction(self.outputs)


class FailingModule(Module):
    """Raises the given error after an optional delay."""

    def __init__(self, error, delay=0.0):
        self.error = error
        self.delay = delay

    async def forward(self, inputs):
        if self.delay:
            await asyncio.sleep(self.delay)
        raise self.error


class UpperModule(Module):
    """Upper-cases the 'text' field."""

    async def forward(self, inputs):
        return Prediction(text=inputs["text"].upper(), length=len(inputs["text"]))


class TestModuleDefaults:
    """Test the default parameter behavior."""

    def test_no_parameters(self):
        """Test a plain module has no parameters and ignores updates."""
        module = UpperModule()
        param = Parameter(name="x", kind=ParameterKind.CUSTOM, value=1)

        assert module.parameters() == []
        assert module.update_parameters([param]) is module
        assert module.supports_parameters is False

    def test_export_unsupported(self):
        """Test export/apply fail loudly on modules without parameters."""
        module = UpperModule()

        with pytest.raises(UnsupportedParametersError, match="UpperModule"):
            export_parameters(module)
        with pytest.raises(UnsupportedParametersError):
            apply_parameters(module, [])

    @pytest.mark.asyncio
    async def test_call_merges_kwargs(self):
        """Test calling a module merges mapping and keyword inputs."""
        module = StaticModule({"ok": True})

        await module({"a": 1}, b=2)

        assert module.seen == [{"a": 1, "b": 2}]


class TestCompose:
    """Test sequential composition."""

    @pytest.mark.asyncio
    async def test_outputs_feed_next_stage(self):
        """Test each stage receives the previous stage's prediction fields."""
        second = StaticModule({"done": True})
        pipeline = compose([UpperModule(), second])

        result = await pipeline.forward({"text": "hi"})

        assert second.seen == [{"text": "HI", "length": 2}]
        assert result == {"done": True}
        assert isinstance(pipeline, Sequential)

    @pytest.mark.asyncio
    async def test_short_circuit(self):
        """Test a failing stage stops the pipeline."""
        later = StaticModule({"never": True})
        pipeline = compose([FailingModule(ValueError("stage failed")), later])

        with pytest.raises(ValueError, match="stage failed"):
            await pipeline.forward({"text": "hi"})

        assert later.seen == []

    def test_empty(self):
        """Test composing nothing is rejected."""
        with pytest.raises(ValueError):
            compose([])


class TestParallel:
    """Test concurrent combination."""

    @pytest.mark.asyncio
    async def test_merge_later_wins(self):
        """Test outputs merge in index order with later branches overwriting."""
        combined = parallel(
            [
                StaticModule({"a": 1, "shared": "first"}, delay=0.02),
                StaticModule({"b": 2, "shared": "second"}),
            ]
        )

        result = await combined.forward({"x": 1})

        assert result == {"a": 1, "b": 2, "shared": "second"}
        assert isinstance(combined, Parallel)

    @pytest.mark.asyncio
    async def test_same_inputs(self):
        """Test every branch receives the same inputs."""
        left, right = StaticModule({}), StaticModule({})

        await parallel([left, right]).forward({"x": 1})

        assert left.seen == right.seen == [{"x": 1}]

    @pytest.mark.asyncio
    async def test_lowest_index_failure_wins(self):
        """Test the lowest-index failure is raised regardless of timing."""
        slow_first = FailingModule(KeyError("branch 0"), delay=0.05)
        fast_second = FailingModule(ValueError("branch 1"))

        with pytest.raises(KeyError):
            await parallel([slow_first, fast_second]).forward({})

    @pytest.mark.asyncio
    async def test_all_branches_joined(self):
        """Test a failure is only raised after every branch completes."""
        slow = StaticModule({"ok": True}, delay=0.05)

        with pytest.raises(RuntimeError):
            await parallel([FailingModule(RuntimeError("fast")), slow]).forward({})

        assert slow.finished is True

    def test_empty(self):
        """Test an empty parallel is rejected."""
        with pytest.raises(ValueError):
            parallel([])
