"""Tests for the ChainOfThought module."""

import pytest

from reasonkit.modules.chain_of_thought import (
    REASONING_DESCRIPTION,
    REASONING_DIRECTIVE,
    ChainOfThought,
    add_reasoning_field,
    add_reasoning_instructions,
)
from reasonkit.modules.predict import INSTRUCTIONS_PARAMETER
from reasonkit.signature import Signature


class TestReasoningAugmentation:
    """Test the signature transformations."""

    def test_reasoning_field_first(self):
        """Test reasoning is prepended to the outputs."""
        sig = add_reasoning_field(Signature.define("question -> answer"))

        assert sig.output_names == ["reasoning", "answer"]
        assert sig.get_field("reasoning").description == REASONING_DESCRIPTION
        assert sig.get_field("reasoning").required is True

    def test_idempotent(self):
        """Test applying the field twice yields the same fields."""
        once = add_reasoning_field(Signature.define("question -> answer"))
        twice = add_reasoning_field(once)

        assert twice.output_names == once.output_names

    def test_existing_field_moved(self):
        """Test a pre-existing reasoning field is moved to the front."""
        sig = add_reasoning_field(Signature.define("question -> answer, reasoning"))

        assert sig.output_names == ["reasoning", "answer"]

    def test_instructions_appended(self):
        """Test the directive follows existing instructions."""
        sig = Signature.define("question -> answer").with_instructions("Answer in French.")

        augmented = add_reasoning_instructions(sig)

        assert augmented.instructions == f"Answer in French.\n\n{REASONING_DIRECTIVE}"
        assert sig.instructions == "Answer in French."

    def test_instructions_without_base(self):
        """Test the directive stands alone when there are no instructions."""
        augmented = add_reasoning_instructions(Signature.define("question -> answer"))

        assert augmented.instructions == REASONING_DIRECTIVE


class TestChainOfThought:
    """Test the ChainOfThought module."""

    def test_base_signature_untouched(self):
        """Test construction does not modify the caller's signature."""
        base = Signature.define("question -> answer").with_instructions("Be brief.")

        cot = ChainOfThought(base)

        assert base.output_names == ["answer"]
        assert base.instructions == "Be brief."
        assert cot.signature.output_names == ["reasoning", "answer"]
        assert cot.signature.instructions == "Be brief."

    @pytest.mark.asyncio
    async def test_directive_applied_once(self, make_adapter):
        """Test repeated calls send the directive exactly once."""
        adapter = make_adapter(
            [{"reasoning": "r1", "answer": "a1"}, {"reasoning": "r2", "answer": "a2"}]
        )
        cot = ChainOfThought("question -> answer", adapter=adapter)

        await cot.forward({"question": "q1"})
        pred = await cot.forward({"question": "q2"})

        assert pred.reasoning == "r2"
        assert pred.answer == "a2"
        for call in adapter.calls:
            sent = call["signature"]
            assert sent.output_names == ["reasoning", "answer"]
            assert sent.instructions.count(REASONING_DIRECTIVE) == 1
        assert cot.call_signature is adapter.calls[0]["signature"]

    def test_custom_reasoning_field(self):
        """Test the reasoning field name can be changed."""
        cot = ChainOfThought("question -> answer", reasoning_field="rationale")

        assert cot.signature.output_names == ["rationale", "answer"]

    def test_parameters_expose_base_instructions(self):
        """Test exported instructions exclude the directive."""
        sig = Signature.define("question -> answer").with_instructions("Be brief.")
        params = {p.name: p for p in ChainOfThought(sig).parameters()}

        assert params[INSTRUCTIONS_PARAMETER].value == "Be brief."

    def test_update_parameters(self):
        """Test updated instructions get the directive appended once."""
        sig = Signature.define("question -> answer").with_instructions("Be brief.")
        cot = ChainOfThought(sig)
        params = {p.name: p for p in cot.parameters()}

        updated = cot.update_parameters([params[INSTRUCTIONS_PARAMETER].update("Be thorough.")])

        assert updated is not cot
        assert updated.signature.instructions == "Be thorough."
        assert updated.call_signature.instructions == f"Be thorough.\n\n{REASONING_DIRECTIVE}"
        assert updated.signature.output_names == ["reasoning", "answer"]
        assert cot.signature.instructions == "Be brief."
