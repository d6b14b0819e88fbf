"""Tests for signatures."""

import pytest
from pydantic import ValidationError

from reasonkit.errors import InputValidationError, SignatureError
from reasonkit.signature import (
    FieldSpec,
    FieldType,
    InputField,
    OutputField,
    Signature,
    SignatureSpec,
    ensure_signature,
    humanize_field_name,
    parse_field_type,
)


class TestFieldType:
    """Test field type resolution."""

    def test_aliases(self):
        """Test string aliases map to field types."""
        assert parse_field_type("str") == FieldType.STRING
        assert parse_field_type("int") == FieldType.INTEGER
        assert parse_field_type("float") == FieldType.NUMBER
        assert parse_field_type("bool") == FieldType.BOOLEAN
        assert parse_field_type("dict") == FieldType.JSON
        assert parse_field_type(" List ") == FieldType.LIST

    def test_python_types(self):
        """Test Python types and generic aliases map to field types."""
        assert parse_field_type(str) == FieldType.STRING
        assert parse_field_type(bool) == FieldType.BOOLEAN
        assert parse_field_type(list[str]) == FieldType.LIST
        assert parse_field_type(dict[str, int]) == FieldType.JSON

    def test_unsupported(self):
        """Test unknown types are rejected."""
        with pytest.raises(SignatureError, match="Unsupported field type"):
            parse_field_type("tensor")

    def test_string_representation(self):
        """Test string conversion."""
        assert str(FieldType.CODE) == "code"


class TestFieldSpec:
    """Test FieldSpec model."""

    def test_default_description(self):
        """Test the description falls back to the humanized name."""
        spec = FieldSpec(name="next_thought")
        assert spec.description == "Next thought"
        assert spec.type == FieldType.STRING
        assert spec.required is True

    def test_invalid_name(self):
        """Test non-identifier names are rejected."""
        with pytest.raises(SignatureError, match="Invalid field name"):
            FieldSpec(name="not valid")

    def test_humanize(self):
        """Test humanizing field names."""
        assert humanize_field_name("final_answer") == "Final answer"
        assert humanize_field_name("x") == "X"


class TestSignatureDefine:
    """Test building signatures from strings."""

    def test_arrow_form(self):
        """Test the simple 'inputs -> outputs' form."""
        sig = Signature.define("question -> answer")

        assert sig.input_names == ["question"]
        assert sig.output_names == ["answer"]
        assert sig.name == "question -> answer"
        assert sig.instructions is None
        assert str(sig) == "question -> answer"

    def test_typed_fields(self):
        """Test type annotations on fields."""
        sig = Signature.define("a: int, b -> c: float, d: bool")

        assert sig.get_field("a").type == FieldType.INTEGER
        assert sig.get_field("b").type == FieldType.STRING
        assert sig.get_field("c").type == FieldType.NUMBER
        assert sig.get_field("d").type == FieldType.BOOLEAN

    def test_function_form(self):
        """Test the 'name(inputs) -> outputs' form."""
        sig = Signature.define("classify(text: str) -> label, confidence: float")

        assert sig.name == "classify"
        assert sig.input_names == ["text"]
        assert sig.output_names == ["label", "confidence"]

    def test_no_inputs(self):
        """Test a signature with outputs only."""
        sig = Signature.define(" -> greeting")
        assert sig.input_names == []
        assert sig.output_names == ["greeting"]

    @pytest.mark.parametrize(
        "text",
        [
            "question answer",
            "a -> b -> c",
            "question -> ",
            "a: tensor -> b",
            "a b -> c",
        ],
    )
    def test_invalid(self, text):
        """Test malformed signature strings are rejected."""
        with pytest.raises(SignatureError):
            Signature.define(text)

    def test_duplicate_names(self):
        """Test field names must be unique across inputs and outputs."""
        with pytest.raises(SignatureError, match="Duplicate field name 'a'"):
            Signature.define("a -> a")

    def test_not_a_string(self):
        """Test non-string input is rejected."""
        with pytest.raises(SignatureError):
            Signature.define(42)


class TestSignatureTransforms:
    """Test that transformations return new signatures."""

    def test_immutable(self):
        """Test signatures cannot be mutated in place."""
        sig = Signature.define("question -> answer")
        with pytest.raises(ValidationError):
            sig.name = "other"

    def test_with_instructions(self):
        """Test replacing instructions leaves the original untouched."""
        sig = Signature.define("question -> answer")
        updated = sig.with_instructions("Be brief.")

        assert updated.instructions == "Be brief."
        assert sig.instructions is None
        assert updated.output_names == sig.output_names

    def test_append_input_field(self):
        """Test appending an input field."""
        sig = Signature.define("question -> answer")
        updated = sig.append_input_field(FieldSpec(name="context"))

        assert updated.input_names == ["question", "context"]
        assert sig.input_names == ["question"]

    def test_prepend_output_field(self):
        """Test prepending an output field."""
        sig = Signature.define("question -> answer")
        updated = sig.prepend_output_field(FieldSpec(name="reasoning"))

        assert updated.output_names == ["reasoning", "answer"]

    def test_append_duplicate_rejected(self):
        """Test transformations keep names unique."""
        sig = Signature.define("question -> answer")
        with pytest.raises(SignatureError):
            sig.append_input_field(FieldSpec(name="answer"))


class TestValidateInputs:
    """Test input validation."""

    def test_valid(self):
        """Test complete inputs pass, extra keys allowed."""
        sig = Signature.define("a, b -> c")
        sig.validate_inputs({"a": 1, "b": 2, "extra": 3})

    def test_missing_fields(self):
        """Test missing required fields are reported."""
        sig = Signature.define("a, b -> c")

        with pytest.raises(InputValidationError) as exc_info:
            sig.validate_inputs({"a": 1})

        assert exc_info.value.missing == ["b"]
        assert "b" in str(exc_info.value)

    def test_optional_field(self):
        """Test non-required fields may be absent."""
        sig = Signature(
            name="qa",
            input_fields=(FieldSpec(name="question"), FieldSpec(name="hint", required=False)),
            output_fields=(FieldSpec(name="answer"),),
        )
        sig.validate_inputs({"question": "q"})

    def test_not_a_mapping(self):
        """Test non-mapping inputs are rejected."""
        sig = Signature.define("a -> b")

        with pytest.raises(InputValidationError) as exc_info:
            sig.validate_inputs(["a"])

        assert exc_info.value.missing == []
        assert "list" in exc_info.value.reason


class TestSignatureSpec:
    """Test class-based signature declarations."""

    def test_declaration(self):
        """Test fields, types and instructions come from the class."""

        class QA(SignatureSpec):
            """Answer questions with short factoid answers."""

            question: str = InputField(desc="The question to answer")
            answer: str = OutputField(desc="A short answer")
            confidence: float = OutputField()

        sig = QA.signature()

        assert sig.name == "QA"
        assert sig.instructions == "Answer questions with short factoid answers."
        assert sig.input_names == ["question"]
        assert sig.output_names == ["answer", "confidence"]
        assert sig.get_field("question").description == "The question to answer"
        assert sig.get_field("confidence").type == FieldType.NUMBER
        assert sig.get_field("confidence").description == "Confidence"

    def test_one_of(self):
        """Test allowed values are carried on the field."""

        class Sentiment(SignatureSpec):
            text: str = InputField()
            label: str = OutputField(one_of=["positive", "negative"])

        assert Sentiment.signature().get_field("label").one_of == ("positive", "negative")
        assert Sentiment.signature().instructions is None

    def test_no_fields(self):
        """Test a class without field declarations has no signature."""

        class Empty(SignatureSpec):
            """Nothing declared here."""

        with pytest.raises(SignatureError, match="declares no fields"):
            Empty.signature()

        with pytest.raises(SignatureError, match="declares no fields"):
            ensure_signature(Empty)


class TestEnsureSignature:
    """Test signature coercion."""

    def test_passthrough(self):
        """Test a Signature is returned as-is."""
        sig = Signature.define("a -> b")
        assert ensure_signature(sig) is sig

    def test_from_string(self):
        """Test strings are parsed."""
        assert ensure_signature("a -> b").output_names == ["b"]

    def test_from_spec(self):
        """Test SignatureSpec subclasses are accepted."""

        class Echo(SignatureSpec):
            text: str = InputField()
            reply: str = OutputField()

        assert ensure_signature(Echo).name == "Echo"

    def test_invalid(self):
        """Test other values are rejected."""
        with pytest.raises(SignatureError):
            ensure_signature(42)
