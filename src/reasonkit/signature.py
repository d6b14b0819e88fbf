"""Typed input/output contracts for reasoning modules.

A signature is an ordered list of input field descriptors, an ordered list of
output field descriptors, optional instructions, and a name. Signatures are
immutable; every transformation returns a new instance.

Signatures can be built three ways:

    >>> Signature.define("question -> answer")
    >>> Signature.define("classify(text: str) -> label, confidence: float")
    >>> class QA(SignatureSpec):
    ...     \"\"\"Answer questions with short factoid answers.\"\"\"
    ...     question: str = InputField(desc="The question to answer")
    ...     answer: str = OutputField(desc="A short answer")
"""

import inspect
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reasonkit.errors import InputValidationError, SignatureError


class FieldType(str, Enum):
    """Type tag carried by a signature field."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    CODE = "code"
    LIST = "list"

    def __str__(self) -> str:
        return self.value


_TYPE_ALIASES: dict[str, FieldType] = {
    "str": FieldType.STRING,
    "string": FieldType.STRING,
    "int": FieldType.INTEGER,
    "integer": FieldType.INTEGER,
    "float": FieldType.NUMBER,
    "number": FieldType.NUMBER,
    "bool": FieldType.BOOLEAN,
    "boolean": FieldType.BOOLEAN,
    "json": FieldType.JSON,
    "dict": FieldType.JSON,
    "code": FieldType.CODE,
    "list": FieldType.LIST,
}

_PYTHON_TYPES: dict[type, FieldType] = {
    str: FieldType.STRING,
    int: FieldType.INTEGER,
    float: FieldType.NUMBER,
    bool: FieldType.BOOLEAN,
    dict: FieldType.JSON,
    list: FieldType.LIST,
}

_FUNCTION_FORM = re.compile(r"^(\w+)\s*\((.*)\)$")


def parse_field_type(value: "str | type | FieldType") -> FieldType:
    """Resolve a type alias, Python type, or FieldType into a FieldType.

    Raises:
        SignatureError: If the type is not supported
    """
    if isinstance(value, FieldType):
        return value
    origin = get_origin(value) or value
    if isinstance(origin, type) and origin in _PYTHON_TYPES:
        return _PYTHON_TYPES[origin]
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]
    raise SignatureError(f"Unsupported field type: {value!r}")


def humanize_field_name(name: str) -> str:
    """Turn ``snake_case`` field names into a readable description."""
    words = name.replace("_", " ").strip()
    return words[:1].upper() + words[1:] if words else name


class FieldSpec(BaseModel):
    """Descriptor for one input or output field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Field name, unique within a signature")
    type: FieldType = Field(default=FieldType.STRING, description="Type tag")
    description: str = Field(default="", description="Human-readable description")
    required: bool = Field(default=True, description="Whether the field must be present")
    default: Any = Field(default=None, description="Default value when absent")
    one_of: tuple[Any, ...] | None = Field(
        default=None,
        description="Optional set of allowed values",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise SignatureError(f"Invalid field name: {v!r}")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> FieldType:
        return parse_field_type(v)

    @model_validator(mode="before")
    @classmethod
    def default_description(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("description") and data.get("name"):
            data = {**data, "description": humanize_field_name(str(data["name"]))}
        return data


class Signature(BaseModel):
    """Immutable description of a task's input/output fields.

    Invariant: field names are unique across inputs and outputs.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Signature name")
    description: str | None = Field(default=None, description="Optional description")
    input_fields: tuple[FieldSpec, ...] = Field(default=(), description="Ordered inputs")
    output_fields: tuple[FieldSpec, ...] = Field(default=(), description="Ordered outputs")
    instructions: str | None = Field(default=None, description="Task instructions")

    @model_validator(mode="after")
    def check_unique_names(self) -> "Signature":
        seen: set[str] = set()
        for spec in (*self.input_fields, *self.output_fields):
            if spec.name in seen:
                raise SignatureError(
                    f"Duplicate field name '{spec.name}' in signature '{self.name}'"
                )
            seen.add(spec.name)
        return self

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def define(cls, text: str) -> "Signature":
        """Build a signature from an arrow string.

        Supported formats:

        * ``"input1, input2 -> output1, output2: int"``
        * ``"name(input1: str, input2) -> output1: float"``

        Types are optional and default to ``string``.

        Raises:
            SignatureError: If the string cannot be parsed
        """
        if not isinstance(text, str):
            raise SignatureError(f"Signature text must be a string, got {type(text).__name__}")

        clean = " ".join(text.split())
        parts = clean.split("->")
        if len(parts) != 2:
            raise SignatureError(
                f"Invalid signature format {text!r}: expected 'inputs -> outputs'"
            )

        inputs_part, outputs_part = (p.strip() for p in parts)
        name = clean

        match = _FUNCTION_FORM.match(inputs_part)
        if match:
            name, inputs_part = match.group(1), match.group(2)

        input_fields = _parse_fields(inputs_part)
        output_fields = _parse_fields(outputs_part)
        if not output_fields:
            raise SignatureError(
                f"Invalid signature format {text!r}: at least one output field is required"
            )

        return cls(name=name, input_fields=input_fields, output_fields=output_fields)

    def with_name(self, name: str) -> "Signature":
        return self.model_copy(update={"name": name})

    def with_instructions(self, instructions: str | None) -> "Signature":
        return self.model_copy(update={"instructions": instructions})

    def append_input_field(self, spec: FieldSpec) -> "Signature":
        """Return a new signature with ``spec`` added after the existing inputs."""
        return type(self)(
            **{**self._as_kwargs(), "input_fields": (*self.input_fields, spec)}
        )

    def prepend_output_field(self, spec: FieldSpec) -> "Signature":
        """Return a new signature with ``spec`` placed before the existing outputs."""
        return type(self)(
            **{**self._as_kwargs(), "output_fields": (spec, *self.output_fields)}
        )

    def _as_kwargs(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_fields": self.input_fields,
            "output_fields": self.output_fields,
            "instructions": self.instructions,
        }

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def input_names(self) -> list[str]:
        return [f.name for f in self.input_fields]

    @property
    def output_names(self) -> list[str]:
        return [f.name for f in self.output_fields]

    @property
    def field_names(self) -> list[str]:
        return self.input_names + self.output_names

    def get_field(self, name: str) -> FieldSpec | None:
        for spec in (*self.input_fields, *self.output_fields):
            if spec.name == name:
                return spec
        return None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_inputs(self, inputs: Any) -> None:
        """Check that every required input field is present.

        Extra keys are allowed and passed through untouched.

        Raises:
            InputValidationError: If inputs are not a mapping or a required field is missing
        """
        if not isinstance(inputs, Mapping):
            raise InputValidationError(
                self.name,
                reason=f"expected a mapping of inputs, got {type(inputs).__name__}",
            )

        missing = [f.name for f in self.input_fields if f.required and f.name not in inputs]
        if missing:
            raise InputValidationError(self.name, missing=missing)

    def __str__(self) -> str:
        inputs = ", ".join(self.input_names)
        outputs = ", ".join(self.output_names)
        return f"{inputs} -> {outputs}"


def _parse_fields(fields_text: str) -> tuple[FieldSpec, ...]:
    fields: list[FieldSpec] = []
    for raw in fields_text.split(","):
        raw = raw.strip()
        if not raw:
            continue

        if ":" in raw:
            name, type_text = (p.strip() for p in raw.split(":", 1))
            field_type = parse_field_type(type_text)
        else:
            name, field_type = raw, FieldType.STRING

        if not name:
            raise SignatureError(f"Invalid field format {raw!r}: empty field name")

        fields.append(FieldSpec(name=name, type=field_type))
    return tuple(fields)


# ----------------------------------------------------------------------
# Class-based declaration
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class _FieldDeclaration:
    kind: str
    desc: str | None = None
    required: bool = True
    default: Any = None
    one_of: tuple[Any, ...] | None = None
    type: "FieldType | str | None" = None


def InputField(
    desc: str | None = None,
    *,
    required: bool = True,
    default: Any = None,
    one_of: list[Any] | tuple[Any, ...] | None = None,
    type: "FieldType | str | None" = None,
) -> Any:
    """Declare an input field on a :class:`SignatureSpec` subclass."""
    return _FieldDeclaration(
        "input", desc, required, default, tuple(one_of) if one_of else None, type
    )


def OutputField(
    desc: str | None = None,
    *,
    required: bool = True,
    default: Any = None,
    one_of: list[Any] | tuple[Any, ...] | None = None,
    type: "FieldType | str | None" = None,
) -> Any:
    """Declare an output field on a :class:`SignatureSpec` subclass."""
    return _FieldDeclaration(
        "output", desc, required, default, tuple(one_of) if one_of else None, type
    )


class SignatureSpec:
    """Base class for declaring signatures with class attributes.

    The class docstring becomes the instructions; annotations give field types
    (``str`` when omitted).
    """

    _signature: ClassVar[Signature | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        annotations = inspect.get_annotations(cls)
        inputs: list[FieldSpec] = []
        outputs: list[FieldSpec] = []

        for attr, value in list(cls.__dict__.items()):
            if not isinstance(value, _FieldDeclaration):
                continue

            field_type = value.type or annotations.get(attr, FieldType.STRING)
            spec = FieldSpec(
                name=attr,
                type=parse_field_type(field_type),
                description=value.desc or "",
                required=value.required,
                default=value.default,
                one_of=value.one_of,
            )
            (inputs if value.kind == "input" else outputs).append(spec)

        if not inputs and not outputs:
            # Field-less classes have no signature.
            cls._signature = None
            return

        doc = cls.__doc__.strip() if cls.__doc__ else None
        cls._signature = Signature(
            name=cls.__name__,
            input_fields=tuple(inputs),
            output_fields=tuple(outputs),
            instructions=doc or None,
        )

    @classmethod
    def signature(cls) -> Signature:
        if cls._signature is None:
            raise SignatureError(f"{cls.__name__} declares no fields")
        return cls._signature


def ensure_signature(value: "Signature | str | type[SignatureSpec]") -> Signature:
    """Coerce a signature, signature string, or SignatureSpec subclass into a Signature.

    Raises:
        SignatureError: If the value cannot be turned into a signature
    """
    if isinstance(value, Signature):
        return value
    if isinstance(value, str):
        return Signature.define(value)
    if isinstance(value, type) and issubclass(value, SignatureSpec):
        return value.signature()
    raise SignatureError(
        f"Expected a Signature, signature string, or SignatureSpec subclass; got {value!r}"
    )
