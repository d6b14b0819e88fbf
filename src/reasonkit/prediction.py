"""Result and few-shot record types shared by every reasoning module."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Prediction(Mapping[str, Any]):
    """Immutable named-field result of one module call.

    Fields are readable by key or attribute:

        >>> pred = Prediction({"answer": "4"})
        >>> pred["answer"], pred.answer
        ('4', '4')
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None, **extra: Any):
        merged = dict(fields or {})
        merged.update(extra)
        object.__setattr__(self, "_fields", MappingProxyType(merged))

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(f"Prediction has no field '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Prediction is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Prediction is immutable")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Prediction):
            return dict(self._fields) == dict(other._fields)
        if isinstance(other, Mapping):
            return dict(self._fields) == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def with_fields(self, **extra: Any) -> "Prediction":
        """Return a new prediction with ``extra`` fields added or overwritten."""
        return Prediction(self._fields, **extra)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._fields)

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._fields.items())
        return f"Prediction({body})"


class Example(BaseModel):
    """Input/output pair used for few-shot conditioning.

    ``input_keys`` marks which attributes are inputs; the rest are labels.
    When unset, every attribute is treated as an input.
    """

    model_config = ConfigDict(frozen=True)

    attrs: dict[str, Any] = Field(default_factory=dict, description="Example fields")
    input_keys: tuple[str, ...] | None = Field(
        default=None,
        description="Names of the attributes that are inputs",
    )

    @classmethod
    def of(cls, **attrs: Any) -> "Example":
        return cls(attrs=attrs)

    def with_inputs(self, *keys: str) -> "Example":
        """Return a copy marking ``keys`` as the example's inputs."""
        return self.model_copy(update={"input_keys": tuple(keys)})

    def inputs(self) -> dict[str, Any]:
        if self.input_keys is None:
            return dict(self.attrs)
        return {k: v for k, v in self.attrs.items() if k in self.input_keys}

    def labels(self) -> dict[str, Any]:
        if self.input_keys is None:
            return {}
        return {k: v for k, v in self.attrs.items() if k not in self.input_keys}

    def __getitem__(self, key: str) -> Any:
        return self.attrs[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.attrs.get(key, default)
