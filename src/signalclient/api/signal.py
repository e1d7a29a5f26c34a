"""Signal data model.

Signals are the atomic telemetry unit. A trace groups signals under a shared
root whose fields act as common context, and a batch sends an ordered mix of
signals and traces in one request.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    SerializerFunctionWrapHandler,
    Tag,
    TypeAdapter,
    field_validator,
    model_serializer,
    model_validator,
)

from signalclient.errors import BatchMembershipError


class SignalType(str, Enum):
    POINT = "point"
    METRIC = "metric"


class SignalPayload(BaseModel):
    """Application payload together with the schema naming its shape."""

    model_config = ConfigDict(frozen=True)

    payload_schema: str
    payload: Any = None


class StackFrame(BaseModel):
    """A single stack frame.

    Only a minimal shape is known; extra keys are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    function: str | None = None
    file: str | None = None
    line: int | None = None

    @model_serializer(mode="wrap")
    def _drop_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    stack_trace: list[StackFrame] = Field(default_factory=list)


# Optional signal fields left out of the wire form when unset.
_OMITTED_WHEN_NONE = ("source", "actor", "context", "trigger", "location")


class Signal(BaseModel):
    """A telemetry signal.

    The payload and its schema are stored as ``signal_payload`` but travel
    flattened on the wire as ``payload_schema`` and ``payload``. Keyword
    construction accepts either form.

    ``Signal`` is sealed: only ``Trace`` may derive from it, which keeps the
    set of batchable types closed.
    """

    model_config = ConfigDict(frozen=True)

    signal_payload: SignalPayload | None = None
    type: str = ""
    signal_name: str = ""
    source: str | None = None
    actor: Any = None
    context: Any = None
    trigger: Any = None
    location: Location | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        if cls.__module__ != __name__:
            raise TypeError(f"{cls.__qualname__}: Signal cannot be subclassed outside {__name__}")
        super().__init_subclass__(**kwargs)

    @model_validator(mode="before")
    @classmethod
    def _nest_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict) or ("payload_schema" not in data and "payload" not in data):
            return data
        data = dict(data)
        if "signal_payload" in data:
            raise ValueError("give either signal_payload or payload_schema/payload, not both")
        data["signal_payload"] = {
            "payload_schema": data.pop("payload_schema", None),
            "payload": data.pop("payload", None),
        }
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _unwrap_type(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @model_serializer(mode="wrap")
    def _flatten_payload(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        payload = data.pop("signal_payload", None)
        for key in _OMITTED_WHEN_NONE:
            if data.get(key) is None:
                data.pop(key, None)
        if payload is None:
            return data
        return {**payload, **data}

    @property
    def payload_schema(self) -> str | None:
        return self.signal_payload.payload_schema if self.signal_payload else None

    @property
    def payload(self) -> Any:
        return self.signal_payload.payload if self.signal_payload else None


class Trace(Signal):
    """A set of signals sharing the root fields as common context.

    The root is serialized inline next to ``data`` and is never merged into
    the child signals.
    """

    data: list[Signal] = Field(default_factory=list)


def _element_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "trace" if "data" in value else "signal"
    return "trace" if isinstance(value, Trace) else "signal"


BatchElement = Annotated[
    Union[Annotated[Trace, Tag("trace")], Annotated[Signal, Tag("signal")]],
    Discriminator(_element_kind),
]

_batch_adapter: TypeAdapter[list[BatchElement]] = TypeAdapter(list[BatchElement])


class Batch(Sequence[Signal]):
    """Ordered, immutable sequence of signals and traces.

    Anything else is rejected with ``BatchMembershipError`` at construction.
    """

    __slots__ = ("_elements",)

    def __init__(self, elements: Iterable[Signal] = ()) -> None:
        items = tuple(elements)
        for index, item in enumerate(items):
            if not isinstance(item, Signal):
                raise BatchMembershipError(index, item)
        self._elements = items

    def __getitem__(self, index: int | slice):
        if isinstance(index, slice):
            return Batch(self._elements[index])
        return self._elements[index]

    def __len__(self) -> int:
        return len(self._elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Batch):
            return NotImplemented
        return self._elements == other._elements

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Batch({list(self._elements)!r})"

    def to_wire(self) -> list[dict[str, Any]]:
        return _batch_adapter.dump_python(list(self._elements), mode="json")

    @classmethod
    def from_wire(cls, data: Any) -> Batch:
        return cls(_batch_adapter.validate_python(data))

    @classmethod
    def from_json(cls, raw: str | bytes) -> Batch:
        return cls(_batch_adapter.validate_json(raw))
