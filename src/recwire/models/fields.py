"""Field annotations for generated record models.

This module maps field descriptors onto Pydantic annotations so that record
instances validate their values on construction and on assignment.
"""

from __future__ import annotations

import math
import struct
from typing import TYPE_CHECKING, Annotated, Any, Callable, List, Optional, cast

from pydantic import AfterValidator, BeforeValidator, Field, PlainValidator
from pydantic.fields import FieldInfo

from ..codec.schema import ENUM_RANGE, INT_RANGES, FieldDescriptor, FieldKind, ScalarType

if TYPE_CHECKING:
    from ..registry import TypeRegistry


def BoundedInt(*, ge: int, le: int, **kwargs: Any) -> FieldInfo:
    """Create an integer field constrained to [ge, le].

    Args:
        ge: Minimum value (inclusive)
        le: Maximum value (inclusive)
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo suitable for use in Annotated metadata.
    """
    return cast(FieldInfo, Field(ge=ge, le=le, **kwargs))


def round_float32(value: float) -> float:
    """Round a float to the nearest IEEE 754 single-precision value."""
    try:
        return float(struct.unpack("<f", struct.pack("<f", value))[0])
    except OverflowError:
        return math.copysign(math.inf, value)


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("expected an integer, got bool")
    return value


def scalar_annotation(scalar: ScalarType) -> Any:
    """Return the Pydantic annotation for a scalar subtype."""
    if scalar is ScalarType.STRING:
        return str
    if scalar is ScalarType.BYTES:
        return bytes
    if scalar is ScalarType.BOOL:
        return bool
    if scalar is ScalarType.DOUBLE:
        return float
    if scalar is ScalarType.FLOAT:
        return Annotated[float, AfterValidator(round_float32)]

    low, high = INT_RANGES[scalar]
    return Annotated[int, BoundedInt(ge=low, le=high)]


def enum_annotation() -> Any:
    # Enums are open: undeclared numbers are kept as plain int32 values
    low, high = ENUM_RANGE
    return Annotated[int, BoundedInt(ge=low, le=high)]


def record_reference(type_name: str, registry: TypeRegistry) -> Callable[[Any], Any]:
    """Build a validator accepting records of exactly ``type_name``.

    Mappings are turned into records through the registered class. The class
    is resolved on each call, so mutually recursive records work.
    """
    from .base import Record

    def validate(value: Any) -> Any:
        if isinstance(value, Record):
            if value.descriptor.type_name != type_name:
                raise ValueError(f"expected {type_name}, got {value.descriptor.type_name}")
            return value
        if isinstance(value, dict):
            return registry.record_class(type_name)(**value)
        raise ValueError(f"expected {type_name} or a mapping, got {type(value).__name__}")

    return validate


def field_definition(field: FieldDescriptor, registry: TypeRegistry) -> tuple[Any, FieldInfo]:
    """Return the (annotation, FieldInfo) pair used to generate a record model.

    Args:
        field: Descriptor of the field
        registry: Registry resolving enum defaults and message references

    Returns:
        Tuple suitable for pydantic.create_model()
    """
    element: Any
    if field.kind is FieldKind.MESSAGE:
        assert field.type_name is not None
        element = Annotated[Any, PlainValidator(record_reference(field.type_name, registry))]
    elif field.kind is FieldKind.ENUM:
        element = Annotated[enum_annotation(), BeforeValidator(_reject_bool)]
    else:
        assert field.scalar is not None
        element = scalar_annotation(field.scalar)
        if field.scalar in INT_RANGES:
            element = Annotated[element, BeforeValidator(_reject_bool)]

    if field.repeated:
        return List[element], Field(default_factory=list, alias=field.name)  # type: ignore[valid-type]
    if field.kind is FieldKind.MESSAGE:
        return Optional[element], Field(default=None, alias=field.name)
    return element, Field(default=registry.default_value(field), alias=field.name)
