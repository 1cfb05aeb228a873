"""JSON encoding and decoding of records.

Records map onto JSON objects keyed by field name. Enum values are rendered
by symbolic name, 64-bit integers as decimal strings and bytes as standard
base64. Decoding is lenient in the usual protobuf-JSON ways: it accepts JSON
names as well as declared names, numbers or strings for integers, names or
numbers for enums, and treats ``null`` the same as an absent key.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar

from pydantic import ValidationError

from ..exceptions import DecodeError, SchemaMismatchError
from ..logging import get_logger
from ..models.base import Record
from .options import JsonReadOptions, JsonWriteOptions
from .schema import (
    ENUM_RANGE,
    FLOAT_TYPES,
    INT64_TYPES,
    INT_RANGES,
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
)

if TYPE_CHECKING:
    from ..registry import TypeRegistry

R = TypeVar("R", bound=Record)

logger = get_logger(__name__)


class _SkipField(Exception):
    """Internal signal: leave the field at its default."""


# ============================================================================
# Encoding
# ============================================================================


def to_json(message: Record, options: Optional[JsonWriteOptions] = None) -> dict[str, Any]:
    """Convert a record to a JSON-compatible dict.

    Args:
        message: Record instance
        options: JSON write options (defaults when None)

    Returns:
        Dict of JSON-compatible values

    Raises:
        SchemaMismatchError: If message is not a record

    Example:
        ```python
        QuboleHiveJob = registry.record_class("flyteidl.plugins.QuboleHiveJob")
        job = QuboleHiveJob(cluster_label="etl", tags=["nightly"])
        to_json(job)
        # {'cluster_label': 'etl', 'tags': ['nightly']}
        ```
    """
    if not isinstance(message, Record):
        raise SchemaMismatchError(f"Expected a record instance, got {type(message).__name__}")
    return _record_to_json(message, options or JsonWriteOptions())


def to_json_string(message: Record, options: Optional[JsonWriteOptions] = None) -> str:
    options = options or JsonWriteOptions()
    return json.dumps(to_json(message, options), indent=options.indent, ensure_ascii=False)


def _record_to_json(message: Record, options: JsonWriteOptions) -> dict[str, Any]:
    registry = message.REGISTRY
    result: dict[str, Any] = {}
    for field in message.DESCRIPTOR.fields:
        value = getattr(message, field.attr_name)
        key = field.json_name if options.use_json_name else field.name

        if field.repeated:
            if value or options.emit_default_values:
                result[key] = [_value_to_json(registry, field, element, options) for element in value]
        elif field.kind is FieldKind.MESSAGE:
            if value is not None:
                result[key] = _record_to_json(value, options)
        elif options.emit_default_values or value != registry.default_value(field) or _is_negative_zero(value):
            result[key] = _value_to_json(registry, field, value, options)
    return result


def _is_negative_zero(value: Any) -> bool:
    return isinstance(value, float) and value == 0.0 and math.copysign(1.0, value) < 0


def _value_to_json(
    registry: TypeRegistry, field: FieldDescriptor, value: Any, options: JsonWriteOptions
) -> Any:
    if field.kind is FieldKind.MESSAGE:
        return _record_to_json(value, options)

    if field.kind is FieldKind.ENUM:
        if options.enum_as_integer:
            return value
        assert field.type_name is not None
        name = registry.enum(field.type_name).name_for(value)
        return name if name is not None else value

    assert field.scalar is not None
    if field.scalar is ScalarType.BYTES:
        return base64.b64encode(value).decode("ascii")
    if field.scalar in INT64_TYPES:
        return str(value)
    if field.scalar in FLOAT_TYPES:
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return value


# ============================================================================
# Decoding
# ============================================================================


def from_json(record_class: Type[R], value: Any, options: Optional[JsonReadOptions] = None) -> R:
    """Build a record from a JSON-compatible value.

    Args:
        record_class: Record class generated by a registry
        value: Parsed JSON value (must be an object)
        options: JSON read options (defaults when None)

    Returns:
        New record instance

    Raises:
        SchemaMismatchError: If record_class is not a generated record class
        DecodeError: If a value's shape does not match its field, naming the field path
    """
    if (
        not isinstance(record_class, type)
        or not issubclass(record_class, Record)
        or "DESCRIPTOR" not in vars(record_class)
    ):
        raise SchemaMismatchError(f"{record_class!r} is not a generated record class")
    options = options or JsonReadOptions()
    descriptor = record_class.DESCRIPTOR
    return _record_from_json(  # type: ignore[return-value]
        record_class.REGISTRY, descriptor, value, options, 1, descriptor.type_name
    )


def from_json_string(
    record_class: Type[R], text: str, options: Optional[JsonReadOptions] = None
) -> R:
    """Parse JSON text and build a record from it.

    Raises:
        DecodeError: If text is not valid JSON or does not match the schema
    """
    try:
        value = json.loads(text)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    return from_json(record_class, value, options)


def _record_from_json(
    registry: TypeRegistry,
    descriptor: RecordDescriptor,
    value: Any,
    options: JsonReadOptions,
    depth: int,
    path: str,
) -> Record:
    if depth > options.max_depth:
        raise DecodeError(f"{path}: nesting exceeds max_depth={options.max_depth}", path=path)
    if not isinstance(value, dict):
        raise DecodeError(
            f"{path}: expected object for {descriptor.type_name}, got {_json_type(value)}", path=path
        )

    values: dict[str, Any] = {}
    for key, raw in value.items():
        field = descriptor.field_by_name(key) if isinstance(key, str) else None
        if field is None:
            if not options.ignore_unknown_fields:
                raise DecodeError(
                    f"{path}: unknown field {key!r} for {descriptor.type_name}", path=path
                )
            logger.debug("unknown_json_key_ignored", record=descriptor.type_name, key=key)
            continue
        if raw is None:
            continue

        field_path = f"{path}.{field.name}"
        try:
            if field.repeated:
                if not isinstance(raw, list):
                    raise DecodeError(
                        f"{field_path}: expected array, got {_json_type(raw)}", path=field_path
                    )
                elements = []
                for index, element in enumerate(raw):
                    try:
                        elements.append(
                            _value_from_json(
                                registry, field, element, options, depth, f"{field_path}[{index}]"
                            )
                        )
                    except _SkipField:
                        continue
                values[field.attr_name] = elements
            else:
                values[field.attr_name] = _value_from_json(
                    registry, field, raw, options, depth, field_path
                )
        except _SkipField:
            continue

    record_class = registry.record_class(descriptor.type_name)
    try:
        return record_class(**values)
    except ValidationError as e:
        raise DecodeError(f"{path}: invalid value for {descriptor.type_name}: {e}", path=path) from e


def _value_from_json(
    registry: TypeRegistry,
    field: FieldDescriptor,
    raw: Any,
    options: JsonReadOptions,
    depth: int,
    path: str,
) -> Any:
    """Convert one JSON value for a field.

    Raises:
        DecodeError: If the value does not fit the field kind
        _SkipField: If the value should be ignored (unknown enum name)
    """
    if raw is None:
        raise DecodeError(f"{path}: null is not allowed here", path=path)

    if field.kind is FieldKind.MESSAGE:
        assert field.type_name is not None
        return _record_from_json(
            registry, registry.record(field.type_name), raw, options, depth + 1, path
        )

    if field.kind is FieldKind.ENUM:
        assert field.type_name is not None
        return _enum_from_json(registry, field.type_name, raw, options, path)

    assert field.scalar is not None
    return _scalar_from_json(field.scalar, raw, path)


def _enum_from_json(
    registry: TypeRegistry, type_name: str, raw: Any, options: JsonReadOptions, path: str
) -> int:
    if isinstance(raw, str):
        number = registry.enum(type_name).number_for(raw)
        if number is None:
            if options.ignore_unknown_fields:
                raise _SkipField()
            raise DecodeError(f"{path}: {raw!r} is not a value of {type_name}", path=path)
        return number
    if isinstance(raw, int) and not isinstance(raw, bool):
        low, high = ENUM_RANGE
        if not low <= raw <= high:
            raise DecodeError(f"{path}: enum value {raw} is not an int32", path=path)
        return raw
    raise DecodeError(f"{path}: expected enum name or number, got {_json_type(raw)}", path=path)


def _scalar_from_json(scalar: ScalarType, raw: Any, path: str) -> Any:
    if scalar is ScalarType.STRING:
        if not isinstance(raw, str):
            raise DecodeError(f"{path}: expected string, got {_json_type(raw)}", path=path)
        return raw

    if scalar is ScalarType.BOOL:
        if not isinstance(raw, bool):
            raise DecodeError(f"{path}: expected boolean, got {_json_type(raw)}", path=path)
        return raw

    if scalar is ScalarType.BYTES:
        if not isinstance(raw, str):
            raise DecodeError(f"{path}: expected base64 string, got {_json_type(raw)}", path=path)
        return _decode_base64(raw, path)

    if scalar in FLOAT_TYPES:
        return _float_from_json(raw, path)

    return _int_from_json(scalar, raw, path)


def _decode_base64(text: str, path: str) -> bytes:
    # Accept URL-safe alphabet and missing padding
    normalised = text.replace("-", "+").replace("_", "/")
    normalised += "=" * (-len(normalised) % 4)
    try:
        return base64.b64decode(normalised, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"{path}: invalid base64: {e}", path=path) from e


def _float_from_json(raw: Any, path: str) -> float:
    if isinstance(raw, bool):
        raise DecodeError(f"{path}: expected number, got boolean", path=path)
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError as e:
            raise DecodeError(f"{path}: number out of range", path=path) from e
    if isinstance(raw, str):
        special = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}
        if raw in special:
            return special[raw]
        try:
            return float(raw)
        except ValueError as e:
            raise DecodeError(f"{path}: invalid number {raw!r}", path=path) from e
    raise DecodeError(f"{path}: expected number, got {_json_type(raw)}", path=path)


def _int_from_json(scalar: ScalarType, raw: Any, path: str) -> int:
    if isinstance(raw, bool):
        raise DecodeError(f"{path}: expected integer, got boolean", path=path)

    number: int
    if isinstance(raw, int):
        number = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise DecodeError(f"{path}: expected integer, got {raw}", path=path)
        number = int(raw)
    elif isinstance(raw, str):
        try:
            number = int(raw.strip())
        except ValueError:
            try:
                as_float = float(raw)
            except ValueError as e:
                raise DecodeError(f"{path}: invalid integer {raw!r}", path=path) from e
            if not as_float.is_integer():
                raise DecodeError(f"{path}: invalid integer {raw!r}", path=path)
            number = int(as_float)
    else:
        raise DecodeError(f"{path}: expected integer, got {_json_type(raw)}", path=path)

    low, high = INT_RANGES[scalar]
    if not low <= number <= high:
        raise DecodeError(
            f"{path}: value {number} out of range for {scalar.name.lower()}", path=path
        )
    return number


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
