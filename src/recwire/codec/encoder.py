"""Binary encoder for records.

This module provides the encode() function that converts a record instance to
the tag/length/value wire format. Fields are emitted in ascending field-number
order so that equal records always produce identical bytes.
"""

from __future__ import annotations

import math
import struct
from typing import Any, Optional

from ..exceptions import EncodeError, SchemaMismatchError
from ..models.base import Record
from .options import WriteOptions
from .schema import FieldDescriptor, FieldKind, RecordDescriptor, ScalarType
from .wire import SCALAR_WIRE_TYPES, WireType, WireWriter


def encode(
    message: Record,
    descriptor: Optional[RecordDescriptor] = None,
    options: Optional[WriteOptions] = None,
) -> bytes:
    """Encode a record to binary wire format.

    Scalar and enum fields holding their default value are omitted, as are
    absent message fields and empty repeated fields. An instance with every
    field at its default therefore encodes to ``b""``.

    Args:
        message: Record instance to encode
        descriptor: Expected descriptor; must name the record's own type
        options: Write options (defaults when None)

    Returns:
        Encoded bytes

    Raises:
        SchemaMismatchError: If message is not a record or descriptor names another type
        EncodeError: If a field value is invalid or nesting exceeds max_depth

    Example:
        ```python
        HiveQuery = registry.record_class("flyteidl.plugins.HiveQuery")
        data = encode(HiveQuery(query="SELECT 1", timeout_sec=30))
        # b'\\n\\x08SELECT 1\\x10\\x1e'
        ```
    """
    if not isinstance(message, Record):
        raise SchemaMismatchError(f"Expected a record instance, got {type(message).__name__}")
    if descriptor is not None and descriptor.type_name != message.DESCRIPTOR.type_name:
        raise SchemaMismatchError(
            f"Descriptor {descriptor.type_name} does not match record type "
            f"{message.DESCRIPTOR.type_name}"
        )

    options = options or WriteOptions()
    writer = WireWriter()
    _encode_record(writer, message, options, depth=1, path=message.DESCRIPTOR.type_name)
    return writer.to_bytes()


def encode_field(message: Record, field: FieldDescriptor) -> bytes:
    """Encode the entries of a single field of a record.

    Returns ``b""`` when the field would be omitted.
    """
    writer = WireWriter()
    _encode_field(
        writer,
        message,
        field,
        getattr(message, field.attr_name),
        WriteOptions(),
        depth=1,
        path=f"{message.DESCRIPTOR.type_name}.{field.name}",
    )
    return writer.to_bytes()


def _encode_record(
    writer: WireWriter, message: Record, options: WriteOptions, depth: int, path: str
) -> None:
    if depth > options.max_depth:
        raise EncodeError(f"{path}: nesting exceeds max_depth={options.max_depth}")

    for field in message.DESCRIPTOR.fields:
        value = getattr(message, field.attr_name)
        _encode_field(writer, message, field, value, options, depth, f"{path}.{field.name}")

    if options.write_unknown_fields:
        for unknown in message.unknown_fields:
            writer.write_raw(unknown.data)


def _is_default(message: Record, field: FieldDescriptor, value: Any) -> bool:
    # Negative zero is not the default 0.0
    if isinstance(value, float) and value == 0.0 and math.copysign(1.0, value) < 0:
        return False
    return bool(value == message.REGISTRY.default_value(field))


def _encode_field(
    writer: WireWriter,
    message: Record,
    field: FieldDescriptor,
    value: Any,
    options: WriteOptions,
    depth: int,
    path: str,
) -> None:
    """Encode one field's entries.

    Raises:
        EncodeError: If value is invalid for the field
    """
    if field.repeated:
        if not value:
            return
        if field.is_packed:
            _encode_packed(writer, field, value, path)
            return
        for index, element in enumerate(value):
            _encode_single(writer, field, element, options, depth, f"{path}[{index}]")
        return

    if field.kind is FieldKind.MESSAGE:
        if value is None:
            return
    elif _is_default(message, field, value):
        return

    _encode_single(writer, field, value, options, depth, path)


def _encode_single(
    writer: WireWriter,
    field: FieldDescriptor,
    value: Any,
    options: WriteOptions,
    depth: int,
    path: str,
) -> None:
    if field.kind is FieldKind.MESSAGE:
        if not isinstance(value, Record) or value.DESCRIPTOR.type_name != field.type_name:
            raise EncodeError(f"{path}: expected {field.type_name}, got {type(value).__name__}")
        nested = WireWriter()
        _encode_record(nested, value, options, depth + 1, path)
        writer.write_tag(field.number, WireType.LENGTH_DELIMITED)
        writer.write_length_delimited(nested.to_bytes())
        return

    if field.kind is FieldKind.ENUM:
        writer.write_tag(field.number, WireType.VARINT)
        _write_value(writer, ScalarType.INT32, value, path)
        return

    assert field.scalar is not None
    writer.write_tag(field.number, SCALAR_WIRE_TYPES[field.scalar])
    _write_value(writer, field.scalar, value, path)


def _encode_packed(writer: WireWriter, field: FieldDescriptor, values: Any, path: str) -> None:
    payload = WireWriter()
    # Enums share the int32 varint form
    scalar = ScalarType.INT32 if field.kind is FieldKind.ENUM else field.scalar
    assert scalar is not None
    for index, element in enumerate(values):
        _write_value(payload, scalar, element, f"{path}[{index}]")
    writer.write_tag(field.number, WireType.LENGTH_DELIMITED)
    writer.write_length_delimited(payload.to_bytes())


def _write_value(writer: WireWriter, scalar: ScalarType, value: Any, path: str) -> None:
    try:
        writer.write_scalar(scalar, value)
    except (TypeError, ValueError, OverflowError, struct.error) as err:
        raise EncodeError(f"{path}: {err}") from err
