"""Binary decoder for records.

This module provides the decode() function that converts wire-format bytes
back into a record instance, and merge() which decodes bytes on top of an
existing record.

Decoding first collects field values into plain partial trees and builds
record instances only after the whole buffer has been parsed, so a failed
decode never exposes a partially populated record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar

from pydantic import ValidationError

from ..exceptions import DecodeError, SchemaMismatchError
from ..logging import get_logger
from ..models.base import Record
from .options import ReadOptions
from .schema import FieldDescriptor, FieldKind, RecordDescriptor, ScalarType
from .wire import SCALAR_WIRE_TYPES, UnknownField, WireReader, WireType

if TYPE_CHECKING:
    from ..registry import TypeRegistry

R = TypeVar("R", bound=Record)

logger = get_logger(__name__)


class _Partial:
    """Field values of a record that is still being decoded."""

    __slots__ = ("descriptor", "values", "unknown")

    def __init__(self, descriptor: RecordDescriptor) -> None:
        self.descriptor = descriptor
        self.values: dict[str, Any] = {}
        self.unknown: list[UnknownField] = []


def decode(record_class: Type[R], data: bytes, options: Optional[ReadOptions] = None) -> R:
    """Decode binary wire-format data to a record.

    Known fields are parsed per their descriptor. Singular fields are last
    writer wins, repeated fields accumulate (packed or not), and repeated
    occurrences of a singular message field are merged. Unknown field numbers
    are skipped and, with ``read_unknown_fields``, retained on the record.

    Args:
        record_class: Record class generated by a registry
        data: Binary data to decode
        options: Read options (defaults when None)

    Returns:
        New, independent record instance

    Raises:
        SchemaMismatchError: If record_class is not a generated record class
        DecodeError: If data is truncated, malformed, or inconsistent with the schema

    Example:
        ```python
        HiveQuery = registry.record_class("flyteidl.plugins.HiveQuery")
        query = decode(HiveQuery, b"\\n\\x08SELECT 1\\x10\\x1e")
        assert query.timeout_sec == 30
        ```
    """
    descriptor = _descriptor_of(record_class)
    options = options or ReadOptions()
    return _run(_Partial(descriptor), data, record_class.REGISTRY, options)  # type: ignore[return-value]


def merge(target: R, data: bytes, options: Optional[ReadOptions] = None) -> R:
    """Decode data on top of an existing record.

    Returns a new record; ``target`` itself is left untouched. Scalars present
    in data replace target's values, repeated fields are appended to, and
    message fields are merged recursively.

    Raises:
        SchemaMismatchError: If target is not a record instance
        DecodeError: If data cannot be decoded
    """
    if not isinstance(target, Record):
        raise SchemaMismatchError(f"Expected a record instance, got {type(target).__name__}")
    options = options or ReadOptions()
    return _run(_seed(target), data, target.REGISTRY, options)  # type: ignore[return-value]


def _descriptor_of(record_class: Any) -> RecordDescriptor:
    if (
        not isinstance(record_class, type)
        or not issubclass(record_class, Record)
        or "DESCRIPTOR" not in vars(record_class)
    ):
        raise SchemaMismatchError(f"{record_class!r} is not a generated record class")
    return record_class.DESCRIPTOR


def _run(partial: _Partial, data: bytes, registry: TypeRegistry, options: ReadOptions) -> Record:
    type_name = partial.descriptor.type_name
    try:
        _decode_into(partial, data, registry, options, 1, type_name)
        return _materialize(partial, registry, type_name)
    except DecodeError as e:
        logger.debug("decode_failed", record=type_name, path=e.path, error=str(e))
        raise


def _seed(record: Record) -> _Partial:
    partial = _Partial(record.DESCRIPTOR)
    for field in record.DESCRIPTOR.fields:
        value = getattr(record, field.attr_name)
        if field.kind is FieldKind.MESSAGE:
            if field.repeated:
                partial.values[field.attr_name] = [_seed(element) for element in value]
            elif value is not None:
                partial.values[field.attr_name] = _seed(value)
        elif field.repeated:
            partial.values[field.attr_name] = list(value)
        else:
            partial.values[field.attr_name] = value
    partial.unknown.extend(record.unknown_fields)
    return partial


def _decode_into(
    partial: _Partial,
    data: bytes,
    registry: TypeRegistry,
    options: ReadOptions,
    depth: int,
    path: str,
) -> None:
    if depth > options.max_depth:
        raise DecodeError(f"{path}: nesting exceeds max_depth={options.max_depth}", path=path)

    reader = WireReader(data)
    skipped = 0
    while not reader.at_end():
        start = reader.position()
        try:
            number, wire_type = reader.read_tag()
        except IndexError as e:
            raise DecodeError(f"Truncated data while reading tag in {path}: {e}", path=path) from e
        except ValueError as e:
            raise DecodeError(f"Malformed tag in {path}: {e}", path=path) from e

        field = partial.descriptor.field_by_number(number)
        if field is None:
            try:
                reader.skip(number, wire_type)
            except IndexError as e:
                raise DecodeError(
                    f"Truncated data while skipping unknown field {number} in {path}: {e}",
                    path=path,
                ) from e
            except ValueError as e:
                raise DecodeError(f"Malformed unknown field {number} in {path}: {e}", path=path) from e
            skipped += 1
            if options.read_unknown_fields:
                partial.unknown.append(
                    UnknownField(number, wire_type, reader.slice(start, reader.position()))
                )
            continue

        field_path = f"{path}.{field.name}"
        try:
            _read_field(reader, partial, field, wire_type, registry, options, depth, field_path)
        except IndexError as e:
            raise DecodeError(
                f"Truncated data while decoding field {field_path}: {e}", path=field_path
            ) from e
        except ValueError as e:
            raise DecodeError(f"Error decoding field {field_path}: {e}", path=field_path) from e

    if skipped:
        logger.debug("unknown_fields_skipped", record=partial.descriptor.type_name, count=skipped)


def _read_field(
    reader: WireReader,
    partial: _Partial,
    field: FieldDescriptor,
    wire_type: WireType,
    registry: TypeRegistry,
    options: ReadOptions,
    depth: int,
    path: str,
) -> None:
    """Read one entry of a known field into the partial record.

    Raises:
        IndexError: If data is truncated
        ValueError: If data is malformed or the wire type does not fit the field
    """
    if field.kind is FieldKind.MESSAGE:
        _expect_wire_type(field, wire_type, WireType.LENGTH_DELIMITED)
        payload = reader.read_length_delimited()
        assert field.type_name is not None
        nested_descriptor = registry.record(field.type_name)
        if field.repeated:
            child = _Partial(nested_descriptor)
            partial.values.setdefault(field.attr_name, []).append(child)
        else:
            child = partial.values.get(field.attr_name)
            if child is None:
                child = _Partial(nested_descriptor)
                partial.values[field.attr_name] = child
        _decode_into(child, payload, registry, options, depth + 1, path)
        return

    # Enums share the int32 varint form
    scalar = ScalarType.INT32 if field.kind is FieldKind.ENUM else field.scalar
    assert scalar is not None

    if field.repeated:
        values = partial.values.setdefault(field.attr_name, [])
        if wire_type is WireType.LENGTH_DELIMITED and field.packable:
            packed = WireReader(reader.read_length_delimited())
            while not packed.at_end():
                values.append(packed.read_scalar(scalar))
            return
        _expect_wire_type(field, wire_type, SCALAR_WIRE_TYPES[scalar])
        values.append(reader.read_scalar(scalar))
        return

    _expect_wire_type(field, wire_type, SCALAR_WIRE_TYPES[scalar])
    partial.values[field.attr_name] = reader.read_scalar(scalar)


def _expect_wire_type(field: FieldDescriptor, actual: WireType, expected: WireType) -> None:
    if actual is not expected:
        raise ValueError(
            f"wire type {actual.name} does not match declared {field.kind.value} field "
            f"(expected {expected.name})"
        )


def _materialize(partial: _Partial, registry: TypeRegistry, path: str) -> Record:
    values: dict[str, Any] = {}
    for attr_name, value in partial.values.items():
        if isinstance(value, _Partial):
            values[attr_name] = _materialize(value, registry, f"{path}.{attr_name}")
        elif isinstance(value, list):
            values[attr_name] = [
                _materialize(element, registry, f"{path}.{attr_name}")
                if isinstance(element, _Partial)
                else element
                for element in value
            ]
        else:
            values[attr_name] = value

    record_class = registry.record_class(partial.descriptor.type_name)
    try:
        record = record_class(**values)
    except ValidationError as e:
        raise DecodeError(
            f"Failed to construct {partial.descriptor.type_name}: {e}", path=path
        ) from e
    record._unknown_fields = list(partial.unknown)
    return record
