"""recwire: Descriptor-driven record codec

A Python library for round-tripping typed records between Pydantic models,
the protobuf binary wire format and protobuf-style JSON. Record types are
described by plain descriptors and registered once at startup; the codec is
generic over them.

Key Features:
- Pydantic-based record instances generated from descriptors
- Protobuf-compatible binary encoding with unknown-field retention
- Protobuf-style JSON with enum names and 64-bit integers as strings
- Structural equality that ignores unknown fields

Quick Start:
    >>> from recwire import FieldDescriptor, FieldKind, RecordDescriptor, ScalarType
    >>> from recwire import build_registry, decode, encode
    >>>
    >>> REPORT = RecordDescriptor(
    ...     "example.Report",
    ...     (
    ...         FieldDescriptor(1, "name", FieldKind.SCALAR, scalar=ScalarType.STRING),
    ...         FieldDescriptor(2, "tags", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True),
    ...     ),
    ... )
    >>> registry = build_registry(records=[REPORT])
    >>> Report = registry.record_class("example.Report")
    >>>
    >>> msg = Report(name="a", tags=[1, 2, 3])
    >>> data = encode(msg)
    >>> decode(Report, data) == msg
    True
"""

from __future__ import annotations

from .codec import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    JsonReadOptions,
    JsonWriteOptions,
    ReadOptions,
    RecordDescriptor,
    ScalarType,
    UnknownField,
    WireType,
    WriteOptions,
    decode,
    encode,
    equals,
    from_json,
    from_json_string,
    merge,
    to_json,
    to_json_string,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    RecwireError,
    SchemaError,
    SchemaMismatchError,
)
from .logging import configure_logging, get_logger
from .models import BoundedInt, Record
from .registry import TypeRegistry, build_registry
from .render import to_proto_schema
from .schemas import build_default_registry
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Record",
    "encode",
    "decode",
    "merge",
    "equals",
    "to_json",
    "to_json_string",
    "from_json",
    "from_json_string",
    # Descriptors
    "EnumDescriptor",
    "EnumValue",
    "FieldDescriptor",
    "FieldKind",
    "RecordDescriptor",
    "ScalarType",
    "UnknownField",
    "WireType",
    # Registry
    "TypeRegistry",
    "build_registry",
    "build_default_registry",
    # Options
    "ReadOptions",
    "WriteOptions",
    "JsonReadOptions",
    "JsonWriteOptions",
    # Field helpers
    "BoundedInt",
    # Exceptions
    "RecwireError",
    "SchemaError",
    "SchemaMismatchError",
    "EncodeError",
    "DecodeError",
    # Logging
    "configure_logging",
    "get_logger",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Schema text
    "to_proto_schema",
    # Version
    "__version__",
]
