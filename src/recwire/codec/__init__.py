"""Record codec for recwire.

This module provides binary (protobuf wire format) and JSON encoding and
decoding of records, driven by record descriptors.
"""

from __future__ import annotations

from .decoder import decode, merge
from .encoder import encode
from .equality import equals
from .json_format import from_json, from_json_string, to_json, to_json_string
from .options import JsonReadOptions, JsonWriteOptions, ReadOptions, WriteOptions
from .schema import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
)
from .wire import UnknownField, WireType

__all__ = [
    "encode",
    "decode",
    "merge",
    "equals",
    "to_json",
    "to_json_string",
    "from_json",
    "from_json_string",
    "ReadOptions",
    "WriteOptions",
    "JsonReadOptions",
    "JsonWriteOptions",
    "EnumDescriptor",
    "EnumValue",
    "FieldDescriptor",
    "FieldKind",
    "RecordDescriptor",
    "ScalarType",
    "UnknownField",
    "WireType",
]
