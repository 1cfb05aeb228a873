"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from recwire import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    Record,
    RecordDescriptor,
    ScalarType,
    TypeRegistry,
    build_default_registry,
    build_registry,
)

STATUS = EnumDescriptor(
    "test.Status",
    (EnumValue(0, "UNKNOWN"), EnumValue(1, "ACTIVE"), EnumValue(2, "DONE")),
)

CHILD = RecordDescriptor(
    "test.Child",
    (
        FieldDescriptor(1, "label", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "weight", FieldKind.SCALAR, scalar=ScalarType.INT32),
        FieldDescriptor(3, "note", FieldKind.SCALAR, scalar=ScalarType.STRING),
    ),
)

# One field per scalar subtype plus every repeated/nested shape
SAMPLE = RecordDescriptor(
    "test.Sample",
    (
        FieldDescriptor(1, "name", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "tags", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True),
        FieldDescriptor(3, "count", FieldKind.SCALAR, scalar=ScalarType.INT64),
        FieldDescriptor(4, "ratio", FieldKind.SCALAR, scalar=ScalarType.DOUBLE),
        FieldDescriptor(5, "level", FieldKind.SCALAR, scalar=ScalarType.FLOAT),
        FieldDescriptor(6, "flag", FieldKind.SCALAR, scalar=ScalarType.BOOL),
        FieldDescriptor(7, "blob", FieldKind.SCALAR, scalar=ScalarType.BYTES),
        FieldDescriptor(8, "small", FieldKind.SCALAR, scalar=ScalarType.UINT32),
        FieldDescriptor(9, "big", FieldKind.SCALAR, scalar=ScalarType.UINT64),
        FieldDescriptor(10, "delta", FieldKind.SCALAR, scalar=ScalarType.SINT32),
        FieldDescriptor(11, "delta64", FieldKind.SCALAR, scalar=ScalarType.SINT64),
        FieldDescriptor(12, "checksum", FieldKind.SCALAR, scalar=ScalarType.FIXED32),
        FieldDescriptor(13, "stamp", FieldKind.SCALAR, scalar=ScalarType.FIXED64),
        FieldDescriptor(14, "offset", FieldKind.SCALAR, scalar=ScalarType.SFIXED32),
        FieldDescriptor(15, "offset64", FieldKind.SCALAR, scalar=ScalarType.SFIXED64),
        FieldDescriptor(16, "status", FieldKind.ENUM, type_name="test.Status"),
        FieldDescriptor(17, "child", FieldKind.MESSAGE, type_name="test.Child"),
        FieldDescriptor(18, "children", FieldKind.MESSAGE, type_name="test.Child", repeated=True),
        FieldDescriptor(19, "labels", FieldKind.SCALAR, scalar=ScalarType.STRING, repeated=True),
        FieldDescriptor(20, "statuses", FieldKind.ENUM, type_name="test.Status", repeated=True),
        FieldDescriptor(
            21, "loose", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True, packed=False
        ),
        FieldDescriptor(22, "display_name", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(23, "class", FieldKind.SCALAR, scalar=ScalarType.STRING),
    ),
)

# Self-referencing record for nesting limits
NODE = RecordDescriptor(
    "test.Node",
    (
        FieldDescriptor(1, "value", FieldKind.SCALAR, scalar=ScalarType.INT32),
        FieldDescriptor(2, "next", FieldKind.MESSAGE, type_name="test.Node"),
    ),
)

REPORT = RecordDescriptor(
    "test.Report",
    (
        FieldDescriptor(1, "name", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "tags", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True),
    ),
)

# Newer revision of Report with extra fields, for forward compatibility
REPORT_V2 = RecordDescriptor(
    "test.v2.Report",
    (
        FieldDescriptor(1, "name", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "tags", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True),
        FieldDescriptor(3, "priority", FieldKind.SCALAR, scalar=ScalarType.UINT64),
        FieldDescriptor(4, "score", FieldKind.SCALAR, scalar=ScalarType.DOUBLE),
        FieldDescriptor(5, "source", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(6, "crc", FieldKind.SCALAR, scalar=ScalarType.FIXED32),
    ),
)

DEFAULTS = RecordDescriptor(
    "test.Defaults",
    (
        FieldDescriptor(1, "retries", FieldKind.SCALAR, scalar=ScalarType.INT32, default=3),
        FieldDescriptor(2, "status", FieldKind.ENUM, type_name="test.Status", default=1),
    ),
)


@pytest.fixture(scope="session")
def registry() -> TypeRegistry:
    """Registry holding the test schemas."""
    return build_registry(
        enums=[STATUS],
        records=[CHILD, SAMPLE, NODE, REPORT, REPORT_V2, DEFAULTS],
    )


@pytest.fixture(scope="session")
def flyte_registry() -> TypeRegistry:
    """Registry holding the built-in flyteidl schemas."""
    return build_default_registry()


@pytest.fixture
def Sample(registry: TypeRegistry) -> type[Record]:
    return registry.record_class("test.Sample")


@pytest.fixture
def Child(registry: TypeRegistry) -> type[Record]:
    return registry.record_class("test.Child")


@pytest.fixture
def Report(registry: TypeRegistry) -> type[Record]:
    return registry.record_class("test.Report")


@pytest.fixture
def Node(registry: TypeRegistry) -> type[Record]:
    return registry.record_class("test.Node")


@pytest.fixture
def full_sample_values() -> dict[str, Any]:
    """Non-default value for every field of test.Sample."""
    return {
        "name": "sensor-7",
        "tags": [1, -2, 300],
        "count": -(1 << 40),
        "ratio": 0.125,
        "level": 1.5,
        "flag": True,
        "blob": b"\x00\xffdata",
        "small": 4_000_000_000,
        "big": (1 << 64) - 1,
        "delta": -17,
        "delta64": -(1 << 62),
        "checksum": 0xDEADBEEF,
        "stamp": 1 << 50,
        "offset": -5,
        "offset64": -(1 << 60),
        "status": 2,
        "child": {"label": "first", "weight": 9},
        "children": [{"label": "a"}, {"weight": -1}],
        "labels": ["x", "", "z"],
        "statuses": [1, 0, 2],
        "loose": [7, 8],
        "display_name": "Sensor Seven",
        "class": "probe",
    }
