"""Qubole Hive job records of ``flyteidl.plugins``."""

from __future__ import annotations

from ..codec.schema import FieldDescriptor, FieldKind, RecordDescriptor, ScalarType

PACKAGE = "flyteidl.plugins"

HIVE_QUERY = RecordDescriptor(
    f"{PACKAGE}.HiveQuery",
    (
        FieldDescriptor(1, "query", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "timeout_sec", FieldKind.SCALAR, scalar=ScalarType.UINT32),
        FieldDescriptor(3, "retryCount", FieldKind.SCALAR, scalar=ScalarType.UINT32),
    ),
)

# Field number 1 was never assigned
HIVE_QUERY_COLLECTION = RecordDescriptor(
    f"{PACKAGE}.HiveQueryCollection",
    (
        FieldDescriptor(
            2, "queries", FieldKind.MESSAGE, type_name=HIVE_QUERY.type_name, repeated=True
        ),
    ),
)

QUBOLE_HIVE_JOB = RecordDescriptor(
    f"{PACKAGE}.QuboleHiveJob",
    (
        FieldDescriptor(1, "cluster_label", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(
            2, "query_collection", FieldKind.MESSAGE, type_name=HIVE_QUERY_COLLECTION.type_name
        ),
        FieldDescriptor(
            3, "tags", FieldKind.SCALAR, scalar=ScalarType.STRING, repeated=True
        ),
        FieldDescriptor(4, "query", FieldKind.MESSAGE, type_name=HIVE_QUERY.type_name),
    ),
)

ENUMS = ()

RECORDS = (HIVE_QUERY, HIVE_QUERY_COLLECTION, QUBOLE_HIVE_JOB)
