#!/usr/bin/env python3
"""Schema evolution example for recwire.

This example demonstrates:
1. A newer writer adding fields an older reader does not know
2. The older reader relaying the record without losing them
3. Rendering the built-in schemas as .proto text
"""

from __future__ import annotations

from recwire import (
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
    build_default_registry,
    build_registry,
    configure_logging,
    decode,
    encode,
    to_proto_schema,
)

QUERY_V1 = RecordDescriptor(
    "example.v1.HiveQuery",
    (FieldDescriptor(1, "query", FieldKind.SCALAR, scalar=ScalarType.STRING),),
)

QUERY_V2 = RecordDescriptor(
    "example.v2.HiveQuery",
    (
        FieldDescriptor(1, "query", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "timeout_sec", FieldKind.SCALAR, scalar=ScalarType.UINT32),
        FieldDescriptor(3, "retryCount", FieldKind.SCALAR, scalar=ScalarType.UINT32),
    ),
)


def main() -> None:
    """Run the schema evolution example."""
    configure_logging(level="DEBUG")

    registry = build_registry(records=[QUERY_V1, QUERY_V2])
    QueryV1 = registry.record_class("example.v1.HiveQuery")
    QueryV2 = registry.record_class("example.v2.HiveQuery")

    print("1. Newer writer encodes three fields...")
    data = encode(QueryV2(query="SELECT 1", timeout_sec=30, retryCount=2))
    print(f"   Hex: {data.hex()}")
    print()

    print("2. Older reader decodes what it knows...")
    old = decode(QueryV1, data)
    print(f"   Query: {old.query}")
    print(f"   Unknown fields kept: {[field.number for field in old.unknown_fields]}")
    print()

    print("3. Older reader relays the record...")
    relayed = decode(QueryV2, encode(old))
    print(f"   Timeout: {relayed.timeout_sec}s, retries: {relayed.retryCount}")
    print()

    print("4. Built-in plugin schemas as .proto text:")
    print(to_proto_schema(build_default_registry(), "flyteidl.plugins"))


if __name__ == "__main__":
    main()
