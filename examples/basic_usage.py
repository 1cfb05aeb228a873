#!/usr/bin/env python3
"""Basic usage example for recwire.

This example demonstrates:
1. Building a registry of record descriptors
2. Encoding to the binary wire format
3. Decoding back to a record
4. Rendering the same record as JSON
5. Calculating message sizes
"""

from __future__ import annotations

from recwire import (
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
    build_registry,
    decode,
    encode,
    encoded_size,
    field_sizes,
    from_json_string,
    to_json_string,
)

# Describe a record type
REPORT = RecordDescriptor(
    "example.Report",
    (
        FieldDescriptor(1, "name", FieldKind.SCALAR, scalar=ScalarType.STRING),
        FieldDescriptor(2, "tags", FieldKind.SCALAR, scalar=ScalarType.INT32, repeated=True),
        FieldDescriptor(3, "reading_count", FieldKind.SCALAR, scalar=ScalarType.UINT64),
    ),
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("recwire Basic Usage Example")
    print("=" * 60)
    print()

    # Build the registry once at startup
    registry = build_registry(records=[REPORT])
    Report = registry.record_class("example.Report")

    print("1. Creating a report record...")
    msg = Report(name="a", tags=[1, 2, 3], reading_count=12_000_000_000)
    print(f"   Name: {msg.name}")
    print(f"   Tags: {msg.tags}")
    print(f"   Readings: {msg.reading_count}")
    print()

    print("2. Analyzing field sizes...")
    for field_name, size in field_sizes(msg).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(msg)} bytes")
    print()

    print("3. Encoding to binary wire format...")
    encoded_data = encode(msg)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex()}")
    print()

    print("4. Decoding from binary...")
    decoded_msg = decode(Report, encoded_data)
    print(f"   Name: {decoded_msg.name}")
    print(f"   Tags: {decoded_msg.tags}")
    print()

    print("5. Rendering as JSON...")
    text = to_json_string(msg)
    print(f"   JSON: {text}")
    print(f"   JSON size: {len(text.encode('utf-8'))} bytes")
    print()

    print("6. Verifying round-trips...")
    if decoded_msg == msg == from_json_string(Report, text):
        print("   ✓ Binary, JSON and in-memory records match.")
    else:
        print("   ✗ Round-trip failed! Records don't match.")
    print()

    print("7. Fresh records encode to nothing...")
    print(f"   encode(Report()) = {encode(Report())!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
