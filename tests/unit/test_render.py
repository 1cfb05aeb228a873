"""Unit tests for .proto schema rendering."""

from __future__ import annotations

import pytest

from recwire import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
    SchemaError,
    TypeRegistry,
    build_registry,
    to_proto_schema,
)


class TestToProtoSchema:
    """Test proto3 text generation."""

    def test_single_record(self, flyte_registry: TypeRegistry) -> None:
        """Test one record with scalar fields."""
        text = to_proto_schema(flyte_registry, "flyteidl.plugins", ["flyteidl.plugins.HiveQuery"])
        assert text == (
            'syntax = "proto3";\n'
            "package flyteidl.plugins;\n"
            "\n"
            "message HiveQuery {\n"
            "  string query = 1;\n"
            "  uint32 timeout_sec = 2;\n"
            "  uint32 retryCount = 3;\n"
            "}\n"
        )

    def test_package(self, flyte_registry: TypeRegistry) -> None:
        """Test a whole package renders enums first and references locally."""
        text = to_proto_schema(flyte_registry, "flyteidl.admin")
        assert text.index("enum MatchableResource {") < text.index("message TaskResourceSpec {")
        assert "  CLUSTER_ASSIGNMENT = 7;" in text
        assert "  MatchableResource resource_type = 2;" in text
        assert "  repeated string tags = 1;" in text
        assert "message ProjectAttributesDeleteResponse {\n}" in text
        assert "HiveQuery" not in text

    def test_repeated_messages(self, flyte_registry: TypeRegistry) -> None:
        """Test repeated message fields."""
        text = to_proto_schema(flyte_registry, "flyteidl.plugins")
        assert "  repeated HiveQuery queries = 2;" in text
        assert "  HiveQueryCollection query_collection = 2;" in text

    def test_all_packages(self, flyte_registry: TypeRegistry) -> None:
        """Test an empty package renders everything with qualified references."""
        text = to_proto_schema(flyte_registry)
        assert "package" not in text.splitlines()[1]
        assert "  flyteidl.plugins.HiveQuery query = 4;" in text
        assert "enum MatchableResource {" in text

    def test_packed_override_and_aliases(self) -> None:
        """Test packing annotations and enum aliases."""
        mode = EnumDescriptor(
            "x.Mode", (EnumValue(0, "OFF"), EnumValue(1, "ON"), EnumValue(1, "ENABLED"))
        )
        record = RecordDescriptor(
            "x.Series",
            (
                FieldDescriptor(
                    1, "points", FieldKind.SCALAR, scalar=ScalarType.SINT64,
                    repeated=True, packed=False,
                ),
                FieldDescriptor(2, "modes", FieldKind.ENUM, type_name="x.Mode", repeated=True),
            ),
        )
        text = to_proto_schema(build_registry(enums=[mode], records=[record]), "x")
        assert "  option allow_alias = true;" in text
        assert "  repeated sint64 points = 1 [packed = false];" in text
        assert "  repeated Mode modes = 2;" in text

    def test_unknown_type(self, flyte_registry: TypeRegistry) -> None:
        """Test requesting an unregistered type."""
        with pytest.raises(SchemaError, match="Unknown type"):
            to_proto_schema(flyte_registry, "flyteidl.plugins", ["flyteidl.plugins.Missing"])

    def test_type_outside_package(self, flyte_registry: TypeRegistry) -> None:
        """Test requesting a type from another package."""
        with pytest.raises(SchemaError, match="is not in package"):
            to_proto_schema(flyte_registry, "flyteidl.plugins", ["flyteidl.admin.ProjectAttributes"])
