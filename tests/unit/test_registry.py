"""Unit tests for the type registry and generated record classes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from recwire import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    Record,
    RecordDescriptor,
    ScalarType,
    SchemaError,
    TypeRegistry,
    build_registry,
)

COLOR = EnumDescriptor("a.Color", (EnumValue(0, "RED"), EnumValue(1, "GREEN")))

POINT = RecordDescriptor(
    "a.Point",
    (
        FieldDescriptor(1, "x", FieldKind.SCALAR, scalar=ScalarType.SINT32),
        FieldDescriptor(2, "y", FieldKind.SCALAR, scalar=ScalarType.SINT32),
    ),
)


class TestBuildRegistry:
    """Test registry construction."""

    def test_lookup(self) -> None:
        """Test descriptors and classes are reachable by qualified name."""
        registry = build_registry(enums=[COLOR], records=[POINT])
        assert registry.record("a.Point") is POINT
        assert registry.enum("a.Color") is COLOR
        assert "a.Point" in registry
        assert "a.Color" in registry
        assert "a.Missing" not in registry
        assert list(registry) == ["a.Point"]
        assert len(registry) == 1

    def test_unknown_lookups(self) -> None:
        """Test missing types raise SchemaError."""
        registry = build_registry(records=[POINT])
        with pytest.raises(SchemaError, match="Unknown record type"):
            registry.record("a.Missing")
        with pytest.raises(SchemaError, match="Unknown enum type"):
            registry.enum("a.Missing")
        with pytest.raises(SchemaError, match="No record class"):
            registry.record_class("a.Missing")

    def test_tables_are_read_only(self) -> None:
        """Test the registry exposes immutable mappings."""
        registry = build_registry(records=[POINT])
        with pytest.raises(TypeError):
            registry.records["a.Other"] = POINT  # type: ignore[index]

    def test_duplicate_identical_is_noop(self) -> None:
        """Test registering the same descriptor twice is accepted."""
        twin = RecordDescriptor("a.Point", POINT.fields)
        registry = build_registry(records=[POINT, twin])
        assert len(registry) == 1

    def test_conflicting_descriptor(self) -> None:
        """Test a second, different descriptor under the same name."""
        other = RecordDescriptor("a.Point", POINT.fields[:1])
        with pytest.raises(SchemaError, match="already registered"):
            build_registry(records=[POINT, other])

    def test_record_shadowing_enum(self) -> None:
        """Test a record may not reuse an enum's name."""
        clash = RecordDescriptor("a.Color")
        with pytest.raises(SchemaError, match="already an enum"):
            build_registry(enums=[COLOR], records=[clash])

    def test_unresolved_message_reference(self) -> None:
        """Test references to unregistered records."""
        line = RecordDescriptor(
            "a.Line", (FieldDescriptor(1, "start", FieldKind.MESSAGE, type_name="a.Point"),)
        )
        with pytest.raises(SchemaError, match="unknown record type a.Point"):
            build_registry(records=[line])

    def test_unresolved_enum_reference(self) -> None:
        """Test references to unregistered enums."""
        pixel = RecordDescriptor(
            "a.Pixel", (FieldDescriptor(1, "color", FieldKind.ENUM, type_name="a.Color"),)
        )
        with pytest.raises(SchemaError, match="unknown enum type a.Color"):
            build_registry(records=[pixel])

    def test_enum_default_must_be_declared(self) -> None:
        """Test explicit enum defaults name a declared value."""
        pixel = RecordDescriptor(
            "a.Pixel",
            (FieldDescriptor(1, "color", FieldKind.ENUM, type_name="a.Color", default=9),),
        )
        with pytest.raises(SchemaError, match="not a value of a.Color"):
            build_registry(enums=[COLOR], records=[pixel])

    def test_forward_references(self) -> None:
        """Test records may reference types registered after them."""
        line = RecordDescriptor(
            "a.Line", (FieldDescriptor(1, "start", FieldKind.MESSAGE, type_name="a.Point"),)
        )
        registry = build_registry(records=[line, POINT])
        Line = registry.record_class("a.Line")
        assert Line(start={"x": 1}).start.x == 1

    @pytest.mark.parametrize("name", ["copy", "json", "descriptor", "equals", "model_config"])
    def test_name_collision(self, name: str) -> None:
        """Test field names that would shadow record attributes."""
        record = RecordDescriptor(
            "a.Bad", (FieldDescriptor(1, name, FieldKind.SCALAR, scalar=ScalarType.STRING),)
        )
        with pytest.raises(SchemaError, match="collides"):
            build_registry(records=[record])

    def test_registries_are_independent(self) -> None:
        """Test two registries generate distinct classes."""
        first = build_registry(records=[POINT])
        second = build_registry(records=[POINT])
        assert first.record_class("a.Point") is not second.record_class("a.Point")


class TestDefaults:
    """Test default values of unset fields."""

    def test_default_values(self, registry: TypeRegistry) -> None:
        """Test zero values, enum first value and explicit defaults."""
        sample = registry.record("test.Sample")
        assert registry.default_value(sample.field_by_name("name")) == ""
        assert registry.default_value(sample.field_by_name("tags")) == []
        assert registry.default_value(sample.field_by_name("child")) is None
        assert registry.default_value(sample.field_by_name("status")) == 0

        defaults = registry.record("test.Defaults")
        assert registry.default_value(defaults.field_by_name("retries")) == 3
        assert registry.default_value(defaults.field_by_name("status")) == 1

    def test_fresh_instance(self, registry: TypeRegistry) -> None:
        """Test a fresh instance holds defaults and no messages."""
        Defaults = registry.record_class("test.Defaults")
        instance = Defaults()
        assert instance.retries == 3
        assert instance.status == 1


class TestRecordClass:
    """Test generated record classes."""

    def test_class_metadata(self, registry: TypeRegistry, Sample: type[Record]) -> None:
        """Test generated classes carry their descriptor and registry."""
        assert Sample.__name__ == "Sample"
        assert Sample.DESCRIPTOR is registry.record("test.Sample")
        assert Sample.REGISTRY is registry
        assert issubclass(Sample, Record)

    def test_unset_values(self, Sample: type[Record]) -> None:
        """Test scalar fields default in place and messages are absent."""
        sample = Sample()
        assert sample.name == ""
        assert sample.blob == b""
        assert sample.flag is False
        assert sample.tags == []
        assert sample.child is None
        assert sample.status == 0

    def test_keyword_field(self, Sample: type[Record]) -> None:
        """Test keyword names are set by declared name and read with underscore."""
        sample = Sample(**{"class": "probe"})
        assert sample.class_ == "probe"
        assert Sample(class_="probe") == sample

    def test_integer_range(self, Sample: type[Record]) -> None:
        """Test integer fields are validated against their subtype."""
        with pytest.raises(ValidationError):
            Sample(small=-1)
        with pytest.raises(ValidationError):
            Sample(tags=[1 << 31])
        with pytest.raises(ValidationError):
            Sample(status=1 << 31)

    def test_rejects_bool_for_int(self, Sample: type[Record]) -> None:
        """Test bools are not accepted as integers."""
        with pytest.raises(ValidationError):
            Sample(count=True)

    def test_unknown_keyword(self, Sample: type[Record]) -> None:
        """Test fields outside the descriptor are rejected."""
        with pytest.raises(ValidationError):
            Sample(nonexistent=1)

    def test_validate_assignment(self, Sample: type[Record]) -> None:
        """Test assignment is validated."""
        sample = Sample()
        sample.small = 10
        assert sample.small == 10
        with pytest.raises(ValidationError):
            sample.small = 1 << 40

    def test_float32_rounding(self, Sample: type[Record]) -> None:
        """Test float fields hold single-precision values."""
        sample = Sample(level=0.1, ratio=0.1)
        assert sample.level != 0.1
        assert sample.level == pytest.approx(0.1, rel=1e-7)
        assert sample.ratio == 0.1

    def test_float32_overflow(self, Sample: type[Record]) -> None:
        """Test float values beyond single precision become infinite."""
        assert Sample(level=1e300).level == float("inf")

    def test_message_from_mapping(self, Sample: type[Record], Child: type[Record]) -> None:
        """Test message fields accept a mapping or an exact instance."""
        assert Sample(child={"label": "x"}).child == Child(label="x")
        child = Child(weight=2)
        assert Sample(child=child).child is child

    def test_message_wrong_type(self, Sample: type[Record], Report: type[Record]) -> None:
        """Test message fields reject other record types."""
        with pytest.raises(ValidationError, match="expected test.Child"):
            Sample(child=Report(name="x"))
        with pytest.raises(ValidationError):
            Sample(children=["not a record"])

    def test_clone_is_independent(self, Sample: type[Record]) -> None:
        """Test clone produces a deep copy."""
        sample = Sample(tags=[1], child={"label": "x"})
        copy = sample.clone()
        copy.tags.append(2)
        copy.child.label = "y"
        assert sample.tags == [1]
        assert sample.child.label == "x"
