"""Record, field and enum descriptors.

Descriptors are the static description of a schema: which fields a record
has, their wire numbers, kinds and defaults. They are immutable once built
and are consulted explicitly by every codec call.
"""

from __future__ import annotations

import enum
import keyword
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..exceptions import SchemaError

MAX_FIELD_NUMBER = (1 << 29) - 1
RESERVED_FIELD_NUMBERS = range(19000, 20000)


class ScalarType(enum.IntEnum):
    """Scalar subtypes, numbered as in the protobuf descriptor model."""

    DOUBLE = 1
    FLOAT = 2
    INT64 = 3
    UINT64 = 4
    INT32 = 5
    FIXED64 = 6
    FIXED32 = 7
    BOOL = 8
    STRING = 9
    BYTES = 12
    UINT32 = 13
    SFIXED32 = 15
    SFIXED64 = 16
    SINT32 = 17
    SINT64 = 18


class FieldKind(str, enum.Enum):
    """Kind of value a field holds."""

    SCALAR = "scalar"
    ENUM = "enum"
    MESSAGE = "message"


INT_RANGES: Mapping[ScalarType, tuple[int, int]] = MappingProxyType(
    {
        ScalarType.INT32: (-(1 << 31), (1 << 31) - 1),
        ScalarType.SINT32: (-(1 << 31), (1 << 31) - 1),
        ScalarType.SFIXED32: (-(1 << 31), (1 << 31) - 1),
        ScalarType.UINT32: (0, (1 << 32) - 1),
        ScalarType.FIXED32: (0, (1 << 32) - 1),
        ScalarType.INT64: (-(1 << 63), (1 << 63) - 1),
        ScalarType.SINT64: (-(1 << 63), (1 << 63) - 1),
        ScalarType.SFIXED64: (-(1 << 63), (1 << 63) - 1),
        ScalarType.UINT64: (0, (1 << 64) - 1),
        ScalarType.FIXED64: (0, (1 << 64) - 1),
    }
)

# Rendered as decimal strings in JSON
INT64_TYPES = frozenset(
    {
        ScalarType.INT64,
        ScalarType.UINT64,
        ScalarType.SINT64,
        ScalarType.FIXED64,
        ScalarType.SFIXED64,
    }
)

FLOAT_TYPES = frozenset({ScalarType.FLOAT, ScalarType.DOUBLE})

# Enum values are int32 on the wire
ENUM_RANGE = INT_RANGES[ScalarType.INT32]


def zero_value(scalar: ScalarType) -> Any:
    """Return the language-level zero value of a scalar type."""
    if scalar is ScalarType.STRING:
        return ""
    if scalar is ScalarType.BYTES:
        return b""
    if scalar is ScalarType.BOOL:
        return False
    if scalar in FLOAT_TYPES:
        return 0.0
    return 0


def json_name_for(name: str) -> str:
    """Derive the lowerCamelCase JSON name of a field (protoc rules)."""
    parts: list[str] = []
    upper_next = False
    for char in name:
        if char == "_":
            upper_next = True
        elif upper_next:
            parts.append(char.upper())
            upper_next = False
        else:
            parts.append(char)
    return "".join(parts)


@dataclass(frozen=True)
class FieldDescriptor:
    """Schema information for a single field.

    Attributes:
        number: Wire field number, unique within the record
        name: Declared field name, used as the JSON key
        kind: Scalar, enum or message
        scalar: Scalar subtype (scalar kind only)
        type_name: Qualified name of the referenced enum or record
        repeated: Whether the field holds a sequence
        packed: Packing override for repeated scalars/enums (None = packed)
        default: Explicit default for scalar/enum fields (None = zero value)
    """

    number: int
    name: str
    kind: FieldKind
    scalar: Optional[ScalarType] = None
    type_name: Optional[str] = None
    repeated: bool = False
    packed: Optional[bool] = None
    default: Any = None

    def __post_init__(self) -> None:
        if not 1 <= self.number <= MAX_FIELD_NUMBER:
            raise SchemaError(
                f"Field {self.name}: number {self.number} out of range [1, {MAX_FIELD_NUMBER}]"
            )
        if self.number in RESERVED_FIELD_NUMBERS:
            raise SchemaError(f"Field {self.name}: number {self.number} is reserved")
        if not self.name.isidentifier() or self.name.startswith("_"):
            raise SchemaError(f"Invalid field name: {self.name!r}")

        if self.kind is FieldKind.SCALAR:
            if self.scalar is None:
                raise SchemaError(f"Field {self.name}: scalar fields require a scalar type")
            if self.type_name is not None:
                raise SchemaError(f"Field {self.name}: scalar fields cannot reference a type")
        else:
            if self.type_name is None:
                raise SchemaError(f"Field {self.name}: {self.kind.value} fields require a type_name")
            if self.scalar is not None:
                raise SchemaError(f"Field {self.name}: only scalar fields have a scalar type")

        if self.default is not None:
            if self.repeated or self.kind is FieldKind.MESSAGE:
                raise SchemaError(
                    f"Field {self.name}: defaults are only allowed on singular scalar/enum fields"
                )
        if self.packed is not None and not self.packable:
            raise SchemaError(f"Field {self.name}: only repeated numeric/enum fields can be packed")

    @property
    def attr_name(self) -> str:
        """Python attribute name on record instances."""
        return f"{self.name}_" if keyword.iskeyword(self.name) else self.name

    @property
    def json_name(self) -> str:
        return json_name_for(self.name)

    @property
    def packable(self) -> bool:
        """Whether this field may use the packed repeated encoding."""
        if not self.repeated:
            return False
        if self.kind is FieldKind.ENUM:
            return True
        return self.kind is FieldKind.SCALAR and self.scalar not in (
            ScalarType.STRING,
            ScalarType.BYTES,
        )

    @property
    def is_packed(self) -> bool:
        return self.packable and self.packed is not False


@dataclass(frozen=True)
class EnumValue:
    number: int
    name: str


@dataclass(frozen=True)
class EnumDescriptor:
    """Schema information for an enum type.

    The first declared value is the default of any enum field left unset.

    Example:
        >>> status = EnumDescriptor(
        ...     "example.Status", (EnumValue(0, "IDLE"), EnumValue(1, "ACTIVE"))
        ... )
        >>> status.name_for(1)
        'ACTIVE'
    """

    type_name: str
    values: tuple[EnumValue, ...]
    _by_number: Mapping[int, str] = field(init=False, repr=False, compare=False)
    _by_name: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.values:
            raise SchemaError(f"Enum {self.type_name} has no values")

        by_name: dict[str, int] = {}
        by_number: dict[int, str] = {}
        for value in self.values:
            low, high = ENUM_RANGE
            if not low <= value.number <= high:
                raise SchemaError(f"Enum {self.type_name}: value {value.number} is not an int32")
            if value.name in by_name:
                raise SchemaError(f"Enum {self.type_name}: duplicate value name {value.name}")
            by_name[value.name] = value.number
            # Aliases keep the first declared name
            by_number.setdefault(value.number, value.name)

        object.__setattr__(self, "_by_number", MappingProxyType(by_number))
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @property
    def default(self) -> int:
        return self.values[0].number

    def name_for(self, number: int) -> Optional[str]:
        return self._by_number.get(number)

    def number_for(self, name: str) -> Optional[int]:
        return self._by_name.get(name)


@dataclass(frozen=True)
class RecordDescriptor:
    """Schema information for an entire record type.

    Example:
        >>> hive_query = RecordDescriptor(
        ...     "flyteidl.plugins.HiveQuery",
        ...     (
        ...         FieldDescriptor(1, "query", FieldKind.SCALAR, scalar=ScalarType.STRING),
        ...         FieldDescriptor(2, "timeout_sec", FieldKind.SCALAR, scalar=ScalarType.UINT32),
        ...     ),
        ... )
        >>> hive_query.field_by_number(2).name
        'timeout_sec'
    """

    type_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    _by_number: Mapping[int, FieldDescriptor] = field(init=False, repr=False, compare=False)
    _by_name: Mapping[str, FieldDescriptor] = field(init=False, repr=False, compare=False)
    _by_json_name: Mapping[str, FieldDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.type_name or any(not part.isidentifier() for part in self.type_name.split(".")):
            raise SchemaError(f"Invalid record type name: {self.type_name!r}")

        by_number: dict[int, FieldDescriptor] = {}
        by_name: dict[str, FieldDescriptor] = {}
        for field_descriptor in self.fields:
            if field_descriptor.number in by_number:
                raise SchemaError(
                    f"Record {self.type_name}: duplicate field number {field_descriptor.number}"
                )
            if field_descriptor.name in by_name:
                raise SchemaError(
                    f"Record {self.type_name}: duplicate field name {field_descriptor.name}"
                )
            by_number[field_descriptor.number] = field_descriptor
            by_name[field_descriptor.name] = field_descriptor

        by_json_name = {fd.json_name: fd for fd in self.fields}

        object.__setattr__(self, "fields", tuple(sorted(self.fields, key=lambda fd: fd.number)))
        object.__setattr__(self, "_by_number", MappingProxyType(by_number))
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))
        object.__setattr__(self, "_by_json_name", MappingProxyType(by_json_name))

    @property
    def name(self) -> str:
        """Unqualified record name."""
        return self.type_name.rsplit(".", 1)[-1]

    @property
    def package(self) -> str:
        return self.type_name.rpartition(".")[0]

    def field_by_number(self, number: int) -> Optional[FieldDescriptor]:
        return self._by_number.get(number)

    def field_by_name(self, name: str) -> Optional[FieldDescriptor]:
        """Look up a field by declared name, falling back to its JSON name."""
        found = self._by_name.get(name)
        if found is None:
            found = self._by_json_name.get(name)
        return found
