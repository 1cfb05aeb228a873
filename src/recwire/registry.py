"""Type registry: the immutable table of descriptors and record classes.

The registry is built once by an explicit startup call and then passed by
reference (through the generated record classes) to every codec call. There
is no module-level registry.

Example:
    >>> registry = build_registry(enums=[STATUS], records=[REPORT])
    >>> Report = registry.record_class("example.Report")
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Type

from .codec.schema import EnumDescriptor, FieldDescriptor, FieldKind, RecordDescriptor, zero_value
from .exceptions import SchemaError
from .logging import get_logger

if TYPE_CHECKING:
    from .models.base import Record

logger = get_logger(__name__)


class TypeRegistry:
    """Immutable lookup table of enum descriptors, record descriptors and record classes.

    Instances are created by ``build_registry()``; do not construct directly.
    """

    def __init__(
        self,
        enums: Mapping[str, EnumDescriptor],
        records: Mapping[str, RecordDescriptor],
    ) -> None:
        self._enums = MappingProxyType(dict(enums))
        self._records = MappingProxyType(dict(records))
        self._classes: Mapping[str, Type[Record]] = MappingProxyType({})

    def _install_classes(self, classes: Mapping[str, Type[Record]]) -> None:
        self._classes = MappingProxyType(dict(classes))

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._records or type_name in self._enums

    def __iter__(self) -> Iterator[str]:
        """Iterate over registered record type names in registration order."""
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def enums(self) -> Mapping[str, EnumDescriptor]:
        return self._enums

    @property
    def records(self) -> Mapping[str, RecordDescriptor]:
        return self._records

    def record(self, type_name: str) -> RecordDescriptor:
        try:
            return self._records[type_name]
        except KeyError as err:
            raise SchemaError(f"Unknown record type: {type_name}") from err

    def enum(self, type_name: str) -> EnumDescriptor:
        try:
            return self._enums[type_name]
        except KeyError as err:
            raise SchemaError(f"Unknown enum type: {type_name}") from err

    def record_class(self, type_name: str) -> Type[Record]:
        try:
            return self._classes[type_name]
        except KeyError as err:
            raise SchemaError(f"No record class for type: {type_name}") from err

    def default_value(self, field: FieldDescriptor) -> Any:
        """Return the value an unset field holds.

        Repeated fields default to an empty list and message fields to None.
        Scalar and enum fields use the explicit default when declared, else the
        zero value or the enum's first declared number.
        """
        if field.repeated:
            return []
        if field.kind is FieldKind.MESSAGE:
            return None
        if field.default is not None:
            return field.default
        if field.kind is FieldKind.ENUM:
            assert field.type_name is not None
            return self.enum(field.type_name).default
        assert field.scalar is not None
        return zero_value(field.scalar)


def _register(table: dict[str, Any], descriptor: Any, kind: str) -> None:
    existing = table.get(descriptor.type_name)
    if existing is not None:
        if existing is descriptor or existing == descriptor:
            # Already registered, no-op
            return
        raise SchemaError(
            f"{kind} type {descriptor.type_name} already registered with a different descriptor"
        )
    table[descriptor.type_name] = descriptor


def _check_references(
    records: Mapping[str, RecordDescriptor], enums: Mapping[str, EnumDescriptor]
) -> None:
    for record in records.values():
        for field in record.fields:
            if field.kind is FieldKind.MESSAGE and field.type_name not in records:
                raise SchemaError(
                    f"Record {record.type_name}: field {field.name} references "
                    f"unknown record type {field.type_name}"
                )
            if field.kind is FieldKind.ENUM:
                if field.type_name not in enums:
                    raise SchemaError(
                        f"Record {record.type_name}: field {field.name} references "
                        f"unknown enum type {field.type_name}"
                    )
                assert field.type_name is not None
                if field.default is not None and enums[field.type_name].name_for(field.default) is None:
                    raise SchemaError(
                        f"Record {record.type_name}: default {field.default!r} of field "
                        f"{field.name} is not a value of {field.type_name}"
                    )


def build_registry(
    *,
    enums: Iterable[EnumDescriptor] = (),
    records: Iterable[RecordDescriptor] = (),
) -> TypeRegistry:
    """Build an immutable registry from descriptors.

    Enums are registered first, then records, in the order given. All
    references must resolve within the registry. One record class is then
    generated per record descriptor.

    Args:
        enums: Enum descriptors
        records: Record descriptors

    Returns:
        TypeRegistry

    Raises:
        SchemaError: On conflicting type names, unresolved references, or
            field names that cannot be exposed on a record class
    """
    from .models.base import make_record_class

    enum_table: dict[str, EnumDescriptor] = {}
    for enum_descriptor in enums:
        _register(enum_table, enum_descriptor, "Enum")

    record_table: dict[str, RecordDescriptor] = {}
    for record_descriptor in records:
        if record_descriptor.type_name in enum_table:
            raise SchemaError(f"Type name {record_descriptor.type_name} is already an enum")
        _register(record_table, record_descriptor, "Record")

    _check_references(record_table, enum_table)

    registry = TypeRegistry(enum_table, record_table)
    registry._install_classes(
        {
            type_name: make_record_class(descriptor, registry)
            for type_name, descriptor in record_table.items()
        }
    )

    logger.debug("registry_built", enums=len(enum_table), records=len(record_table))
    return registry
