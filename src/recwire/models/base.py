"""Base record class and generation of per-type record models.

Every record type registered in a TypeRegistry gets a generated Pydantic
model deriving from Record. The class carries its descriptor and registry
as class variables; the codec consults them explicitly on every call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, create_model

from ..codec.schema import RecordDescriptor
from ..codec.wire import UnknownField
from ..exceptions import SchemaError
from ..registry import TypeRegistry
from .fields import field_definition

if TYPE_CHECKING:
    from ..codec.options import JsonReadOptions, JsonWriteOptions, ReadOptions, WriteOptions

R = TypeVar("R", bound="Record")


class Record(BaseModel):
    """Base class for all generated record types.

    Record classes are not written by hand; they are produced by
    ``build_registry()`` from record descriptors.

    Example:
        >>> registry = build_default_registry()
        >>> HiveQuery = registry.record_class("flyteidl.plugins.HiveQuery")
        >>> query = HiveQuery(query="SELECT 1", timeout_sec=30)
        >>> HiveQuery.from_binary(query.to_binary()) == query
        True

    Attributes:
        DESCRIPTOR: Record descriptor of this type
        REGISTRY: Registry the type was built in
    """

    model_config = ConfigDict(
        # Validate on assignment so instances stay encodable
        validate_assignment=True,
        # Forbid fields not defined in the schema
        extra="forbid",
        # Keyword-named fields are exposed as `<name>_` and accepted by declared name
        populate_by_name=True,
        # Field names like model_id are legitimate schema names
        protected_namespaces=(),
    )

    DESCRIPTOR: ClassVar[RecordDescriptor]
    REGISTRY: ClassVar[TypeRegistry]

    _unknown_fields: List[UnknownField] = PrivateAttr(default_factory=list)

    @property
    def unknown_fields(self) -> tuple[UnknownField, ...]:
        """Raw entries with unrecognised field numbers retained on decode."""
        return tuple(self._unknown_fields)

    @property
    def descriptor(self) -> RecordDescriptor:
        return type(self).DESCRIPTOR

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        from ..codec.equality import equals

        return equals(self, other)

    def equals(self, other: Any) -> bool:
        from ..codec.equality import equals

        return equals(self, other)

    def clone(self: R) -> R:
        """Return a deep, independent copy of this record."""
        return self.model_copy(deep=True)

    def to_binary(self, options: Optional[WriteOptions] = None) -> bytes:
        from ..codec.encoder import encode

        return encode(self, options=options)

    @classmethod
    def from_binary(cls: Type[R], data: bytes, options: Optional[ReadOptions] = None) -> R:
        from ..codec.decoder import decode

        return decode(cls, data, options=options)

    def to_json(self, options: Optional[JsonWriteOptions] = None) -> Any:
        from ..codec.json_format import to_json

        return to_json(self, options=options)

    def to_json_string(self, options: Optional[JsonWriteOptions] = None) -> str:
        from ..codec.json_format import to_json_string

        return to_json_string(self, options=options)

    @classmethod
    def from_json(cls: Type[R], value: Any, options: Optional[JsonReadOptions] = None) -> R:
        from ..codec.json_format import from_json

        return from_json(cls, value, options=options)

    @classmethod
    def from_json_string(
        cls: Type[R], text: str, options: Optional[JsonReadOptions] = None
    ) -> R:
        from ..codec.json_format import from_json_string

        return from_json_string(cls, text, options=options)


def make_record_class(descriptor: RecordDescriptor, registry: TypeRegistry) -> Type[Record]:
    """Generate the Record subclass for a descriptor.

    Args:
        descriptor: Record descriptor
        registry: Registry that resolves the descriptor's references

    Returns:
        New Record subclass named after the unqualified record name

    Raises:
        SchemaError: If a field name collides with a Record attribute
    """
    definitions: dict[str, Any] = {}
    for field in descriptor.fields:
        if hasattr(Record, field.attr_name):
            raise SchemaError(
                f"Record {descriptor.type_name}: field name {field.name!r} "
                f"collides with a record attribute"
            )
        definitions[field.attr_name] = field_definition(field, registry)

    record_class = create_model(  # type: ignore[call-overload]
        descriptor.name,
        __base__=Record,
        __module__=__name__,
        __doc__=f"Record type {descriptor.type_name}.",
        **definitions,
    )
    record_class.DESCRIPTOR = descriptor
    record_class.REGISTRY = registry
    return record_class  # type: ignore[no-any-return]
