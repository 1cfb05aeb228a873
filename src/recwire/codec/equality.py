"""Structural equality of records, driven by their descriptors."""

from __future__ import annotations

from typing import Any, Optional

from ..exceptions import SchemaMismatchError
from ..models.base import Record
from .schema import FieldDescriptor, FieldKind, RecordDescriptor


def equals(a: Any, b: Any, descriptor: Optional[RecordDescriptor] = None) -> bool:
    """Return whether two records are semantically equal.

    Scalar and enum fields compare by value. Message fields are equal when both
    are absent or both present and recursively equal. Repeated fields compare
    element-wise and in order. Records of different types are never equal, nor
    are records whose types share a name but differ in declared fields. A
    record holding NaN is not equal to itself.
    Unknown fields retained from decoding are ignored.

    Args:
        a: First record
        b: Second record
        descriptor: Expected descriptor of ``a``, checked when given

    Raises:
        SchemaMismatchError: If descriptor names a different type than ``a``
    """
    if descriptor is not None:
        if not isinstance(a, Record) or a.DESCRIPTOR.type_name != descriptor.type_name:
            actual = a.DESCRIPTOR.type_name if isinstance(a, Record) else type(a).__name__
            raise SchemaMismatchError(
                f"Descriptor {descriptor.type_name} does not match record type {actual}"
            )

    if not isinstance(a, Record) or not isinstance(b, Record):
        return False
    # Same name from another registry may declare other fields
    if a.DESCRIPTOR != b.DESCRIPTOR:
        return False

    return all(
        _field_equals(field, getattr(a, field.attr_name), getattr(b, field.attr_name))
        for field in a.DESCRIPTOR.fields
    )


def _field_equals(field: FieldDescriptor, left: Any, right: Any) -> bool:
    if field.repeated:
        if len(left) != len(right):
            return False
        return all(_value_equals(field, x, y) for x, y in zip(left, right))
    return _value_equals(field, left, right)


def _value_equals(field: FieldDescriptor, left: Any, right: Any) -> bool:
    if field.kind is FieldKind.MESSAGE:
        if left is None or right is None:
            return left is None and right is None
        return equals(left, right)
    return bool(left == right)
