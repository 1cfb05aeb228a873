"""Render registered descriptors as .proto schema text.

The output is meant for inspection and for exchanging schemas with other
protobuf tooling. It is not parsed back.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .codec.schema import EnumDescriptor, FieldDescriptor, FieldKind, RecordDescriptor
from .exceptions import SchemaError
from .registry import TypeRegistry


def to_proto_schema(
    registry: TypeRegistry,
    package: str = "",
    type_names: Optional[Iterable[str]] = None,
) -> str:
    """Generate proto3 text for the types of one package.

    Enums are rendered first, then records, each in registration order.
    Types from other packages are referenced by their qualified name.

    Args:
        registry: Registry holding the descriptors
        package: Package to render (all types when empty)
        type_names: Restrict output to these qualified type names

    Returns:
        .proto schema as a string

    Raises:
        SchemaError: If a requested type is not registered or lies outside package

    Example:
        >>> print(to_proto_schema(registry, "flyteidl.plugins", ["flyteidl.plugins.HiveQuery"]))
        syntax = "proto3";
        package flyteidl.plugins;
        <BLANKLINE>
        message HiveQuery {
          string query = 1;
          uint32 timeout_sec = 2;
          uint32 retryCount = 3;
        }
    """
    selected = _select(registry, package, type_names)

    lines = ['syntax = "proto3";']
    if package:
        lines.append(f"package {package};")

    for type_name in selected:
        lines.append("")
        if type_name in registry.enums:
            lines.extend(_enum_to_proto(registry.enum(type_name)))
        else:
            lines.extend(_record_to_proto(registry.record(type_name), package))

    return "\n".join(lines) + "\n"


def _in_package(type_name: str, package: str) -> bool:
    return not package or type_name.rpartition(".")[0] == package


def _select(
    registry: TypeRegistry, package: str, type_names: Optional[Iterable[str]]
) -> list[str]:
    if type_names is None:
        names = [name for name in registry.enums if _in_package(name, package)]
        names.extend(name for name in registry.records if _in_package(name, package))
        return names

    wanted = set(type_names)
    for name in wanted:
        if name not in registry:
            raise SchemaError(f"Unknown type: {name}")
        if not _in_package(name, package):
            raise SchemaError(f"Type {name} is not in package {package}")

    # Keep enums-then-records registration order regardless of request order
    ordered = [name for name in registry.enums if name in wanted]
    ordered.extend(name for name in registry.records if name in wanted)
    return ordered


def _enum_to_proto(descriptor: EnumDescriptor) -> list[str]:
    lines = [f"enum {_local_name(descriptor.type_name)} {{"]
    if len({value.number for value in descriptor.values}) < len(descriptor.values):
        lines.append("  option allow_alias = true;")
    for value in descriptor.values:
        lines.append(f"  {value.name} = {value.number};")
    lines.append("}")
    return lines


def _record_to_proto(descriptor: RecordDescriptor, package: str) -> list[str]:
    lines = [f"message {_local_name(descriptor.type_name)} {{"]
    for field in descriptor.fields:
        lines.append(f"  {_field_to_proto(field, package)}")
    lines.append("}")
    return lines


def _field_to_proto(field: FieldDescriptor, package: str) -> str:
    if field.kind is FieldKind.SCALAR:
        assert field.scalar is not None
        type_text = field.scalar.name.lower()
    else:
        assert field.type_name is not None
        type_text = _reference(field.type_name, package)

    label = "repeated " if field.repeated else ""
    annotation = " [packed = false]" if field.packable and field.packed is False else ""
    return f"{label}{type_text} {field.name} = {field.number}{annotation};"


def _reference(type_name: str, package: str) -> str:
    if _in_package(type_name, package) and package:
        return _local_name(type_name)
    return type_name


def _local_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]
