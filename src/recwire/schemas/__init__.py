"""Built-in record schemas.

Example:
    >>> registry = build_default_registry()
    >>> GetRequest = registry.record_class("flyteidl.admin.ProjectAttributesGetRequest")
    >>> GetRequest(project="flytesnacks", resource_type=2).to_json()
    {'project': 'flytesnacks', 'resource_type': 'EXECUTION_QUEUE'}
"""

from __future__ import annotations

from ..registry import TypeRegistry, build_registry
from . import admin, plugins


def build_default_registry() -> TypeRegistry:
    """Build a registry holding every built-in schema."""
    return build_registry(
        enums=admin.ENUMS + plugins.ENUMS,
        records=admin.RECORDS + plugins.RECORDS,
    )


__all__ = ["admin", "plugins", "build_default_registry"]
