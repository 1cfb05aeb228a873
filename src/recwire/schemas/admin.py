"""Admin service records for project-level matchable attributes.

Covers the project attributes CRUD requests of ``flyteidl.admin`` together
with the subset of matching attributes they carry.
"""

from __future__ import annotations

from ..codec.schema import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    RecordDescriptor,
    ScalarType,
)

PACKAGE = "flyteidl.admin"


def _string(number: int, name: str, *, repeated: bool = False) -> FieldDescriptor:
    return FieldDescriptor(
        number, name, FieldKind.SCALAR, scalar=ScalarType.STRING, repeated=repeated
    )


def _message(number: int, name: str, type_name: str) -> FieldDescriptor:
    return FieldDescriptor(number, name, FieldKind.MESSAGE, type_name=f"{PACKAGE}.{type_name}")


MATCHABLE_RESOURCE = EnumDescriptor(
    f"{PACKAGE}.MatchableResource",
    (
        EnumValue(0, "TASK_RESOURCE"),
        EnumValue(1, "CLUSTER_RESOURCE"),
        EnumValue(2, "EXECUTION_QUEUE"),
        EnumValue(3, "EXECUTION_CLUSTER_LABEL"),
        EnumValue(4, "QUALITY_OF_SERVICE_SPECIFICATION"),
        EnumValue(5, "PLUGIN_OVERRIDE"),
        EnumValue(6, "WORKFLOW_EXECUTION_CONFIG"),
        EnumValue(7, "CLUSTER_ASSIGNMENT"),
    ),
)

TASK_RESOURCE_SPEC = RecordDescriptor(
    f"{PACKAGE}.TaskResourceSpec",
    (
        _string(1, "cpu"),
        _string(2, "gpu"),
        _string(3, "memory"),
        _string(4, "storage"),
        _string(5, "ephemeral_storage"),
    ),
)

TASK_RESOURCE_ATTRIBUTES = RecordDescriptor(
    f"{PACKAGE}.TaskResourceAttributes",
    (
        _message(1, "defaults", "TaskResourceSpec"),
        _message(2, "limits", "TaskResourceSpec"),
    ),
)

EXECUTION_QUEUE_ATTRIBUTES = RecordDescriptor(
    f"{PACKAGE}.ExecutionQueueAttributes",
    (_string(1, "tags", repeated=True),),
)

EXECUTION_CLUSTER_LABEL = RecordDescriptor(
    f"{PACKAGE}.ExecutionClusterLabel",
    (_string(1, "value"),),
)

# Only the attribute kinds above are modelled; other numbers decode as unknown fields
MATCHING_ATTRIBUTES = RecordDescriptor(
    f"{PACKAGE}.MatchingAttributes",
    (
        _message(1, "task_resource_attributes", "TaskResourceAttributes"),
        _message(3, "execution_queue_attributes", "ExecutionQueueAttributes"),
        _message(4, "execution_cluster_label", "ExecutionClusterLabel"),
    ),
)

PROJECT_ATTRIBUTES = RecordDescriptor(
    f"{PACKAGE}.ProjectAttributes",
    (
        _string(1, "project"),
        _message(2, "matching_attributes", "MatchingAttributes"),
        _string(3, "org"),
    ),
)

PROJECT_ATTRIBUTES_UPDATE_REQUEST = RecordDescriptor(
    f"{PACKAGE}.ProjectAttributesUpdateRequest",
    (_message(1, "attributes", "ProjectAttributes"),),
)

PROJECT_ATTRIBUTES_UPDATE_RESPONSE = RecordDescriptor(f"{PACKAGE}.ProjectAttributesUpdateResponse")

PROJECT_ATTRIBUTES_GET_REQUEST = RecordDescriptor(
    f"{PACKAGE}.ProjectAttributesGetRequest",
    (
        _string(1, "project"),
        FieldDescriptor(
            2, "resource_type", FieldKind.ENUM, type_name=MATCHABLE_RESOURCE.type_name
        ),
        _string(3, "org"),
    ),
)

PROJECT_ATTRIBUTES_GET_RESPONSE = RecordDescriptor(
    f"{PACKAGE}.ProjectAttributesGetResponse",
    (_message(1, "attributes", "ProjectAttributes"),),
)

PROJECT_ATTRIBUTES_DELETE_REQUEST = RecordDescriptor(
    f"{PACKAGE}.ProjectAttributesDeleteRequest",
    PROJECT_ATTRIBUTES_GET_REQUEST.fields,
)

PROJECT_ATTRIBUTES_DELETE_RESPONSE = RecordDescriptor(f"{PACKAGE}.ProjectAttributesDeleteResponse")

ENUMS = (MATCHABLE_RESOURCE,)

# Referenced types need not come first; references are resolved after registration
RECORDS = (
    TASK_RESOURCE_SPEC,
    TASK_RESOURCE_ATTRIBUTES,
    EXECUTION_QUEUE_ATTRIBUTES,
    EXECUTION_CLUSTER_LABEL,
    MATCHING_ATTRIBUTES,
    PROJECT_ATTRIBUTES,
    PROJECT_ATTRIBUTES_UPDATE_REQUEST,
    PROJECT_ATTRIBUTES_UPDATE_RESPONSE,
    PROJECT_ATTRIBUTES_GET_REQUEST,
    PROJECT_ATTRIBUTES_GET_RESPONSE,
    PROJECT_ATTRIBUTES_DELETE_REQUEST,
    PROJECT_ATTRIBUTES_DELETE_RESPONSE,
)
