"""Exception hierarchy for recwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from RecwireError for easy catching of any recwire-specific error.
"""

from __future__ import annotations


class RecwireError(Exception):
    """Base exception for all recwire errors."""

    pass


class SchemaError(RecwireError):
    """Raised when a descriptor or registry is invalid.

    Examples:
        - Duplicate field numbers or names within a record
        - Field number outside the valid range
        - Unresolved enum or message reference
        - Conflicting type names in a registry
    """

    pass


class SchemaMismatchError(RecwireError):
    """Raised when a record is used with a descriptor for another type.

    Examples:
        - Encoding a ProjectAttributes instance with the HiveQuery descriptor
        - Passing a non-record value to the codec
    """

    pass


class EncodeError(RecwireError):
    """Raised when encoding a record fails.

    Encoding never fails for instances built through the record constructors.
    It can fail when a value was placed into a list behind the validator's back.

    Examples:
        - Wrong element type in a repeated field
        - Integer out of range for its scalar type
        - Self-referencing instance exceeding the nesting limit
    """

    pass


class DecodeError(RecwireError):
    """Raised when decoding binary or JSON data fails.

    Attributes:
        path: Dotted path of the offending field, when known

    Examples:
        - Truncated data or malformed varint
        - Wire type inconsistent with the declared field kind
        - JSON value whose shape does not match the field kind
        - Nesting deeper than the configured limit
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
