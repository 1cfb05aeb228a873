"""Message size calculation utilities.

Sizes are computed by encoding with the default write options, so they
reflect the default-omission policy: unset fields contribute nothing.
"""

from __future__ import annotations

from ..codec.encoder import encode, encode_field
from ..exceptions import SchemaMismatchError
from ..models.base import Record


def encoded_size(message: Record) -> int:
    """Calculate the encoded size of a record in bytes.

    Args:
        message: Record instance

    Returns:
        Length of ``encode(message)``

    Raises:
        SchemaMismatchError: If message is not a record
        EncodeError: If the record cannot be encoded

    Example:
        >>> encoded_size(HiveQuery(query="SELECT 1", timeout_sec=30))
        12
        >>> encoded_size(HiveQuery())
        0
    """
    return len(encode(message))


def field_sizes(message: Record) -> dict[str, int]:
    """Get the number of bytes each field contributes to the encoding.

    Unknown fields retained from decoding are not included.

    Args:
        message: Record instance to analyze

    Returns:
        Dictionary mapping declared field names to byte counts, in field-number order

    Raises:
        SchemaMismatchError: If message is not a record

    Example:
        >>> field_sizes(HiveQuery(query="SELECT 1"))
        {'query': 10, 'timeout_sec': 0, 'retryCount': 0}
    """
    if not isinstance(message, Record):
        raise SchemaMismatchError(f"Expected a record instance, got {type(message).__name__}")
    return {field.name: len(encode_field(message, field)) for field in message.DESCRIPTOR.fields}
