"""Per-call configuration for the binary and JSON codecs.

Every codec entry point accepts an optional options object; ``None`` means
the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_MAX_DEPTH = 100


def _check_depth(max_depth: int) -> None:
    if not isinstance(max_depth, int) or max_depth < 1:
        raise ValueError(f"max_depth must be a positive integer, got {max_depth!r}")


@dataclass
class ReadOptions:
    """Options for binary decoding.

    Attributes:
        read_unknown_fields: Retain the raw bytes of unknown fields on the
            decoded record so they can be written back (default True)
        max_depth: Maximum nesting depth of records (default 100)
    """

    read_unknown_fields: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        _check_depth(self.max_depth)


@dataclass
class WriteOptions:
    """Options for binary encoding.

    Attributes:
        write_unknown_fields: Re-emit unknown fields retained on decode (default True)
        max_depth: Maximum nesting depth of records (default 100)
    """

    write_unknown_fields: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        _check_depth(self.max_depth)


@dataclass
class JsonReadOptions:
    """Options for JSON decoding.

    Attributes:
        ignore_unknown_fields: Skip keys that name no field and enum names that
            name no value (default True). When False both are errors.
        max_depth: Maximum nesting depth of records (default 100)
    """

    ignore_unknown_fields: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        _check_depth(self.max_depth)


@dataclass
class JsonWriteOptions:
    """Options for JSON encoding.

    Attributes:
        emit_default_values: Emit scalar/enum fields holding their default and
            empty repeated fields (default False). Absent messages stay omitted.
        enum_as_integer: Render enum values as numbers instead of names
        use_json_name: Use lowerCamelCase JSON names instead of declared names
        indent: Indentation for ``to_json_string`` (None = compact)
    """

    emit_default_values: bool = False
    enum_as_integer: bool = False
    use_json_name: bool = False
    indent: Optional[int] = None

    def __post_init__(self) -> None:
        if self.indent is not None and self.indent < 0:
            raise ValueError(f"indent must be non-negative, got {self.indent}")
