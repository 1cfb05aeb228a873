"""Wire-level writing and reading utilities.

This module provides the low-level tag/length/value primitives of the binary
format: base-128 varints, zig-zag integers, little-endian fixed-width values
and length-delimited payloads. It knows nothing about records.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Any

from .schema import INT_RANGES, MAX_FIELD_NUMBER, ScalarType

_MASK_32 = (1 << 32) - 1
_MASK_64 = (1 << 64) - 1
_MAX_VARINT_BYTES = 10


class WireType(enum.IntEnum):
    """Wire types carried in the low three bits of every tag."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5


SCALAR_WIRE_TYPES: dict[ScalarType, WireType] = {
    ScalarType.DOUBLE: WireType.FIXED64,
    ScalarType.FLOAT: WireType.FIXED32,
    ScalarType.INT64: WireType.VARINT,
    ScalarType.UINT64: WireType.VARINT,
    ScalarType.INT32: WireType.VARINT,
    ScalarType.FIXED64: WireType.FIXED64,
    ScalarType.FIXED32: WireType.FIXED32,
    ScalarType.BOOL: WireType.VARINT,
    ScalarType.STRING: WireType.LENGTH_DELIMITED,
    ScalarType.BYTES: WireType.LENGTH_DELIMITED,
    ScalarType.UINT32: WireType.VARINT,
    ScalarType.SFIXED32: WireType.FIXED32,
    ScalarType.SFIXED64: WireType.FIXED64,
    ScalarType.SINT32: WireType.VARINT,
    ScalarType.SINT64: WireType.VARINT,
}


@dataclass(frozen=True)
class UnknownField:
    """An entry whose field number the record descriptor does not know.

    Attributes:
        number: Field number from the tag
        wire_type: Wire type from the tag
        data: The complete raw entry, tag included
    """

    number: int
    wire_type: WireType
    data: bytes


def zigzag_encode(value: int, num_bits: int) -> int:
    """Map a signed integer onto an unsigned one (0, -1, 1, -2 -> 0, 1, 2, 3)."""
    return ((value << 1) ^ (value >> (num_bits - 1))) & ((1 << num_bits) - 1)


def zigzag_decode(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def to_signed(value: int, num_bits: int) -> int:
    """Interpret the low num_bits of value as a two's complement integer."""
    value &= (1 << num_bits) - 1
    if value & (1 << (num_bits - 1)):
        return value - (1 << num_bits)
    return value


class WireWriter:
    """Appends wire-format entries to a byte buffer.

    Example:
        >>> writer = WireWriter()
        >>> writer.write_tag(1, WireType.VARINT)
        >>> writer.write_varint(150)
        >>> writer.to_bytes()
        b'\\x08\\x96\\x01'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_varint(self, value: int) -> None:
        """Write a base-128 varint.

        Negative values are written as their 64-bit two's complement, which
        always takes ten bytes.

        Raises:
            ValueError: If value does not fit in 64 bits
        """
        if value < -(1 << 63) or value > _MASK_64:
            raise ValueError(f"Value {value} does not fit in 64 bits")
        value &= _MASK_64
        while value > 0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def write_tag(self, number: int, wire_type: WireType) -> None:
        self.write_varint((number << 3) | wire_type)

    def write_fixed32(self, value: int) -> None:
        self._buffer.extend(struct.pack("<I", value))

    def write_fixed64(self, value: int) -> None:
        self._buffer.extend(struct.pack("<Q", value))

    def write_length_delimited(self, payload: bytes) -> None:
        self.write_varint(len(payload))
        self._buffer.extend(payload)

    def write_raw(self, data: bytes) -> None:
        self._buffer.extend(data)

    def write_scalar(self, scalar: ScalarType, value: Any) -> None:
        """Write a scalar payload (without tag) in its natural wire form.

        Raises:
            ValueError: If value is out of range for its type
            TypeError: If value has the wrong Python type
            struct.error: If a fixed-width value does not fit
        """
        if scalar is ScalarType.STRING:
            if not isinstance(value, str):
                raise TypeError(f"expected str, got {type(value).__name__}")
            self.write_length_delimited(value.encode("utf-8"))
        elif scalar is ScalarType.BYTES:
            if not isinstance(value, (bytes, bytearray)):
                raise TypeError(f"expected bytes, got {type(value).__name__}")
            self.write_length_delimited(bytes(value))
        elif scalar is ScalarType.BOOL:
            if not isinstance(value, bool):
                raise TypeError(f"expected bool, got {type(value).__name__}")
            self._buffer.append(1 if value else 0)
        elif scalar is ScalarType.DOUBLE:
            self._buffer.extend(struct.pack("<d", value))
        elif scalar is ScalarType.FLOAT:
            self._buffer.extend(struct.pack("<f", value))
        else:
            self._write_integer(scalar, value)

    def _write_integer(self, scalar: ScalarType, value: Any) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"expected int, got {type(value).__name__}")

        low, high = INT_RANGES[scalar]
        if not low <= value <= high:
            raise ValueError(f"value {value} out of range for {scalar.name.lower()}")

        if scalar in (ScalarType.INT32, ScalarType.INT64, ScalarType.UINT32, ScalarType.UINT64):
            self.write_varint(value)
        elif scalar is ScalarType.SINT32:
            self.write_varint(zigzag_encode(value, 32))
        elif scalar is ScalarType.SINT64:
            self.write_varint(zigzag_encode(value, 64))
        elif scalar is ScalarType.FIXED32:
            self.write_fixed32(value)
        elif scalar is ScalarType.FIXED64:
            self.write_fixed64(value)
        elif scalar is ScalarType.SFIXED32:
            self.write_fixed32(value & _MASK_32)
        elif scalar is ScalarType.SFIXED64:
            self.write_fixed64(value & _MASK_64)
        else:
            raise ValueError(f"unsupported scalar type {scalar!r}")

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class WireReader:
    """Reads wire-format entries from a byte buffer.

    Truncation raises IndexError and malformed input raises ValueError; the
    decoder translates both into DecodeError with field context.

    Example:
        >>> reader = WireReader(b"\\x08\\x96\\x01")
        >>> reader.read_tag()
        (1, <WireType.VARINT: 0>)
        >>> reader.read_varint()
        150
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    def at_end(self) -> bool:
        return self._position >= len(self._data)

    def position(self) -> int:
        return self._position

    def slice(self, start: int, end: int) -> bytes:
        return self._data[start:end]

    def read_varint(self) -> int:
        """Read a base-128 varint of at most ten bytes."""
        result = 0
        shift = 0
        for _ in range(_MAX_VARINT_BYTES):
            if self._position >= len(self._data):
                raise IndexError("Attempted to read past end of buffer in varint")
            byte = self._data[self._position]
            self._position += 1
            result |= (byte & 0x7F) << shift
            if byte < 0x80:
                return result & _MASK_64
            shift += 7
        raise ValueError("Malformed varint: more than 10 bytes")

    def read_tag(self) -> tuple[int, WireType]:
        key = self.read_varint()
        number = key >> 3
        if number == 0:
            raise ValueError("Invalid field number 0")
        if number > MAX_FIELD_NUMBER:
            raise ValueError(f"Invalid field number {number}: above {MAX_FIELD_NUMBER}")
        try:
            wire_type = WireType(key & 0x7)
        except ValueError as err:
            raise ValueError(f"Invalid wire type {key & 0x7} for field {number}") from err
        return number, wire_type

    def _take(self, num_bytes: int) -> bytes:
        end = self._position + num_bytes
        if end > len(self._data):
            raise IndexError(
                f"Not enough bytes: need {num_bytes}, have {len(self._data) - self._position}"
            )
        chunk = self._data[self._position : end]
        self._position = end
        return chunk

    def read_fixed32(self) -> int:
        return int(struct.unpack("<I", self._take(4))[0])

    def read_fixed64(self) -> int:
        return int(struct.unpack("<Q", self._take(8))[0])

    def read_length_delimited(self) -> bytes:
        length = self.read_varint()
        if length > len(self._data) - self._position:
            raise IndexError(
                f"Length prefix {length} exceeds remaining {len(self._data) - self._position} bytes"
            )
        return self._take(length)

    def read_scalar(self, scalar: ScalarType) -> Any:
        """Read a scalar payload (without tag), normalised to its declared type."""
        if scalar is ScalarType.STRING:
            return self.read_length_delimited().decode("utf-8")
        if scalar is ScalarType.BYTES:
            return self.read_length_delimited()
        if scalar is ScalarType.BOOL:
            return self.read_varint() != 0
        if scalar is ScalarType.DOUBLE:
            return float(struct.unpack("<d", self._take(8))[0])
        if scalar is ScalarType.FLOAT:
            return float(struct.unpack("<f", self._take(4))[0])
        if scalar is ScalarType.INT32:
            return to_signed(self.read_varint(), 32)
        if scalar is ScalarType.INT64:
            return to_signed(self.read_varint(), 64)
        if scalar is ScalarType.UINT32:
            return self.read_varint() & _MASK_32
        if scalar is ScalarType.UINT64:
            return self.read_varint()
        if scalar is ScalarType.SINT32:
            return to_signed(zigzag_decode(self.read_varint() & _MASK_32), 32)
        if scalar is ScalarType.SINT64:
            return zigzag_decode(self.read_varint())
        if scalar is ScalarType.FIXED32:
            return self.read_fixed32()
        if scalar is ScalarType.FIXED64:
            return self.read_fixed64()
        if scalar is ScalarType.SFIXED32:
            return to_signed(self.read_fixed32(), 32)
        if scalar is ScalarType.SFIXED64:
            return to_signed(self.read_fixed64(), 64)
        raise ValueError(f"unsupported scalar type {scalar!r}")

    def skip(self, number: int, wire_type: WireType) -> None:
        """Skip the payload of an entry whose tag has just been read."""
        if wire_type is WireType.VARINT:
            self.read_varint()
        elif wire_type is WireType.FIXED64:
            self._take(8)
        elif wire_type is WireType.LENGTH_DELIMITED:
            self.read_length_delimited()
        elif wire_type is WireType.FIXED32:
            self._take(4)
        elif wire_type is WireType.START_GROUP:
            open_groups = [number]
            while open_groups:
                if self.at_end():
                    raise IndexError(f"Unterminated group for field {open_groups[-1]}")
                inner_number, inner_type = self.read_tag()
                if inner_type is WireType.START_GROUP:
                    open_groups.append(inner_number)
                elif inner_type is WireType.END_GROUP:
                    expected = open_groups.pop()
                    if inner_number != expected:
                        raise ValueError(
                            f"Mismatched end group: expected {expected}, got {inner_number}"
                        )
                else:
                    self.skip(inner_number, inner_type)
        else:
            raise ValueError(f"Unexpected end group for field {number}")
