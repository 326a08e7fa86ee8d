# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
DS_Store primitive value decoder

Every B-tree entry carries a 4-character type code naming one of the
eight on-disk encodings below. The type code alone determines how many
bytes the value occupies.

    bool        1 byte, low bit set means true
    shor, long  4 bytes big-endian, signed 32-bit
    comp, dutc  8 bytes big-endian, signed 64-bit
    type        4 bytes, a four-character code
    blob        uint32 length followed by that many bytes
    ustr        uint32 length in UTF-16 units followed by UTF-16BE text

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from dnstore.byte_cursor import ByteCursor
from dnstore.exceptions import UnrecognizedTypeError


class ValueKind(Enum):
    """Decoded representation of an entry value."""
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    TYPE = "type"
    BLOB = "blob"
    TEXT = "text"


@dataclass(frozen=True)
class DecodedValue:
    """One decoded entry value together with its on-disk type code."""
    kind: ValueKind
    value: Any
    type_code: str

    @property
    def is_integer(self) -> bool:
        return self.kind in (ValueKind.INT32, ValueKind.INT64)

    @property
    def is_text(self) -> bool:
        return self.kind in (ValueKind.TEXT, ValueKind.TYPE)


class TypedValueDecoder:
    """
    Decoder for DS_Store primitive values.

    An unknown type code is fatal: its payload length cannot be known,
    so the entries that follow it cannot be located.
    """

    TYPE_KINDS = {
        'bool': ValueKind.BOOL,
        'shor': ValueKind.INT32,
        'long': ValueKind.INT32,
        'comp': ValueKind.INT64,
        'dutc': ValueKind.INT64,
        'type': ValueKind.TYPE,
        'blob': ValueKind.BLOB,
        'ustr': ValueKind.TEXT,
    }

    @staticmethod
    def decode(type_code: str, cursor: ByteCursor) -> DecodedValue:
        """
        Consume and decode one value of the given type from the cursor.

        Args:
            type_code: Four-character type code read from the entry
            cursor: Cursor positioned at the start of the payload

        Returns:
            DecodedValue

        Raises:
            UnrecognizedTypeError: If the type code is not one of the known encodings
            TruncatedDataError: If the payload runs past the end of the buffer
        """
        kind = TypedValueDecoder.TYPE_KINDS.get(type_code)
        if kind is None:
            raise UnrecognizedTypeError(f"Unrecognized data type {type_code!r}")

        if kind is ValueKind.BOOL:
            value = bool(cursor.read_byte() & 0x01)
        elif kind is ValueKind.INT32:
            # 'shor' is stored in four bytes as well
            value = cursor.read_int32()
        elif kind is ValueKind.INT64:
            value = cursor.read_int64()
        elif kind is ValueKind.TYPE:
            value = cursor.read_tag()
        elif kind is ValueKind.BLOB:
            length = cursor.read_uint32()
            value = cursor.read_bytes(length)
        else:
            units = cursor.read_uint32()
            value = cursor.read_utf16(units)

        return DecodedValue(kind=kind, value=value, type_code=type_code)


def decode_value(type_code: Union[str, bytes], data: bytes) -> DecodedValue:
    """
    Decode a standalone payload of the given type.

    Args:
        type_code: Four-character type code (str or bytes)
        data: Payload bytes

    Returns:
        DecodedValue
    """
    if isinstance(type_code, bytes):
        type_code = type_code.decode('mac_roman')
    return TypedValueDecoder.decode(type_code, ByteCursor(data))
