# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked big-endian reader over an immutable byte buffer

Copyright 2025 DNAi inc.
"""

import struct

from dnstore.exceptions import TruncatedDataError


class ByteCursor:
    """
    Sequential reader over a DS_Store buffer.

    The position is the only mutable state. Callers that descend into
    another block save ``position`` and assign it back afterwards.
    """

    def __init__(self, data: bytes, position: int = 0):
        self.data = bytes(data)
        self.position = position

    def __len__(self) -> int:
        return len(self.data)

    def remaining(self) -> int:
        return max(0, len(self.data) - self.position)

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self.data):
            raise TruncatedDataError(
                f"Seek to offset 0x{position:x} outside data ({len(self.data)} bytes)"
            )
        self.position = position

    def read_bytes(self, length: int) -> bytes:
        """
        Read ``length`` raw bytes and advance.

        Raises:
            TruncatedDataError: If fewer than ``length`` bytes remain
        """
        start = self.position
        end = start + length
        if length < 0 or start < 0 or end > len(self.data):
            raise TruncatedDataError(
                f"Read of {length} bytes at offset 0x{start:x} runs past end of data "
                f"({len(self.data)} bytes)"
            )
        self.position = end
        return self.data[start:end]

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint32(self) -> int:
        return struct.unpack('>I', self.read_bytes(4))[0]

    def read_uint64(self) -> int:
        return struct.unpack('>Q', self.read_bytes(8))[0]

    def read_int32(self) -> int:
        return struct.unpack('>i', self.read_bytes(4))[0]

    def read_int64(self) -> int:
        return struct.unpack('>q', self.read_bytes(8))[0]

    def read_tag(self) -> str:
        # Four-character codes are Mac OS Roman, which maps every byte
        return self.read_bytes(4).decode('mac_roman')

    def read_utf16(self, units: int) -> str:
        """
        Read ``units`` UTF-16 code units (big-endian) as text.
        """
        return self.read_bytes(units * 2).decode('utf-16-be', errors='replace')
