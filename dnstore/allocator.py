# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Buddy allocator header and block directory of DS_Store files

A DS_Store file is a "Bud1" buddy-allocated block store:
- Bytes 0-3: alignment word (0x00000001)
- Bytes 4-7: magic "Bud1" (0x42756431)
- Bytes 8-11: allocator offset, relative to byte 4
- Bytes 12-15: allocator length
- Bytes 16-19: allocator offset repeated

The allocator block holds the block offset table, a small
name -> block id directory at offset 0x408, and 32 free lists.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from dnstore.byte_cursor import ByteCursor
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import MissingDirectoryKeyError, TreeStructureError

ALIGNMENT_WORD = 0x00000001
BUD1_MAGIC = 0x42756431

# Block offsets are stored relative to byte 4 of the file
BLOCK_BASE = 0x4

DIRECTORY_OFFSET = 0x408
FREE_LIST_COUNT = 32
MASTER_KEY = 'DSDB'


@dataclass(frozen=True)
class BlockAddress:
    """
    Packed block address: the low 5 bits hold the size class,
    the remaining bits the block offset.
    """
    word: int

    @property
    def offset(self) -> int:
        return (self.word >> 5) << 5

    @property
    def size(self) -> int:
        return 1 << (self.word & 0x1f)

    @property
    def absolute_offset(self) -> int:
        return BLOCK_BASE + self.offset


@dataclass
class BuddyHeader:
    """Fields of the 20-byte file header."""
    alignment: int
    magic: int
    allocator_offset: int
    allocator_length: int
    allocator_offset_repeat: int


def parse_header(cursor: ByteCursor, diagnostics: Diagnostics) -> BuddyHeader:
    """
    Read the file header from the start of the buffer.

    Alignment and magic mismatches are only warnings: files with those
    quirks still decode.

    Args:
        cursor: Cursor over the whole file
        diagnostics: Warning sink

    Returns:
        BuddyHeader with absolute allocator offsets
    """
    cursor.seek(0)
    alignment = cursor.read_uint32()
    if alignment != ALIGNMENT_WORD:
        diagnostics.warn(f"Alignment int 0x{alignment:08x} not 0x00000001")

    magic = cursor.read_uint32()
    if magic != BUD1_MAGIC:
        diagnostics.warn(f"Magic bytes 0x{magic:08x} not 0x42756431 (Bud1)")

    allocator_offset = BLOCK_BASE + cursor.read_uint32()
    allocator_length = cursor.read_uint32()
    allocator_offset_repeat = BLOCK_BASE + cursor.read_uint32()
    if allocator_offset_repeat != allocator_offset:
        diagnostics.warn(
            f"Allocator offsets 0x{allocator_offset:x} and 0x{allocator_offset_repeat:x} unequal"
        )

    return BuddyHeader(
        alignment=alignment,
        magic=magic,
        allocator_offset=allocator_offset,
        allocator_length=allocator_length,
        allocator_offset_repeat=allocator_offset_repeat,
    )


@dataclass
class BlockAllocator:
    """
    Parsed allocator block: offset table, directory and free lists.

    Free lists are keyed by block size (1, 2, 4, ... 2**31) and are
    informational only.
    """
    offsets: List[BlockAddress] = field(default_factory=list)
    directory: Dict[str, int] = field(default_factory=dict)
    free_lists: Dict[int, List[int]] = field(default_factory=dict)

    @classmethod
    def parse(cls, cursor: ByteCursor, header: BuddyHeader,
              diagnostics: Diagnostics) -> "BlockAllocator":
        """
        Parse the allocator block located by the header.

        Raises:
            MissingDirectoryKeyError: If the directory has no 'DSDB' entry
            TruncatedDataError: If the allocator runs past the end of the buffer
        """
        allocator = cls()

        cursor.seek(header.allocator_offset)
        block_count = cursor.read_uint32()
        reserved = cursor.read_uint32()
        if reserved != 0:
            diagnostics.warn(f"Second int of allocator 0x{reserved:08x} not 0x00000000")
        for _ in range(block_count):
            allocator.offsets.append(BlockAddress(cursor.read_uint32()))

        cursor.seek(header.allocator_offset + DIRECTORY_OFFSET)
        key_count = cursor.read_uint32()
        for _ in range(key_count):
            key_length = cursor.read_byte()
            key = cursor.read_bytes(key_length).decode('ascii', errors='replace')
            block_id = cursor.read_uint32()
            allocator.directory[key] = block_id
            if key != MASTER_KEY:
                diagnostics.warn(
                    f"Directory contains non-'DSDB' key {key!r} and value 0x{block_id:x}"
                )

        if MASTER_KEY not in allocator.directory:
            raise MissingDirectoryKeyError("Key 'DSDB' not found in table of contents")

        for size_class in range(FREE_LIST_COUNT):
            count = cursor.read_uint32()
            allocator.free_lists[1 << size_class] = [cursor.read_uint32() for _ in range(count)]

        return allocator

    @property
    def master_block_id(self) -> int:
        return self.directory[MASTER_KEY]

    def address(self, block_id: int) -> BlockAddress:
        """
        Look up a block id in the offset table.

        Raises:
            TreeStructureError: If the id is outside the table
        """
        if block_id < 0 or block_id >= len(self.offsets):
            raise TreeStructureError(
                f"Block id {block_id} not in offset table ({len(self.offsets)} blocks)"
            )
        return self.offsets[block_id]
