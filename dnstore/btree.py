# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
B-tree traversal of DS_Store records

The directory entry 'DSDB' names the master block:

    root block id, tree height, record count, node count, 0x1000

Every other node starts with a "next" link (0 for leaves) and an entry
count. In internal nodes each entry is preceded by the id of the child
holding the keys that sort before it, and the "next" link is the
rightmost child.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Set

from dnstore.allocator import BlockAllocator
from dnstore.byte_cursor import ByteCursor
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import TreeStructureError
from dnstore.value_decoder import DecodedValue, TypedValueDecoder

MASTER_PAGE_SIZE = 0x00001000


@dataclass
class MasterNode:
    """Contents of the B-tree master block."""
    root_id: int
    tree_height: int
    record_count: int
    node_count: int
    page_size: int


@dataclass(frozen=True)
class Entry:
    """One B-tree entry: a field of the named file."""
    name: str
    field_code: str
    value: DecodedValue

    @property
    def type_code(self) -> str:
        return self.value.type_code


class BTreeWalker:
    """
    In-order walker over the DS_Store B-tree.

    Entries are yielded in key order. The walker owns no buffer state of
    its own beyond the shared cursor, which it saves before descending
    into a child block and restores afterwards.
    """

    def __init__(self, cursor: ByteCursor, allocator: BlockAllocator, diagnostics: Diagnostics):
        self.cursor = cursor
        self.allocator = allocator
        self.diagnostics = diagnostics
        self.master: Optional[MasterNode] = None
        self._visited: Set[int] = set()
        self._depth_warned = False

    def walk(self, master_id: Optional[int] = None) -> Iterator[Entry]:
        """
        Walk the tree starting at its master block.

        Args:
            master_id: Master block id, defaults to the 'DSDB' directory entry

        Yields:
            Entry objects in key order

        Raises:
            TreeStructureError: On block ids outside the offset table or cycles
            TruncatedDataError: If a node runs past the end of the buffer
            UnrecognizedTypeError: If an entry has an unknown type code
        """
        if master_id is None:
            master_id = self.allocator.master_block_id
        self._visited = set()
        self._depth_warned = False

        self._seek_block(master_id)
        self.master = MasterNode(
            root_id=self.cursor.read_uint32(),
            tree_height=self.cursor.read_uint32(),
            record_count=self.cursor.read_uint32(),
            node_count=self.cursor.read_uint32(),
            page_size=self.cursor.read_uint32(),
        )
        if self.master.page_size != MASTER_PAGE_SIZE:
            self.diagnostics.warn(
                f"Fifth int of master 0x{self.master.page_size:08x} not 0x00001000"
            )

        yield from self._walk_node(self.master.root_id, 0)

    def _seek_block(self, block_id: int) -> None:
        # The size class is not checked: blocks are read straight from the buffer
        address = self.allocator.address(block_id)
        self.cursor.seek(address.absolute_offset)

    def _walk_node(self, block_id: int, depth: int) -> Iterator[Entry]:
        if block_id in self._visited:
            raise TreeStructureError(f"Block {block_id} reached twice while walking the B-tree")
        self._visited.add(block_id)

        if depth > self.master.tree_height and not self._depth_warned:
            self._depth_warned = True
            self.diagnostics.warn(
                f"B-tree deeper than its declared height {self.master.tree_height}"
            )

        self._seek_block(block_id)
        next_id = self.cursor.read_uint32()
        entry_count = self.cursor.read_uint32()

        for _ in range(entry_count):
            if next_id != 0:
                child_id = self.cursor.read_uint32()
                saved = self.cursor.position
                yield from self._walk_node(child_id, depth + 1)
                self.cursor.position = saved
            yield self._read_entry()

        if next_id != 0:
            yield from self._walk_node(next_id, depth + 1)

    def _read_entry(self) -> Entry:
        name_length = self.cursor.read_uint32()
        name = self.cursor.read_utf16(name_length)
        field_code = self.cursor.read_tag()
        type_code = self.cursor.read_tag()
        value = TypedValueDecoder.decode(type_code, self.cursor)
        return Entry(name=name, field_code=field_code, value=value)
