# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
macOS DS_Store metadata parser

This module handles reading metadata from macOS DS_Store files.
DS_Store files contain directory metadata used by macOS Finder.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dnstore.allocator import BUD1_MAGIC, BlockAllocator, BuddyHeader, parse_header
from dnstore.btree import BTreeWalker, MasterNode
from dnstore.byte_cursor import ByteCursor
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import MetadataReadError
from dnstore.record_store import RecordStore


@dataclass
class DSStore:
    """Result of a single DS_Store parse pass."""
    header: BuddyHeader
    allocator: BlockAllocator
    master: MasterNode
    records: RecordStore
    diagnostics: Diagnostics
    file_size: int

    def to_metadata(self) -> Dict[str, Any]:
        """
        Summarize the store as a flat dictionary of Group:Tag keys.
        """
        metadata = {}
        metadata['File:FileType'] = 'DS_Store'
        metadata['File:FileTypeExtension'] = 'ds_store'
        metadata['File:MIMEType'] = 'application/x-apple-ds-store'
        metadata['File:FileSize'] = self.file_size
        metadata['DSStore:Format'] = 'Apple Desktop Services Store'
        metadata['DSStore:HasSignature'] = self.header.magic == BUD1_MAGIC
        metadata['DSStore:AllocatorOffset'] = self.header.allocator_offset
        metadata['DSStore:AllocatorLength'] = self.header.allocator_length
        metadata['DSStore:BlockCount'] = len(self.allocator.offsets)
        metadata['DSStore:MasterBlock'] = self.allocator.master_block_id
        metadata['DSStore:TreeHeight'] = self.master.tree_height
        metadata['DSStore:NodeCount'] = self.master.node_count
        metadata['DSStore:RecordCount'] = len(self.records)
        metadata['DSStore:EntryCount'] = len(self.records.triples())
        metadata['DSStore:WarningCount'] = len(self.diagnostics)
        return metadata


class DSStoreParser:
    """
    Parser for macOS DS_Store (Desktop Services Store) metadata.

    DS_Store files contain directory metadata used by macOS Finder.
    Structure:
    - Header: 4 bytes alignment (0x00000001)
    - Signature: "Bud1" (4 bytes)
    - Allocator offset, length and repeated offset
    - Allocator block: block offset table, directory, free lists
    - B-tree of (file name, field code, typed value) entries
    """

    def __init__(self, file_path: Optional[str] = None, file_data: Optional[bytes] = None,
                 diagnostics: Optional[Diagnostics] = None):
        """
        Initialize DS_Store parser.

        Args:
            file_path: Path to DS_Store file
            file_data: DS_Store file data bytes
            diagnostics: Warning sink, a private one is created when omitted
        """
        if file_path:
            self.file_path = Path(file_path)
            self.file_data = None
        elif file_data is not None:
            self.file_data = bytes(file_data)
            self.file_path = None
        else:
            raise ValueError("Either file_path or file_data must be provided")
        self.diagnostics = Diagnostics() if diagnostics is None else diagnostics

    def parse(self) -> DSStore:
        """
        Parse DS_Store metadata.

        Returns:
            DSStore with header, allocator, master block and records

        Raises:
            MetadataReadError: If the file cannot be read, or one of its subclasses
                if the allocator or B-tree cannot be decoded
        """
        if self.file_data is None:
            try:
                with open(self.file_path, 'rb') as f:
                    file_data = f.read()
            except OSError as exc:
                raise MetadataReadError(f"Failed to read {self.file_path}: {exc}") from exc
        else:
            file_data = self.file_data

        cursor = ByteCursor(file_data)
        header = parse_header(cursor, self.diagnostics)
        allocator = BlockAllocator.parse(cursor, header, self.diagnostics)

        walker = BTreeWalker(cursor, allocator, self.diagnostics)
        records = RecordStore()
        entry_count = 0
        for entry in walker.walk(allocator.master_block_id):
            records.add(entry)
            entry_count += 1

        if entry_count != walker.master.record_count:
            self.diagnostics.warn(
                f"Master block declares {walker.master.record_count} records, "
                f"B-tree holds {entry_count}"
            )

        return DSStore(
            header=header,
            allocator=allocator,
            master=walker.master,
            records=records,
            diagnostics=self.diagnostics,
            file_size=len(file_data),
        )
