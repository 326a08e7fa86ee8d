"""
Builders for synthetic Bud1 (.DS_Store) buffers used by the tests.
"""

import struct
from typing import Dict, List, Optional, Sequence, Tuple

ALIGNMENT = 0x00000001
MAGIC = 0x42756431


def entry(name: str, code: str, type_code: str, payload: bytes) -> bytes:
    encoded = name.encode('utf-16-be')
    return (
        struct.pack('>I', len(encoded) // 2)
        + encoded
        + code.encode('ascii')
        + type_code.encode('ascii')
        + payload
    )


def long_value(n: int) -> Tuple[str, bytes]:
    return 'long', struct.pack('>I', n & 0xffffffff)


def comp_value(n: int) -> Tuple[str, bytes]:
    return 'comp', struct.pack('>Q', n & 0xffffffffffffffff)


def bool_value(flag: bool) -> Tuple[str, bytes]:
    return 'bool', bytes([1 if flag else 0])


def blob_value(data: bytes) -> Tuple[str, bytes]:
    return 'blob', struct.pack('>I', len(data)) + data


def ustr_value(text: str) -> Tuple[str, bytes]:
    encoded = text.encode('utf-16-be')
    return 'ustr', struct.pack('>I', len(encoded) // 2) + encoded


def type_value(tag: str) -> Tuple[str, bytes]:
    return 'type', tag.encode('ascii')


def field(name: str, code: str, typed: Tuple[str, bytes]) -> bytes:
    type_code, payload = typed
    return entry(name, code, type_code, payload)


def node(entries: Sequence[bytes], next_id: int = 0, children: Sequence[int] = ()) -> bytes:
    out = struct.pack('>II', next_id, len(entries))
    for index, raw_entry in enumerate(entries):
        if next_id:
            out += struct.pack('>I', children[index])
        out += raw_entry
    return out


def master(root_id: int, height: int, records: int, nodes: int, page_size: int = 0x1000) -> bytes:
    return struct.pack('>5I', root_id, height, records, nodes, page_size)


def _width(length: int) -> int:
    return max(5, (max(length, 1) - 1).bit_length())


def assemble(blocks: List[bytes], directory: Optional[Dict[str, int]] = None,
             alignment: int = ALIGNMENT, magic: int = MAGIC,
             offset_repeat: Optional[int] = None) -> bytes:
    """
    Lay out a Bud1 file.

    ``blocks[i]`` becomes block id ``i + 1``; block id 0 is the allocator.
    Offsets in the file are relative to byte 4.
    """
    directory = {'DSDB': 1} if directory is None else directory

    addresses = [0]
    placements = []
    position = 0x20
    for block in blocks:
        width = _width(len(block))
        addresses.append(position | width)
        placements.append((position, block))
        position += 1 << width

    allocator_offset = position
    directory_bytes = struct.pack('>I', len(directory))
    for key, block_id in directory.items():
        encoded = key.encode('ascii')
        directory_bytes += struct.pack('>B', len(encoded)) + encoded + struct.pack('>I', block_id)
    free_lists = struct.pack('>I', 0) * 32
    allocator_length = 0x408 + len(directory_bytes) + len(free_lists)
    allocator_width = _width(allocator_length)
    addresses[0] = allocator_offset | allocator_width

    table = struct.pack('>II', len(addresses), 0)
    table += b''.join(struct.pack('>I', address) for address in addresses)
    allocator = table.ljust(0x408, b'\0') + directory_bytes + free_lists

    body = bytearray(allocator_offset + (1 << allocator_width))
    repeat = allocator_offset if offset_repeat is None else offset_repeat
    body[0:16] = struct.pack('>IIII', magic, allocator_offset, allocator_length, repeat)
    for offset, block in placements:
        body[offset:offset + len(block)] = block
    body[allocator_offset:allocator_offset + len(allocator)] = allocator

    return struct.pack('>I', alignment) + bytes(body)


def single_leaf_store(entries: Sequence[bytes], **kwargs) -> bytes:
    """Store whose tree is one leaf node (block 2) under master block 1."""
    return assemble([master(2, 0, len(entries), 1), node(entries)], **kwargs)


def two_level_store() -> bytes:
    """
    Root (block 2) with one entry 'b' and children: block 3 holding 'a',
    block 4 (rightmost) holding 'c'.
    """
    left = node([field('a', 'cmmt', ustr_value('left'))])
    right = node([field('c', 'cmmt', ustr_value('right'))])
    root = node([field('b', 'cmmt', ustr_value('root'))], next_id=4, children=[3])
    return assemble([master(2, 1, 3, 3), root, left, right])
