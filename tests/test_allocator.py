import pytest

from dnstore.allocator import BlockAddress, BlockAllocator, parse_header
from dnstore.byte_cursor import ByteCursor
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import MissingDirectoryKeyError, TreeStructureError

from support import assemble, field, long_value, master, node, single_leaf_store


def _parse(data):
    diagnostics = Diagnostics()
    cursor = ByteCursor(data)
    header = parse_header(cursor, diagnostics)
    allocator = BlockAllocator.parse(cursor, header, diagnostics)
    return header, allocator, diagnostics


def test_block_address_unpacks_offset_and_size():
    address = BlockAddress(0x00000025)
    assert address.offset == 0x20
    assert address.size == 32
    assert address.absolute_offset == 0x24


def test_header_and_allocator_of_well_formed_file():
    data = single_leaf_store([field('a', 'fwsw', long_value(1))])
    header, allocator, diagnostics = _parse(data)

    assert header.alignment == 1
    assert header.magic == 0x42756431
    assert header.allocator_offset == header.allocator_offset_repeat
    assert allocator.master_block_id == 1
    assert len(allocator.offsets) == 3
    assert allocator.address(1).offset == 0x20
    assert sorted(allocator.free_lists) == [1 << n for n in range(32)]
    assert all(ids == [] for ids in allocator.free_lists.values())
    assert len(diagnostics) == 0


def test_bad_magic_and_alignment_only_warn():
    data = single_leaf_store([], magic=0x12345678, alignment=2)
    _, allocator, diagnostics = _parse(data)
    assert allocator.master_block_id == 1
    assert any('Magic bytes' in message for message in diagnostics)
    assert any('Alignment' in message for message in diagnostics)


def test_offset_repeat_mismatch_warns():
    blocks = [master(2, 0, 0, 1), node([])]
    data = assemble(blocks, offset_repeat=0x1000)
    header, _, diagnostics = _parse(data)
    assert header.allocator_offset_repeat == 0x1004
    assert any('unequal' in message for message in diagnostics)


def test_extra_directory_key_warns():
    data = assemble([master(2, 0, 0, 1), node([])], directory={'DSDB': 1, 'XTRA': 2})
    _, allocator, diagnostics = _parse(data)
    assert allocator.directory == {'DSDB': 1, 'XTRA': 2}
    assert any("'XTRA'" in message for message in diagnostics)


def test_missing_master_key_is_fatal():
    data = assemble([master(2, 0, 0, 1), node([])], directory={'XTRA': 1})
    with pytest.raises(MissingDirectoryKeyError):
        _parse(data)


def test_address_outside_table_raises():
    _, allocator, _ = _parse(single_leaf_store([]))
    with pytest.raises(TreeStructureError):
        allocator.address(99)
