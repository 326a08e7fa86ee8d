import struct

import pytest

from dnstore.diagnostics import Diagnostics
from dnstore.ds_store_parser import DSStoreParser
from dnstore.exceptions import (
    MetadataReadError,
    MissingDirectoryKeyError,
    TruncatedDataError,
    UnrecognizedTypeError,
)
from dnstore.field_interpreter import FieldInterpreter

from support import (
    assemble,
    blob_value,
    bool_value,
    comp_value,
    entry,
    field,
    long_value,
    master,
    node,
    single_leaf_store,
    two_level_store,
    type_value,
    ustr_value,
)


def sample_store():
    window = struct.pack('>hhhh', 0, 0, 500, 700) + b'icnv' + b'\x00' * 4
    return single_leaf_store([
        field('.', 'fwi0', blob_value(window)),
        field('.', 'vstl', type_value('Nlsv')),
        field('photo.jpg', 'Iloc', blob_value(struct.pack('>II', 64, 32) + b'\xff' * 8)),
        field('photo.jpg', 'moDD', comp_value(65536 * 86400)),
        field('photo.jpg', 'dscl', bool_value(True)),
    ])


def test_parse_builds_records():
    store = DSStoreParser(file_data=sample_store()).parse()

    assert store.records.names() == ['.', 'photo.jpg']
    assert sorted(store.records.get('photo.jpg').fields) == ['Iloc', 'dscl', 'moDD']
    assert store.master.record_count == 5
    assert len(store.diagnostics) == 0


def test_report_lines():
    store = DSStoreParser(file_data=sample_store()).parse()
    lines = FieldInterpreter(store.diagnostics).report(store.records)
    assert lines[0] == '.'
    assert "\t\tView style (might be overtaken): Icon view" in lines
    assert "\tView style: List view" in lines
    assert lines.index('photo.jpg') > lines.index('.')
    assert "\tIcon location: x 64px, y 32px, 0xffffffffffffffff" in lines
    assert "\tModification date: January 2, 1904 at 12:00 AM" in lines
    assert "\tOpen in list view: true" in lines


def test_parse_is_deterministic():
    data = two_level_store()
    first = DSStoreParser(file_data=data).parse().records.triples()
    second = DSStoreParser(file_data=data).parse().records.triples()
    assert set(first) == set(second)
    assert first == second


def test_bad_magic_still_decodes_with_warning():
    data = single_leaf_store([field('a', 'fwsw', long_value(3))], magic=0x0)
    store = DSStoreParser(file_data=data).parse()
    assert store.records.names() == ['a']
    assert len(store.diagnostics) == 1
    assert 'Magic bytes' in store.diagnostics.messages[0]
    assert store.to_metadata()['DSStore:HasSignature'] is False


def test_missing_master_key_fails_whole_decode():
    data = assemble([master(2, 0, 1, 1), node([field('a', 'fwsw', long_value(3))])],
                    directory={'DSDX': 1})
    with pytest.raises(MissingDirectoryKeyError):
        DSStoreParser(file_data=data).parse()


def test_unknown_type_fails_whole_decode():
    data = single_leaf_store([
        field('a', 'fwsw', long_value(3)),
        entry('b', 'fwsw', 'qqqq', b'\x00' * 4),
    ])
    with pytest.raises(UnrecognizedTypeError):
        DSStoreParser(file_data=data).parse()


def test_truncated_file_is_fatal():
    data = sample_store()
    with pytest.raises(TruncatedDataError):
        DSStoreParser(file_data=data[:40]).parse()


def test_record_count_mismatch_warns():
    data = assemble([master(2, 0, 7, 1), node([field('a', 'fwsw', long_value(3))])])
    store = DSStoreParser(file_data=data).parse()
    assert any('declares 7 records' in message for message in store.diagnostics)


def test_shared_diagnostics_sink():
    diagnostics = Diagnostics()
    data = single_leaf_store([field('a', 'cmmt', ustr_value('x'))], alignment=0)
    store = DSStoreParser(file_data=data, diagnostics=diagnostics).parse()
    assert store.diagnostics is diagnostics
    assert len(diagnostics) == 1


def test_reads_from_path(tmp_path):
    path = tmp_path / '.DS_Store'
    path.write_bytes(sample_store())
    store = DSStoreParser(file_path=str(path)).parse()
    assert 'photo.jpg' in store.records
    metadata = store.to_metadata()
    assert metadata['File:FileType'] == 'DS_Store'
    assert metadata['DSStore:RecordCount'] == 2
    assert metadata['DSStore:EntryCount'] == 5


def test_missing_file_raises_read_error(tmp_path):
    with pytest.raises(MetadataReadError):
        DSStoreParser(file_path=str(tmp_path / 'missing')).parse()


def test_requires_path_or_data():
    with pytest.raises(ValueError):
        DSStoreParser()
