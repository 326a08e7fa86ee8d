import pytest

from dnstore.byte_cursor import ByteCursor
from dnstore.exceptions import MetadataReadError, TruncatedDataError


def test_utf16_name_decodes():
    assert ByteCursor(b'\x00\x41').read_utf16(1) == 'A'


def test_sequential_reads_advance():
    cursor = ByteCursor(b'\x00\x00\x00\x01Bud1\xff')
    assert cursor.read_uint32() == 1
    assert cursor.read_tag() == 'Bud1'
    assert cursor.read_byte() == 0xff
    assert cursor.remaining() == 0


def test_read_past_end_is_typed_error():
    cursor = ByteCursor(b'\x00\x00')
    with pytest.raises(TruncatedDataError) as excinfo:
        cursor.read_uint32()
    assert isinstance(excinfo.value, MetadataReadError)
    assert cursor.position == 0


def test_seek_outside_buffer_raises():
    cursor = ByteCursor(b'abcd')
    cursor.seek(4)
    with pytest.raises(TruncatedDataError):
        cursor.seek(5)
