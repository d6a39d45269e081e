"""Tests for TIFF type decoders."""

import struct
import pytest

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import OutOfBoundsError, UnsupportedTypeError
from exifwalk.tiff_types import (
    TiffType,
    add_type_metadata,
    decode_values,
    get_decoder,
    type_size,
)


def decode(type_code, count, data, endian='<'):
    cursor = ByteCursor(data)
    values = decode_values(cursor, type_code, count, endian)
    assert cursor.tell() == count * type_size(type_code)
    return values


class TestNumericDecoders:
    def test_shorts(self, endian):
        data = struct.pack(endian + '3H', 1, 256, 65535)
        assert decode(TiffType.SHORT, 3, data, endian) == ['1', '256', '65535']

    def test_sshorts(self, endian):
        data = struct.pack(endian + '2h', -1, 300)
        assert decode(TiffType.SSHORT, 2, data, endian) == ['-1', '300']

    def test_longs(self, endian):
        data = struct.pack(endian + '2I', 70000, 0xFFFFFFFF)
        assert decode(TiffType.LONG, 2, data, endian) == ['70000', '4294967295']

    def test_slongs(self, endian):
        data = struct.pack(endian + '2i', -70000, 5)
        assert decode(TiffType.SLONG, 2, data, endian) == ['-70000', '5']

    def test_rationals(self, endian):
        data = struct.pack(endian + '4I', 1, 125, 0x80000000, 1)
        assert decode(TiffType.RATIONAL, 2, data, endian) == ['1:125', '2147483648:1']

    def test_srationals(self, endian):
        data = struct.pack(endian + '2i', -1, 3)
        assert decode(TiffType.SRATIONAL, 1, data, endian) == ['-1:3']

    def test_doubles(self, endian):
        data = struct.pack(endian + '2d', 0.5, 1.0 / 3.0)
        assert decode(TiffType.DOUBLE, 2, data, endian) == ['0.5', '0.333333333333333']

    def test_bytes_and_undefined(self):
        assert decode(TiffType.BYTE, 3, b'\x00\x7f\xff') == ['0', '127', '255']
        assert decode(TiffType.UNDEFINED, 4, b'0230') == ['48', '50', '51', '48']

    def test_sbytes(self):
        assert decode(TiffType.SBYTE, 2, b'\xff\x01') == ['-1', '1']


class TestStringDecoder:
    def test_stops_at_terminator(self):
        assert decode(TiffType.ASCII, 8, b'Canon\x00\x00\x00') == ['Canon']

    def test_unterminated(self):
        assert decode(TiffType.ASCII, 3, b'abc') == ['abc']

    def test_utf8(self):
        text = 'Zoë'.encode('utf-8') + b'\x00'
        assert decode(TiffType.ASCII, len(text), text) == ['Zoë']

    def test_invalid_utf8_falls_back_to_latin1(self):
        assert decode(TiffType.ASCII, 3, b'\xe9t\x00') == ['ét']


class TestDispatch:
    @pytest.mark.parametrize('type_code', [0, 11, 13, 14, 0xFFFF])
    def test_unsupported_types(self, type_code):
        with pytest.raises(UnsupportedTypeError) as excinfo:
            get_decoder(type_code)
        assert excinfo.value.type_code == type_code

    def test_zero_count_reads_nothing(self):
        cursor = ByteCursor(b'')
        assert decode_values(cursor, TiffType.LONG, 0, '<') == []

    def test_truncated_values(self):
        with pytest.raises(OutOfBoundsError):
            decode_values(ByteCursor(b'\x01\x00\x02'), TiffType.SHORT, 2, '<')

    def test_huge_count_does_not_allocate(self):
        with pytest.raises(OutOfBoundsError):
            decode_values(ByteCursor(b'\x00' * 8), TiffType.RATIONAL, 0x7FFFFFFF, '<')


class TestAddTypeMetadata:
    def test_joins_with_default_separator(self):
        metadata = {}
        consumed = add_type_metadata(
            ByteCursor(struct.pack('<3H', 8, 8, 8)), TiffType.SHORT, 3,
            'BitsPerSample', '<', metadata,
        )
        assert consumed == 6
        assert metadata == {'BitsPerSample': '8, 8, 8'}

    def test_custom_separator(self):
        metadata = {}
        add_type_metadata(
            ByteCursor(struct.pack('>3H', 8, 8, 8)), TiffType.SHORT, 3,
            'BitsPerSample', '>', metadata, sep=' ',
        )
        assert metadata == {'BitsPerSample': '8 8 8'}

    def test_zero_count_writes_nothing(self):
        metadata = {}
        assert add_type_metadata(ByteCursor(b''), TiffType.SHORT, 0, 'X', '<', metadata) == 0
        assert metadata == {}

    def test_opaque_printable_bytes_render_as_text(self):
        metadata = {}
        consumed = add_type_metadata(
            ByteCursor(b'0230'), TiffType.UNDEFINED, 4, 'ExifVersion', '<', metadata,
            opaque=True,
        )
        assert consumed == 4
        assert metadata == {'ExifVersion': '0230'}

    def test_opaque_binary_bytes_render_as_hex(self):
        metadata = {}
        add_type_metadata(
            ByteCursor(b'\x00\x9f\x10'), TiffType.BYTE, 3, 'MakerNote', '<', metadata,
            opaque=True,
        )
        assert metadata == {'MakerNote': '009F10'}

    def test_opaque_ignored_for_numeric_types(self):
        metadata = {}
        add_type_metadata(
            ByteCursor(struct.pack('<2H', 1, 2)), TiffType.SHORT, 2, 'X', '<', metadata,
            opaque=True,
        )
        assert metadata == {'X': '1, 2'}
