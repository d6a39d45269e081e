"""Tests for TIFF header sniffing."""

import struct
import pytest

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import InvalidHeaderError
from exifwalk.tiff_structure import TiffHeader, check_ifd_offset, decode_tiff_header


class TestDecodeHeader:
    @pytest.mark.parametrize('offset', [0, 8, 26, 0xFFFFFFFF])
    def test_recovers_endian_and_offset(self, endian, offset):
        marker = b'II' if endian == '<' else b'MM'
        data = marker + struct.pack(endian + 'HI', 42, offset)
        cursor = ByteCursor(data)

        header = decode_tiff_header(cursor)

        assert header == TiffHeader(endian=endian, first_ifd_offset=offset)
        assert header.little_endian == (endian == '<')
        assert cursor.tell() == 8

    def test_bad_byte_order(self):
        with pytest.raises(InvalidHeaderError):
            decode_tiff_header(ByteCursor(b'XX' + struct.pack('<HI', 42, 8)))

    def test_bad_magic(self):
        with pytest.raises(InvalidHeaderError):
            decode_tiff_header(ByteCursor(b'II' + struct.pack('<HI', 43, 8)))

    def test_magic_read_with_header_byte_order(self):
        # 42 written big-endian is 0x2A00 when read little-endian
        with pytest.raises(InvalidHeaderError):
            decode_tiff_header(ByteCursor(b'II' + struct.pack('>HI', 42, 8)))

    @pytest.mark.parametrize('data', [b'', b'II', b'II*\x00', b'MM\x00*\x00\x00\x00'])
    def test_short_header(self, data):
        with pytest.raises(InvalidHeaderError):
            decode_tiff_header(ByteCursor(data))


class TestCheckIfdOffset:
    def test_offset_inside_buffer(self):
        check_ifd_offset(TiffHeader('<', 8), 20)

    @pytest.mark.parametrize('offset', [20, 21, 0xFFFFFFFF])
    def test_offset_outside_buffer(self, offset):
        with pytest.raises(InvalidHeaderError):
            check_ifd_offset(TiffHeader('<', offset), 20)
