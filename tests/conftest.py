"""Shared test fixtures: synthetic EXIF/TIFF payload builders."""

import struct
import pytest


class TiffBuilder:
    """Build an EXIF payload in memory, one IFD at a time.

    IFDs are appended in call order, so children are usually added before
    the directory that points at them. Entry values are either an int,
    packed as the raw 32-bit value/offset field, or bytes: 4 bytes or
    fewer are stored inline (left-justified), longer values are appended
    right after the IFD and the field points at them.
    """

    def __init__(self, endian='<'):
        self.endian = endian
        bo = b'II' if endian == '<' else b'MM'
        self.buf = bytearray(bo + struct.pack(endian + 'HI', 42, 8))

    def add_ifd(self, entries, next_ifd=0):
        e = self.endian
        offset = len(self.buf)
        data_start = offset + 2 + 12 * len(entries) + 4

        body = struct.pack(e + 'H', len(entries))
        data = b''
        for tag_id, type_id, count, value in entries:
            body += struct.pack(e + 'HHI', tag_id, type_id, count)
            if isinstance(value, bytes):
                if len(value) <= 4:
                    body += value.ljust(4, b'\x00')
                else:
                    body += struct.pack(e + 'I', data_start + len(data))
                    data += value
            else:
                body += struct.pack(e + 'I', value)
        body += struct.pack(e + 'I', next_ifd)

        self.buf += body + data
        return offset

    def add_blob(self, data):
        offset = len(self.buf)
        self.buf += data
        return offset

    def set_first_ifd(self, offset):
        struct.pack_into(self.endian + 'I', self.buf, 4, offset)

    def pack(self, fmt, *values):
        return struct.pack(self.endian + fmt, *values)

    def to_bytes(self):
        return bytes(self.buf)


def build_exif(entries, endian='<'):
    """Build a payload with a single IFD0 holding entries."""
    builder = TiffBuilder(endian)
    builder.set_first_ifd(builder.add_ifd(entries))
    return builder.to_bytes()


@pytest.fixture
def tiff_builder():
    return TiffBuilder


@pytest.fixture
def exif_builder():
    return build_exif


@pytest.fixture(params=['<', '>'], ids=['little', 'big'])
def endian(request):
    return request.param


@pytest.fixture
def camera_exif():
    """Little-endian payload with IFD0, Exif IFD, GPS IFD and a thumbnail IFD1."""
    b = TiffBuilder('<')
    exif_ifd = b.add_ifd([
        (0x829A, 5, 1, b.pack('II', 1, 125)),       # ExposureTime
        (0x8827, 3, 1, b.pack('H', 200)),           # ISOSpeedRatings
        (0x9003, 2, 20, b'2024:05:01 10:20:30\x00'),  # DateTimeOriginal
    ])
    gps_ifd = b.add_ifd([
        (0x0000, 1, 4, bytes([2, 3, 0, 0])),        # GPSVersionID
        (0x0001, 2, 2, b'N\x00'),                   # GPSLatitudeRef
        (0x0002, 5, 3, b.pack('6I', 52, 1, 30, 1, 0, 1)),  # GPSLatitude
    ])
    ifd1 = b.add_ifd([
        (0x0103, 3, 1, b.pack('H', 6)),             # Compression
        (0x0201, 4, 1, b.pack('I', 4096)),          # JPEGInterchangeFormat
    ])
    ifd0 = b.add_ifd([
        (0x010F, 2, 6, b'Canon\x00'),               # Make
        (0x0112, 3, 1, b.pack('H', 1)),             # Orientation
        (0x8769, 4, 1, exif_ifd),
        (0x8825, 4, 1, gps_ifd),
    ], next_ifd=ifd1)
    b.set_first_ifd(ifd0)
    return b.to_bytes()
