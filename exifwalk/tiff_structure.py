# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF header structure

This module decodes the 8-byte TIFF header that starts every EXIF
payload: byte order, magic number and the offset of the first IFD.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import InvalidHeaderError, OutOfBoundsError

TIFF_MAGIC = 0x002A

LITTLE_ENDIAN_MARKER = b'II'
BIG_ENDIAN_MARKER = b'MM'


@dataclass(frozen=True)
class TiffHeader:
    """
    Decoded TIFF header.

    Attributes:
        endian: Struct byte-order prefix, '<' or '>'
        first_ifd_offset: Absolute offset of IFD0 from the buffer start
    """
    endian: str
    first_ifd_offset: int

    @property
    def little_endian(self) -> bool:
        return self.endian == '<'


def decode_tiff_header(cursor: ByteCursor) -> TiffHeader:
    """
    Decode the TIFF header at the cursor position.

    Leaves the cursor just past the header.

    Args:
        cursor: Cursor over the EXIF payload

    Returns:
        TiffHeader with the byte order and first IFD offset

    Raises:
        InvalidHeaderError: If the header is short, has an unknown
            byte-order marker or a bad magic number
    """
    try:
        marker = cursor.read_bytes(2)
        if marker == LITTLE_ENDIAN_MARKER:
            endian = '<'
        elif marker == BIG_ENDIAN_MARKER:
            endian = '>'
        else:
            raise InvalidHeaderError(f"Invalid TIFF header: bad byte order {marker!r}")

        magic = cursor.read_u16(endian)
        if magic != TIFF_MAGIC:
            raise InvalidHeaderError(f"Invalid TIFF header: bad magic number 0x{magic:04X}")

        first_ifd_offset = cursor.read_u32(endian)
    except OutOfBoundsError as e:
        raise InvalidHeaderError("Invalid TIFF header: too short") from e

    return TiffHeader(endian=endian, first_ifd_offset=first_ifd_offset)


def check_ifd_offset(header: TiffHeader, size: int) -> None:
    """
    Check that the first IFD offset points inside a buffer of size bytes.

    Raises:
        InvalidHeaderError: If the offset is at or past the end
    """
    if header.first_ifd_offset >= size:
        raise InvalidHeaderError(
            f"Invalid TIFF header: IFD0 offset {header.first_ifd_offset} "
            f"outside buffer of {size} bytes"
        )
