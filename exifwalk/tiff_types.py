# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF field types and their value decoders

Each decoder consumes count values of one TIFF type from a ByteCursor and
returns them rendered as strings. The set of types is fixed, so dispatch
is a plain table keyed by TiffType.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Callable, Dict, List, MutableMapping, Optional

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import OutOfBoundsError, UnsupportedTypeError
from exifwalk.metadata import add_metadata


class TiffType(IntEnum):
    """TIFF field type codes"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12
    IFD = 13


# STRING is the name some writers use for ASCII
STRING = TiffType.ASCII

# TIFF type sizes in bytes
TYPE_SIZES = {
    TiffType.BYTE: 1,
    TiffType.ASCII: 1,
    TiffType.SHORT: 2,
    TiffType.LONG: 4,
    TiffType.RATIONAL: 8,
    TiffType.SBYTE: 1,
    TiffType.UNDEFINED: 1,
    TiffType.SSHORT: 2,
    TiffType.SLONG: 4,
    TiffType.SRATIONAL: 8,
    TiffType.FLOAT: 4,
    TiffType.DOUBLE: 8,
    TiffType.IFD: 4,
}

DEFAULT_SEPARATOR = ", "

Decoder = Callable[[ByteCursor, int, str], List[str]]


def _decode_bytes(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(b) for b in cursor.read_bytes(count)]


def _decode_sbytes(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(v) for v in cursor.unpack(f'{count}b')]


def _decode_shorts(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(v) for v in cursor.unpack(f'{endian}{count}H')]


def _decode_sshorts(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(v) for v in cursor.unpack(f'{endian}{count}h')]


def _decode_longs(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(v) for v in cursor.unpack(f'{endian}{count}I')]


def _decode_slongs(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return [str(v) for v in cursor.unpack(f'{endian}{count}i')]


def _decode_rationals(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    values = cursor.unpack(f'{endian}{count * 2}I')
    return [f'{values[i]}:{values[i + 1]}' for i in range(0, len(values), 2)]


def _decode_srationals(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    values = cursor.unpack(f'{endian}{count * 2}i')
    return [f'{values[i]}:{values[i + 1]}' for i in range(0, len(values), 2)]


def _decode_doubles(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    return ['%.15g' % v for v in cursor.unpack(f'{endian}{count}d')]


def _render_opaque(data: bytes) -> str:
    """Printable ASCII blobs render as text, anything else as hex."""
    text = data.rstrip(b'\x00')
    if all(0x20 <= b < 0x7F for b in text):
        return text.decode('ascii')
    return data.hex().upper()


def _decode_string(cursor: ByteCursor, count: int, endian: str) -> List[str]:
    """
    Decode an ASCII field.

    count includes the NUL terminator, so only the bytes before the first
    NUL are text. Writers routinely put UTF-8 into ASCII fields; anything
    that is not valid UTF-8 falls back to latin-1.
    """
    data = cursor.read_bytes(count)
    null_pos = data.find(b'\x00')
    if null_pos >= 0:
        data = data[:null_pos]
    try:
        return [data.decode('utf-8')]
    except UnicodeDecodeError:
        return [data.decode('latin-1')]


# FLOAT and IFD have a size but no decoder
TYPE_DECODERS: Dict[TiffType, Decoder] = {
    TiffType.BYTE: _decode_bytes,
    TiffType.UNDEFINED: _decode_bytes,
    TiffType.SBYTE: _decode_sbytes,
    TiffType.SHORT: _decode_shorts,
    TiffType.SSHORT: _decode_sshorts,
    TiffType.LONG: _decode_longs,
    TiffType.SLONG: _decode_slongs,
    TiffType.RATIONAL: _decode_rationals,
    TiffType.SRATIONAL: _decode_srationals,
    TiffType.DOUBLE: _decode_doubles,
    TiffType.ASCII: _decode_string,
}


def type_size(type_code: int) -> int:
    """
    Size in bytes of one value of a TIFF type.

    Raises:
        UnsupportedTypeError: If the type code is not a TIFF type
    """
    try:
        return TYPE_SIZES[TiffType(type_code)]
    except ValueError:
        raise UnsupportedTypeError(type_code) from None


def get_decoder(type_code: int) -> Decoder:
    """
    Look up the decoder for a TIFF type code.

    Raises:
        UnsupportedTypeError: For type 0, unknown codes, FLOAT and IFD
    """
    try:
        return TYPE_DECODERS[TiffType(type_code)]
    except (ValueError, KeyError):
        raise UnsupportedTypeError(type_code) from None


def decode_values(cursor: ByteCursor, type_code: int, count: int, endian: str) -> List[str]:
    """
    Decode count values of the given type at the cursor position.

    Consumes exactly count * type_size(type_code) bytes.

    Raises:
        UnsupportedTypeError: If the type has no decoder
        OutOfBoundsError: If the values run past the end of the buffer
    """
    decoder = get_decoder(type_code)
    if count == 0:
        return []
    size = count * type_size(type_code)
    if size > cursor.bytes_left():
        raise OutOfBoundsError(
            f"{TiffType(type_code).name} value of {size} bytes at offset "
            f"{cursor.tell()} exceeds buffer of {cursor.size()} bytes"
        )
    return decoder(cursor, count, endian)


def add_type_metadata(
    cursor: ByteCursor,
    type_code: int,
    count: int,
    name: str,
    endian: str,
    metadata: MutableMapping[str, str],
    sep: Optional[str] = None,
    opaque: bool = False
) -> int:
    """
    Decode one tag's values and write them to metadata as a single entry.

    Args:
        cursor: Cursor positioned at the first value
        type_code: TIFF type code of the values
        count: Number of values
        name: Metadata key
        endian: Struct byte-order prefix
        metadata: Destination sink
        sep: Separator for multi-value entries (default ", ")
        opaque: Render BYTE/UNDEFINED values as one concatenated string

    Returns:
        Number of bytes consumed
    """
    start = cursor.tell()
    if opaque and type_code in (TiffType.BYTE, TiffType.UNDEFINED):
        if count:
            add_metadata(metadata, name, _render_opaque(cursor.read_bytes(count)))
        return cursor.tell() - start

    values = decode_values(cursor, type_code, count, endian)
    if values:
        joiner = DEFAULT_SEPARATOR if sep is None else sep
        add_metadata(metadata, name, joiner.join(values))
    return cursor.tell() - start
