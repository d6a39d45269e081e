# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module walks the TIFF Image File Directories of an EXIF payload and
flattens every tag into a string-keyed metadata sink. Nested directories
(Exif IFD, GPS IFD, Interoperability IFD, SubIFDs) are followed up to a
fixed depth and share the sink of the directory that points to them.

The payload is the TIFF structure itself, i.e. the bytes after the
"Exif\\x00\\x00" identifier of a JPEG APP1 segment. Locating it inside a
container is left to the caller.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Dict, MutableMapping, Optional, Tuple

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import (
    DecodeError,
    ExifError,
    InvalidHeaderError,
    TruncatedDirectoryError,
    UnsupportedTypeError,
)
from exifwalk.exif_tags import is_ifd_pointer, is_opaque_blob, tag_display_name
from exifwalk.metadata import merge_metadata
from exifwalk.mpf_parser import decode_mp_entries
from exifwalk.tiff_structure import check_ifd_offset, decode_tiff_header
from exifwalk.tiff_types import TiffType, add_type_metadata, get_decoder, type_size

logger = logging.getLogger(__name__)

IFD_ENTRY_SIZE = 12
INLINE_VALUE_SIZE = 4

# Directory levels decoded: IFD0, one sub-IFD, one nested within that
MAX_DEPTH = 3


def decode_tag(
    cursor: ByteCursor,
    endian: str,
    depth: int,
    metadata: MutableMapping[str, str],
    sep: Optional[str] = None
) -> None:
    """
    Decode one 12-byte IFD entry and write its value to metadata.

    The entry is tag id (2), type (2), count (4) and a 4-byte field that
    holds the value itself when it fits, or the absolute offset of the
    value otherwise. On return the cursor is just past the entry, whatever
    happened while reading the value.

    Args:
        cursor: Cursor positioned at the start of the entry
        endian: Struct byte-order prefix
        depth: Directory depth of the entry (0 for IFD0)
        metadata: Destination sink
        sep: Separator for multi-value entries

    Raises:
        OutOfBoundsError: If the entry or its value runs past the buffer
        TruncatedDirectoryError: If a nested directory is truncated
    """
    tag_id = cursor.read_u16(endian)
    type_code = cursor.read_u16(endian)
    count = cursor.read_u32(endian)
    field = cursor.read_bytes(INLINE_VALUE_SIZE)

    if is_ifd_pointer(tag_id):
        _decode_sub_ifds(cursor, field, tag_id, count, endian, depth, metadata, sep)
        return

    name = tag_display_name(tag_id)

    if type_code == 0:
        logger.warning("Invalid TIFF tag type 0 found for %s with size %d", name, count)
        return

    try:
        get_decoder(type_code)
        size = count * type_size(type_code)
    except UnsupportedTypeError as e:
        # Unknown types are skipped so the rest of the directory still decodes
        logger.warning("%s for %s; please submit a sample file", e.message, name)
        return

    opaque = is_opaque_blob(tag_id)
    if size <= INLINE_VALUE_SIZE:
        _add_tag_metadata(ByteCursor(field), type_code, count, name, endian, metadata, sep, opaque)
        return

    offset = ByteCursor(field).read_u32(endian)
    if offset == 0:
        # Offset 0 is the TIFF header, never a value
        logger.debug("Skipping %s: value offset is 0", name)
        return
    with cursor.detour(offset):
        _add_tag_metadata(cursor, type_code, count, name, endian, metadata, sep, opaque)


def _add_tag_metadata(cursor, type_code, count, name, endian, metadata, sep, opaque):
    if type_code == TiffType.UNDEFINED and name.lower() == "mpentry":
        decode_mp_entries(cursor, count, endian, metadata)
    else:
        add_type_metadata(cursor, type_code, count, name, endian, metadata, sep, opaque=opaque)


def _decode_sub_ifds(cursor, field, tag_id, count, endian, depth, metadata, sep):
    """Follow a directory pointer tag into its nested IFD(s)."""
    if depth + 1 >= MAX_DEPTH:
        logger.debug("Not following tag 0x%04X: directory depth limit %d reached",
                     tag_id, MAX_DEPTH)
        return

    pointer = ByteCursor(field).read_u32(endian)
    if pointer == 0:
        logger.debug("Skipping tag 0x%04X: directory offset is 0", tag_id)
        return
    if count > 1:
        # SubIFDs with several children: the field points at an array of offsets
        with cursor.detour(pointer):
            offsets = [cursor.read_u32(endian) for _ in range(count)]
    else:
        offsets = [pointer]

    seen = set()
    for offset in offsets:
        if offset == 0 or offset in seen:
            logger.debug("Skipping directory at offset %d for tag 0x%04X", offset, tag_id)
            continue
        seen.add(offset)
        with cursor.detour(offset):
            decode_ifd(cursor, endian, depth + 1, metadata, sep)


def decode_ifd(
    cursor: ByteCursor,
    endian: str,
    depth: int,
    metadata: MutableMapping[str, str],
    sep: Optional[str] = None
) -> int:
    """
    Decode one Image File Directory at the cursor position.

    A directory with N entries occupies 2 + 12 * N + 4 bytes; the cursor
    is left just past it.

    Args:
        cursor: Cursor positioned at the directory's entry count
        endian: Struct byte-order prefix
        depth: Directory depth (0 for IFD0)
        metadata: Destination sink
        sep: Separator for multi-value entries

    Returns:
        Offset of the next chained IFD, 0 if there is none

    Raises:
        TruncatedDirectoryError: If the entries cannot fit in the buffer
        OutOfBoundsError: If any entry or value runs past the buffer
    """
    entries = cursor.read_u16(endian)

    if entries * IFD_ENTRY_SIZE > cursor.bytes_left():
        raise TruncatedDirectoryError(
            f"IFD at offset {cursor.tell() - 2} declares {entries} entries "
            f"but only {cursor.bytes_left()} bytes remain"
        )

    for _ in range(entries):
        decode_tag(cursor, endian, depth, metadata, sep)

    return cursor.read_u32(endian)


def decode_ifd_buffer(
    data: bytes,
    little_endian: bool,
    depth: int,
    metadata: MutableMapping[str, str],
    sep: Optional[str] = None
) -> int:
    """
    Decode an IFD that starts at offset 0 of data.

    For callers that have already located a directory and know its byte
    order, such as TIFF or WebP demuxers.

    Returns:
        Offset of the next chained IFD, 0 if there is none
    """
    return decode_ifd(ByteCursor(data), '<' if little_endian else '>', depth, metadata, sep)


class ExifParser:
    """
    Parser for a TIFF-structured EXIF payload.

    Metadata for IFD0 and every directory it points to goes into one
    sink. The chained IFD1, which conventionally describes the thumbnail,
    can be decoded into a second sink with parse_with_thumbnail().

    A failed parse leaves the caller's sinks untouched.
    """

    def __init__(self, data: bytes, sep: Optional[str] = None):
        """
        Initialize the EXIF parser.

        Args:
            data: EXIF payload starting with the TIFF header
            sep: Separator for multi-value entries (default ", ")
        """
        self.data = data
        self.sep = sep

    def parse(self, metadata: MutableMapping[str, str]) -> int:
        """
        Decode IFD0 and its nested directories into metadata.

        Args:
            metadata: Destination sink

        Returns:
            Number of bytes consumed from the start of the payload

        Raises:
            InvalidHeaderError: If the TIFF header is invalid
            DecodeError: If walking the directory fails
        """
        cursor, endian = self._open()
        staged: Dict[str, str] = {}
        self._walk(cursor, endian, staged)
        merge_metadata(metadata, staged)
        return cursor.tell()

    def parse_with_thumbnail(
        self,
        metadata: MutableMapping[str, str],
        thumb_metadata: MutableMapping[str, str]
    ) -> int:
        """
        Decode IFD0 into metadata and the chained IFD1 into thumb_metadata.

        thumb_metadata is left untouched when IFD0 has no successor.

        Returns:
            Number of bytes consumed from the start of the payload

        Raises:
            InvalidHeaderError: If the TIFF header is invalid
            DecodeError: If walking either directory fails
        """
        cursor, endian = self._open()
        staged: Dict[str, str] = {}
        thumb_staged: Dict[str, str] = {}

        next_offset = self._walk(cursor, endian, staged)
        if next_offset > 0:
            self._walk(cursor, endian, thumb_staged, next_offset)

        merge_metadata(metadata, staged)
        merge_metadata(thumb_metadata, thumb_staged)
        return cursor.tell()

    def _open(self) -> Tuple[ByteCursor, str]:
        cursor = ByteCursor(self.data)
        try:
            header = decode_tiff_header(cursor)
            check_ifd_offset(header, cursor.size())
        except InvalidHeaderError as e:
            logger.error("Invalid TIFF header in Exif data: %s", e.message)
            raise
        cursor.seek(header.first_ifd_offset)
        return cursor, header.endian

    def _walk(
        self,
        cursor: ByteCursor,
        endian: str,
        metadata: MutableMapping[str, str],
        offset: Optional[int] = None
    ) -> int:
        try:
            if offset is not None:
                cursor.seek(offset)
            return decode_ifd(cursor, endian, 0, metadata, self.sep)
        except ExifError as e:
            logger.error("Error decoding Exif data: %s", e.message)
            raise DecodeError(f"Failed to decode EXIF directory: {e.message}") from e


def parse_exif(
    data: bytes,
    metadata: Optional[MutableMapping[str, str]] = None,
    sep: Optional[str] = None
) -> Tuple[int, MutableMapping[str, str]]:
    """
    Parse an EXIF payload into metadata.

    Args:
        data: EXIF payload starting with the TIFF header
        metadata: Destination sink, a new dict if omitted
        sep: Separator for multi-value entries

    Returns:
        Tuple of (bytes consumed, metadata)
    """
    if metadata is None:
        metadata = {}
    consumed = ExifParser(data, sep=sep).parse(metadata)
    return consumed, metadata


def parse_exif2(
    data: bytes,
    metadata: Optional[MutableMapping[str, str]] = None,
    thumb_metadata: Optional[MutableMapping[str, str]] = None,
    sep: Optional[str] = None
) -> Tuple[int, MutableMapping[str, str], MutableMapping[str, str]]:
    """
    Parse an EXIF payload and its chained thumbnail directory.

    Returns:
        Tuple of (bytes consumed, metadata, thumbnail metadata)
    """
    if metadata is None:
        metadata = {}
    if thumb_metadata is None:
        thumb_metadata = {}
    consumed = ExifParser(data, sep=sep).parse_with_thumbnail(metadata, thumb_metadata)
    return consumed, metadata, thumb_metadata
