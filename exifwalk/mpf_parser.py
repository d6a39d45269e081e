# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
MPF (Multi-picture Format) MPEntry decoder

The MPEntry tag (0xB002) of an MPF index IFD is an UNDEFINED value
holding one 16-byte record per picture stored in the file. This module
unpacks those records into per-picture metadata keys.

Copyright 2025 DNAi inc.
"""

import logging
from typing import MutableMapping

from exifwalk.byte_cursor import ByteCursor
from exifwalk.metadata import add_metadata

logger = logging.getLogger(__name__)

MPF_ENTRY_SIZE = 16

# MP type codes (low 20 bits of the individual image attribute)
MP_TYPE_CODES = {
    0x30000: "primary-image",
    0x10001: "large-thumbnail-vga",
    0x10002: "large-thumbnail-1080p",
    0x20001: "panorama",
    0x20002: "disparity",
    0x20003: "multi-angle",
    0x00000: "undefined",
}


def mp_type_name(type_code: int) -> str:
    """Map an MP type code to its label, "unknown" if it has none."""
    name = MP_TYPE_CODES.get(type_code)
    if name is None:
        logger.debug("Unknown MP type code 0x%05X", type_code)
        return "unknown"
    return name


def decode_mp_entries(
    cursor: ByteCursor,
    count: int,
    endian: str,
    metadata: MutableMapping[str, str]
) -> int:
    """
    Decode the MPEntry record array at the cursor position.

    Each 16-byte record is laid out as (CIPA DC-007):
    - Bytes 0-3: individual image attribute
        bit 31: dependent parent image flag
        bit 30: dependent child image flag
        bit 29: representative image flag
        bits 24-26: image data format (0 = JPEG)
        bits 0-19: MP type code
    - Bytes 4-7: individual image size
    - Bytes 8-11: individual image data offset
    - Bytes 12-13: dependent image 1 entry number
    - Bytes 14-15: dependent image 2 entry number

    Seven keys are written per picture, each suffixed with the zero-based
    picture index, e.g. "MPTypeCode-0".

    Args:
        cursor: Cursor positioned at the first record
        count: Byte count of the MPEntry value
        endian: Struct byte-order prefix
        metadata: Destination sink

    Returns:
        Number of pictures decoded

    Raises:
        OutOfBoundsError: If the records run past the end of the buffer
    """
    pictures = count // MPF_ENTRY_SIZE

    for i in range(pictures):
        attribute = cursor.read_u32(endian)

        add_metadata(metadata, f"MPDependantParentImageFlag-{i}",
                     "1" if (attribute >> 31) & 0x1 else "0")
        add_metadata(metadata, f"MPDependantChildImageFlag-{i}",
                     "1" if (attribute >> 30) & 0x1 else "0")
        add_metadata(metadata, f"MPRepresentativeImageFlag-{i}",
                     "1" if (attribute >> 29) & 0x1 else "0")
        add_metadata(metadata, f"MPImageDataFormat-{i}",
                     "other" if (attribute >> 24) & 0x7 else "jpeg")
        add_metadata(metadata, f"MPTypeCode-{i}",
                     mp_type_name(attribute & ((1 << 20) - 1)))

        add_metadata(metadata, f"MPIndividualImageSize-{i}",
                     str(cursor.read_u32(endian)))
        add_metadata(metadata, f"MPIndividualImageDataOffset-{i}",
                     str(cursor.read_u32(endian)))
        add_metadata(metadata, f"MPDependentImage1EntryNumber-{i}",
                     str(cursor.read_u16(endian)))
        add_metadata(metadata, f"MPDependentImage2EntryNumber-{i}",
                     str(cursor.read_u16(endian)))

    return pictures
