# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
exifwalk - EXIF directory walker and tag decoder

Decodes a TIFF-structured EXIF payload into a flat, human-readable
metadata mapping: IFD0 with its Exif, GPS and Interoperability
sub-directories, an optional thumbnail directory, and MPF picture
entries.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from exifwalk.byte_cursor import ByteCursor
from exifwalk.exceptions import (
    ExifError,
    InvalidHeaderError,
    TruncatedDirectoryError,
    OutOfBoundsError,
    UnsupportedTypeError,
    DecodeError,
)
from exifwalk.exif_parser import (
    ExifParser,
    decode_ifd,
    decode_ifd_buffer,
    decode_tag,
    parse_exif,
    parse_exif2,
    MAX_DEPTH,
)
from exifwalk.exif_tags import get_tag_name, is_ifd_pointer
from exifwalk.tiff_structure import TiffHeader, decode_tiff_header
from exifwalk.tiff_types import TiffType

__all__ = [
    "ByteCursor",
    "ExifError",
    "InvalidHeaderError",
    "TruncatedDirectoryError",
    "OutOfBoundsError",
    "UnsupportedTypeError",
    "DecodeError",
    "ExifParser",
    "decode_ifd",
    "decode_ifd_buffer",
    "decode_tag",
    "parse_exif",
    "parse_exif2",
    "MAX_DEPTH",
    "get_tag_name",
    "is_ifd_pointer",
    "TiffHeader",
    "decode_tiff_header",
    "TiffType",
]
