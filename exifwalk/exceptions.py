# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for exifwalk

Structural problems in an EXIF payload (bad header, truncated directory,
reads past the end of the buffer) are fatal and surface as one of the
exceptions below. Semantic oddities such as unknown tags or unknown TIFF
types never raise out of a parse.

Copyright 2025 DNAi inc.
"""


class ExifError(Exception):
    """
    Base exception for all exifwalk errors.
    
    All exifwalk exceptions inherit from this class, allowing
    catch-all error handling for any EXIF decoding failure.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class InvalidHeaderError(ExifError):
    """
    Raised when the TIFF header of an EXIF payload cannot be used.
    
    This exception is raised when:
    - The buffer is shorter than the 8-byte header
    - The byte-order marker is neither "II" nor "MM"
    - The magic number is not 0x002A
    - The first IFD offset points outside the buffer
    """
    pass


class TruncatedDirectoryError(ExifError):
    """
    Raised when an IFD declares more entries than the buffer can hold.
    """
    pass


class OutOfBoundsError(ExifError):
    """
    Raised when a read or seek would leave the bounds of the buffer.
    """
    pass


class UnsupportedTypeError(ExifError):
    """
    Raised when a tag carries a TIFF type code with no decoder.
    
    The tag decoder catches this and skips the entry, so it never
    escapes a parse.
    """
    def __init__(self, type_code: int, message: str = ""):
        self.type_code = type_code
        super().__init__(message or f"Unsupported TIFF type {type_code}")


class DecodeError(ExifError):
    """
    Raised by the top-level parser when walking a directory fails.
    
    The structural error that stopped the walk is kept as __cause__.
    """
    pass
