# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked read cursor over an in-memory byte buffer

Every decoder in exifwalk reads through a ByteCursor. Reads never return
short or zero-filled data: anything that would run past the end of the
buffer raises OutOfBoundsError instead.

Copyright 2025 DNAi inc.
"""

import struct
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Any

from exifwalk.exceptions import OutOfBoundsError


class ByteCursor:
    """
    Forward and random-access reader over an immutable byte buffer.

    Byte order is passed per read as a struct prefix ('<' or '>'), so a
    single cursor can be shared by every level of a recursive walk.
    """

    def __init__(self, data: bytes):
        """
        Initialize the cursor at offset 0.

        Args:
            data: Buffer to read from
        """
        self._data = memoryview(bytes(data))
        self._pos = 0

    def size(self) -> int:
        return len(self._data)

    def tell(self) -> int:
        return self._pos

    def bytes_left(self) -> int:
        return max(len(self._data) - self._pos, 0)

    def seek(self, offset: int) -> None:
        """
        Move to an absolute offset.

        Seeking exactly to the end is allowed; any read from there fails.

        Raises:
            OutOfBoundsError: If offset is negative or past the end
        """
        if offset < 0 or offset > len(self._data):
            raise OutOfBoundsError(
                f"Seek to offset {offset} outside buffer of {len(self._data)} bytes"
            )
        self._pos = offset

    def read_bytes(self, length: int) -> bytes:
        """
        Read exactly length bytes and advance past them.

        Raises:
            OutOfBoundsError: If fewer than length bytes remain
        """
        if length < 0 or length > self.bytes_left():
            raise OutOfBoundsError(
                f"Read of {length} bytes at offset {self._pos} "
                f"exceeds buffer of {len(self._data)} bytes"
            )
        start = self._pos
        self._pos += length
        return self._data[start:self._pos].tobytes()

    def unpack(self, fmt: str) -> Tuple[Any, ...]:
        """Read struct.calcsize(fmt) bytes and unpack them with fmt."""
        return struct.unpack(fmt, self.read_bytes(struct.calcsize(fmt)))

    def read_u8(self) -> int:
        return self.unpack('B')[0]

    def read_s8(self) -> int:
        return self.unpack('b')[0]

    def read_u16(self, endian: str) -> int:
        return self.unpack(f'{endian}H')[0]

    def read_s16(self, endian: str) -> int:
        return self.unpack(f'{endian}h')[0]

    def read_u32(self, endian: str) -> int:
        return self.unpack(f'{endian}I')[0]

    def read_s32(self, endian: str) -> int:
        return self.unpack(f'{endian}i')[0]

    def read_u64(self, endian: str) -> int:
        return self.unpack(f'{endian}Q')[0]

    @contextmanager
    def detour(self, offset: Optional[int] = None) -> Iterator["ByteCursor"]:
        """
        Save the current position, optionally seek, and restore on exit.

        The position is restored on every exit path, including when the
        body raises.

        Args:
            offset: Absolute offset to seek to after saving, if any
        """
        saved = self._pos
        try:
            if offset is not None:
                self.seek(offset)
            yield self
        finally:
            self._pos = saved
