"""
Byte-level reader and writer primitives.

These mirror java.io.DataInput / DataOutput as used by Lavaplayer:
every multi-byte value is big-endian, text is a 2-byte length prefix
followed by modified UTF-8 bytes, and nullable text is a presence byte
followed by text only when present.

Modified UTF-8 (DataOutput.writeUTF) differs from standard UTF-8 in two
ways: NUL is written as the two bytes C0 80, and characters above U+FFFF
are written as a UTF-16 surrogate pair, each half taking three bytes.
Text from any other source still decodes as long as it is valid UTF-8.

DataReader never mutates or copies the buffer it reads from; slice()
hands out bounded sub-readers over the same memory so one track can be
decoded out of a larger message in place.

Usage:
    from track_codec.codec.binary import DataReader, DataWriter

    writer = DataWriter()
    writer.write_utf("hello")
    writer.write_long(212000)

    reader = DataReader(writer.getvalue())
    reader.read_utf()   # "hello"
    reader.read_long()  # 212000
"""

import re
import struct
from typing import Final

from track_codec.core.exceptions import (
    TrackEncodeError,
    TrackTextError,
    TrackTruncatedError,
)


# Largest byte length a 2-byte length prefix can describe
MAX_UTF_LENGTH: Final = 0xFFFF

_USHORT: Final = struct.Struct(">H")
_INT: Final = struct.Struct(">i")
_LONG: Final = struct.Struct(">q")

_MODIFIED_NUL: Final = b"\xc0\x80"
_SUPPLEMENTARY: Final = re.compile("[\U00010000-\U0010ffff]")


def _surrogate_pair(match: re.Match) -> str:
    code = ord(match.group()) - 0x10000
    return chr(0xD800 | (code >> 10)) + chr(0xDC00 | (code & 0x3FF))


def encode_modified_utf8(value: str) -> bytes:
    """
    Encode text the way Java's DataOutput.writeUTF does (without the prefix).

    Raises:
        UnicodeEncodeError: If value holds an unpaired surrogate.
    """
    raw = value.encode("utf-8")
    if _SUPPLEMENTARY.search(value):
        raw = _SUPPLEMENTARY.sub(_surrogate_pair, value).encode("utf-8", "surrogatepass")
    return raw.replace(b"\x00", _MODIFIED_NUL)


def decode_modified_utf8(raw: bytes) -> str:
    """
    Decode modified UTF-8 text, joining surrogate pairs back into one character.

    Plain UTF-8 (raw NUL bytes, 4-byte sequences) is accepted too.

    Raises:
        UnicodeDecodeError: If the bytes are malformed or a surrogate is unpaired.
    """
    text = raw.replace(_MODIFIED_NUL, b"\x00").decode("utf-8", "surrogatepass")
    if not text.isascii():
        text = text.encode("utf-16-be", "surrogatepass").decode("utf-16-be")
    return text


class DataReader:
    """
    Forward-only cursor over an immutable byte buffer.

    Attributes:
        position: Absolute offset of the next byte to read.
        end: Absolute offset one past the last readable byte.

    Thread Safety:
        A reader owns its position. Do not share one reader between
        concurrent decode calls.
    """

    def __init__(self, data: bytes | memoryview, offset: int = 0, end: int | None = None) -> None:
        """
        Create a reader.

        Args:
            data: The buffer to read. It is never modified.
            offset: Absolute offset to start reading from.
            end: Absolute offset to stop at. Defaults to len(data).
        """
        view = memoryview(data)
        self._view = view if view.format == "B" else view.cast("B")
        self._end = len(self._view) if end is None else end
        if not 0 <= offset <= self._end <= len(self._view):
            raise ValueError(
                f"Invalid reader bounds: offset={offset}, end={self._end}, size={len(self._view)}"
            )
        self._offset = offset

    @property
    def position(self) -> int:
        return self._offset

    @property
    def end(self) -> int:
        return self._end

    @property
    def remaining(self) -> int:
        return self._end - self._offset

    def _take(self, size: int) -> memoryview:
        if size < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {size}")
        if size > self.remaining:
            raise TrackTruncatedError(
                f"Unexpected end of track data at offset {self._offset}: "
                f"need {size} bytes, {self.remaining} available",
                details={"offset": self._offset, "needed": size, "available": self.remaining}
            )
        chunk = self._view[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def read(self, size: int) -> bytes:
        """Read exactly size bytes."""
        return bytes(self._take(size))

    def skip(self, size: int) -> None:
        self._take(size)

    def peek(self, size: int) -> bytes:
        """Return the next size bytes without advancing."""
        data = self.read(size)
        self._offset -= size
        return data

    def slice(self, size: int) -> "DataReader":
        """
        Split off the next size bytes as their own bounded reader.

        This reader is advanced past the slice, so whatever the caller
        does with the returned reader, this one continues right after it.

        Raises:
            TrackTruncatedError: If fewer than size bytes remain.
        """
        start = self._offset
        self._take(size)
        return DataReader(self._view, start, start + size)

    def read_byte(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_ushort(self) -> int:
        return _USHORT.unpack(self._take(_USHORT.size))[0]

    def read_int(self) -> int:
        return _INT.unpack(self._take(_INT.size))[0]

    def read_long(self) -> int:
        return _LONG.unpack(self._take(_LONG.size))[0]

    def read_utf(self) -> str:
        """
        Read length-prefixed modified UTF-8 text.

        Raises:
            TrackTruncatedError: If the prefix or the text runs past the end.
            TrackTextError: If the bytes are not valid (modified) UTF-8.
        """
        length = self.read_ushort()
        start = self._offset
        raw = self.read(length)
        try:
            return decode_modified_utf8(raw)
        except UnicodeDecodeError as e:
            raise TrackTextError(
                f"Invalid UTF-8 text at offset {start}: {e.reason}",
                details={"offset": start, "length": length, "original_error": str(e)}
            ) from e

    def read_nullable_text(self) -> str | None:
        """Read a presence byte, then text only if the byte is non-zero."""
        if not self.read_bool():
            return None
        return self.read_utf()

    def __repr__(self) -> str:
        return f"DataReader(position={self._offset}, end={self._end})"


class DataWriter:
    """
    Append-only in-memory writer, the counterpart of DataReader.

    Example:
        writer = DataWriter()
        writer.write_byte(2)
        writer.write_nullable_text(None)
        payload = writer.getvalue()  # b"\\x02\\x00"
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def size(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write(self, data: bytes) -> None:
        self._buffer += data

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise TrackEncodeError(
                f"Byte value out of range: {value}",
                details={"value": value}
            )
        self._buffer.append(value)

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def _pack(self, packer: struct.Struct, value: int, kind: str) -> None:
        try:
            self._buffer += packer.pack(value)
        except struct.error as e:
            raise TrackEncodeError(
                f"Value {value!r} does not fit in a {kind}",
                details={"value": value, "original_error": str(e)}
            ) from e

    def write_ushort(self, value: int) -> None:
        self._pack(_USHORT, value, "unsigned 16-bit integer")

    def write_int(self, value: int) -> None:
        self._pack(_INT, value, "signed 32-bit integer")

    def write_long(self, value: int) -> None:
        self._pack(_LONG, value, "signed 64-bit integer")

    def write_utf(self, value: str) -> None:
        """
        Write length-prefixed modified UTF-8 text.

        Raises:
            TrackEncodeError: If value is not a str, holds an unpaired
                              surrogate, or its encoded form is longer
                              than 65535 bytes.
        """
        if not isinstance(value, str):
            raise TrackEncodeError(
                f"Expected text, got {type(value).__name__}",
                details={"value": value}
            )
        try:
            raw = encode_modified_utf8(value)
        except UnicodeEncodeError as e:
            raise TrackEncodeError(
                f"Text cannot be encoded as UTF-8: {e.reason}",
                details={"original_error": str(e)}
            ) from e
        if len(raw) > MAX_UTF_LENGTH:
            raise TrackEncodeError(
                f"Text too long: {len(raw)} bytes, limit is {MAX_UTF_LENGTH}",
                details={"length": len(raw)}
            )
        self.write_ushort(len(raw))
        self._buffer += raw

    def write_nullable_text(self, value: str | None) -> None:
        if value is None:
            self.write_bool(False)
        else:
            self.write_bool(True)
            self.write_utf(value)
