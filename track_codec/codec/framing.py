"""
Container framing for serialized tracks.

Every encoded track is wrapped in a message frame, the same one
Lavaplayer's MessageOutput / MessageInput use:

    +------------------------------+---------------------------+
    | 32-bit big-endian header     | payload (size bytes)      |
    | bits 31-30: flags            |                           |
    | bits 29-0:  payload size     |                           |
    +------------------------------+---------------------------+

The frame is self-delimiting: a reader holding only raw bytes knows how
many belong to this track, so several frames can be concatenated and
split again without external delimiters.

Flag TRACK_INFO_VERSIONED (1) means the payload starts with a single
format-version byte. It is always set by this package's encoder.
"""

import struct
from typing import Final

from track_codec.codec.binary import DataReader
from track_codec.core.exceptions import (
    TrackEncodeError,
    TrackFramingError,
    TrackTruncatedError,
)


HEADER_SIZE: Final = 4
MESSAGE_FLAGS_SHIFT: Final = 30
MESSAGE_SIZE_MASK: Final = (1 << MESSAGE_FLAGS_SHIFT) - 1
MAX_PAYLOAD_SIZE: Final = MESSAGE_SIZE_MASK
MAX_FLAGS: Final = 0b11

# Payload begins with an explicit format-version marker byte
TRACK_INFO_VERSIONED: Final = 1

_HEADER: Final = struct.Struct(">I")


def wrap_frame(payload: bytes, flags: int) -> bytes:
    """
    Prefix payload with a frame header.

    Args:
        payload: The serialized field sequence.
        flags: Flag bits for the header (0..3).

    Returns:
        Header followed by payload.

    Raises:
        TrackEncodeError: If the payload is too large to describe in 30 bits
                          or flags do not fit in 2 bits.
    """
    if not 0 <= flags <= MAX_FLAGS:
        raise TrackEncodeError(
            f"Frame flags out of range: {flags}",
            details={"value": flags}
        )
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise TrackEncodeError(
            f"Track payload too large: {len(payload)} bytes, limit is {MAX_PAYLOAD_SIZE}",
            details={"length": len(payload)}
        )
    return _HEADER.pack((flags << MESSAGE_FLAGS_SHIFT) | len(payload)) + payload


def _parse_header(header: int) -> tuple[int, int]:
    return header >> MESSAGE_FLAGS_SHIFT, header & MESSAGE_SIZE_MASK


def read_frame(reader: DataReader) -> tuple[int, DataReader]:
    """
    Consume one frame from reader.

    Args:
        reader: Reader positioned at a frame header.

    Returns:
        Tuple of (flags, payload_reader). payload_reader is bounded to the
        declared payload; reader itself is left positioned right after
        the frame, whatever is later read from payload_reader.

    Raises:
        TrackTruncatedError: If fewer than HEADER_SIZE bytes remain.
        TrackFramingError: If the header declares more payload than remains.

        On either error reader is left where it was.
    """
    header_offset = reader.position
    flags, size = _parse_header(_HEADER.unpack(reader.peek(HEADER_SIZE))[0])
    available = reader.remaining - HEADER_SIZE

    if size > available:
        raise TrackFramingError(
            f"Track frame at offset {header_offset} declares {size} payload bytes, "
            f"only {available} available",
            details={
                "offset": header_offset,
                "declared_size": size,
                "available": available,
            }
        )

    reader.skip(HEADER_SIZE)
    return flags, reader.slice(size)


def frame_size(data: bytes) -> int:
    """
    Return the total size (header included) of the frame at the start of data.

    Raises:
        TrackTruncatedError: If data is shorter than a header.
    """
    if len(data) < HEADER_SIZE:
        raise TrackTruncatedError(
            f"Need {HEADER_SIZE} bytes for a frame header, {len(data)} available",
            details={"offset": 0, "needed": HEADER_SIZE, "available": len(data)}
        )
    _, size = _parse_header(_HEADER.unpack_from(data)[0])
    return HEADER_SIZE + size
