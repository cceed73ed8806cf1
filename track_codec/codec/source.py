"""
Input adapter for the track decoder.

decode() accepts three forms of input and this module turns any of them
into a single DataReader once, at the entry point:

    - str: base64 text, as found in a Lavalink track's "encoded" field
    - bytes / bytearray / memoryview: the raw serialized track
    - DataReader: a cursor already positioned inside a larger message
"""

import base64
import binascii

from track_codec.codec.binary import DataReader
from track_codec.core.exceptions import TrackFramingError


TrackSource = str | bytes | bytearray | memoryview | DataReader


def open_reader(track: TrackSource) -> tuple[DataReader, bool]:
    """
    Resolve a decode input into a reader.

    Args:
        track: Base64 text, raw bytes, or an existing DataReader.

    Returns:
        Tuple of (reader, complete). complete is True when the reader was
        built from a whole buffer supplied by the caller, in which case
        the buffer must hold exactly one frame. It is False for a
        caller-supplied DataReader, which may continue past the frame.

    Raises:
        TrackFramingError: If text input is not valid base64.
        TypeError: For any other input type.

    Note:
        Mutable buffers are copied so a caller changing its bytearray
        afterwards cannot affect a decode in progress.
    """
    if isinstance(track, DataReader):
        return track, False

    if isinstance(track, str):
        try:
            raw = base64.b64decode(track, validate=True)
        except (binascii.Error, ValueError) as e:
            raise TrackFramingError(
                f"Track text is not valid base64: {e}",
                details={"input": "base64", "original_error": str(e)}
            ) from e
        return DataReader(raw), True

    if isinstance(track, (bytes, bytearray, memoryview)):
        return DataReader(bytes(track)), True

    raise TypeError(
        f"Cannot decode a track from {type(track).__name__}; "
        "expected base64 str, bytes-like or DataReader"
    )
