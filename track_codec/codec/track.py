"""
Encoder and decoder for serialized tracks (format version 2).

A serialized track is one frame (see framing.py) whose payload holds,
in this exact order:

     1. format version       byte          always 2 when written
     2. title                utf
     3. author               utf
     4. length               long          milliseconds
     5. identifier           utf
     6. is_stream            bool
     7. uri                  nullable text
     8. source_name          utf
     9. details              hook-defined  zero bytes without a hook
    10. position             long          milliseconds

The details region sits between source_name and position because a
decoder cannot size it without knowing the source, and position must stay
the trailing field.

Details hooks:
    Sources that carry extra fields register a matched pair of hooks.
    The encode hook writes the extra bytes, the decode hook reads them
    back and returns a mapping that is merged into the TrackInfo. The codec
    does not check that the two agree; a decode hook that reads a different
    number of bytes than the encode hook wrote corrupts position.

Usage:
    from track_codec.codec import decode, encode

    info = decode("QAAAjQIAJVJpY2sgQXN0bGV5...")
    raw = encode(info)
"""

import base64
from typing import Any, Callable, Final, Mapping, TypeVar

from track_codec.codec.binary import DataReader, DataWriter
from track_codec.codec.framing import TRACK_INFO_VERSIONED, read_frame, wrap_frame
from track_codec.codec.models import TrackInfo, merge_details
from track_codec.codec.source import TrackSource, open_reader
from track_codec.core.exceptions import TrackDecodeError, TrackFramingError
from track_codec.core.logger import get_logger

logger = get_logger(__name__)


TRACK_INFO_VERSION: Final = 2

DETAILS_FIELD_INDEX: Final = 9

DetailsDecoder = Callable[[DataReader, str], Mapping[str, Any] | None]
DetailsEncoder = Callable[[DataWriter, TrackInfo], None]

T = TypeVar("T")


def _read_field(index: int, name: str, read: Callable[[], T]) -> T:
    """
    Run one field read, tagging any decode error with the field it hit.

    The error keeps its class so callers can still tell truncation from
    bad text; only the message and details gain the field context. A
    subclass raised by a hook whose constructor takes other arguments is
    re-raised as a plain TrackDecodeError, chained to the original.
    """
    try:
        return read()
    except TrackDecodeError as e:
        message = f"Failed to read track field {index} ({name}): {getattr(e, 'message', e)}"
        details = {**(getattr(e, "details", None) or {}), "field_index": index, "field": name}
        try:
            tagged = type(e)(message, details=details)
        except TypeError:
            tagged = TrackDecodeError(message, details=details)
        raise tagged from e


def decode(track: TrackSource, decode_details: DetailsDecoder | None = None) -> TrackInfo:
    """
    Decode a serialized track.

    Args:
        track: Base64 text, raw bytes, or a DataReader positioned at the
               start of a frame inside a larger buffer.
        decode_details: Optional hook called as
                        decode_details(reader, source_name) right after
                        source_name is read. Whatever mapping it returns is
                        merged into the result (see merge_details).

    Returns:
        TrackInfo: The decoded track. is_seekable is derived from is_stream.

    Raises:
        TrackFramingError: Bad base64, missing version flag, declared size
                           larger than the input, or trailing bytes after
                           the frame in a complete buffer.
        TrackTruncatedError: A field would read past the end of the frame.
        TrackTextError: A text field is not valid (modified) UTF-8.

    Behavior:
        1. Resolve the input into a single DataReader
        2. Read the frame header and bound a reader to the payload
        3. Read the version marker and the base fields in order
        4. Call decode_details, if any, between source_name and position
        5. Read position and merge any details into the result
        6. Bytes left over inside the frame are skipped; the caller's
           reader (if one was passed) ends up right after the frame

    Example:
        info = decode(encoded)
        print(f"{info.title} by {info.author} ({info.length} ms)")
    """
    reader, complete = open_reader(track)
    frame_offset = reader.position

    flags, payload = read_frame(reader)
    if not flags & TRACK_INFO_VERSIONED:
        raise TrackFramingError(
            f"Track frame at offset {frame_offset} has no version flag (flags={flags})",
            details={"offset": frame_offset, "flags": flags}
        )

    if complete and reader.remaining:
        raise TrackFramingError(
            f"Track frame declares {payload.remaining} payload bytes "
            f"but {reader.remaining} extra bytes follow it",
            details={
                "offset": reader.position,
                "declared_size": payload.remaining,
                "trailing": reader.remaining,
            }
        )

    version = _read_field(1, "version", payload.read_byte)
    if version != TRACK_INFO_VERSION:
        logger.warning(
            f"Unexpected track format version {version}, "
            f"decoding as version {TRACK_INFO_VERSION}"
        )

    title = _read_field(2, "title", payload.read_utf)
    author = _read_field(3, "author", payload.read_utf)
    length = _read_field(4, "length", payload.read_long)
    identifier = _read_field(5, "identifier", payload.read_utf)
    is_stream = _read_field(6, "is_stream", payload.read_bool)
    uri = _read_field(7, "uri", payload.read_nullable_text)
    source_name = _read_field(8, "source_name", payload.read_utf)

    extra = None
    if decode_details is not None:
        extra = _read_field(
            DETAILS_FIELD_INDEX, "details",
            lambda: decode_details(payload, source_name)
        )

    position = _read_field(10, "position", payload.read_long)

    if payload.remaining:
        logger.debug(
            f"Skipping {payload.remaining} unread bytes at the end of track '{identifier}'"
        )

    info = TrackInfo(
        title=title,
        author=author,
        length=length,
        identifier=identifier,
        is_stream=is_stream,
        uri=uri,
        source_name=source_name,
        position=position,
    )

    if extra is not None:
        info = merge_details(info, extra)

    return info


def decode_all(data: TrackSource, decode_details: DetailsDecoder | None = None) -> list[TrackInfo]:
    """
    Decode every frame in a buffer of concatenated tracks.

    Args:
        data: Base64 text, raw bytes, or a DataReader. A reader is consumed
              to its end.
        decode_details: Optional details hook, applied to every track.

    Returns:
        List of TrackInfo in buffer order. Empty for an empty buffer.

    Raises:
        TrackDecodeError: If any frame fails; no partial list is returned.
    """
    reader, _ = open_reader(data)
    tracks = []
    while reader.remaining:
        tracks.append(decode(reader, decode_details))
    return tracks


def encode(track_info: TrackInfo, encode_details: DetailsEncoder | None = None) -> bytes:
    """
    Encode a track into its serialized form.

    Args:
        track_info: The track to encode. Its is_seekable is not written;
                    it is recomputed from is_stream on decode.
        encode_details: Optional hook called as
                        encode_details(writer, track_info) right after
                        source_name is written. It must write exactly what
                        the matching decode hook will read.

    Returns:
        Raw bytes: frame header with the version flag set, then payload.
        Base64-encode it (or use encode_base64) for transport as text.

    Raises:
        TrackEncodeError: If a field cannot be represented on the wire
                          (text over 65535 encoded bytes, integers outside
                          the signed 64-bit range, lone surrogates).
    """
    writer = DataWriter()

    writer.write_byte(TRACK_INFO_VERSION)
    writer.write_utf(track_info.title)
    writer.write_utf(track_info.author)
    writer.write_long(track_info.length)
    writer.write_utf(track_info.identifier)
    writer.write_bool(track_info.is_stream)
    writer.write_nullable_text(track_info.uri)
    writer.write_utf(track_info.source_name)

    if encode_details is not None:
        encode_details(writer, track_info)

    writer.write_long(track_info.position)

    return wrap_frame(writer.getvalue(), TRACK_INFO_VERSIONED)


def encode_base64(track_info: TrackInfo, encode_details: DetailsEncoder | None = None) -> str:
    """Encode a track and return it as base64 text."""
    return base64.b64encode(encode(track_info, encode_details)).decode("ascii")
