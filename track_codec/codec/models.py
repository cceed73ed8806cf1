"""
Data model for decoded tracks.

This module defines TrackInfo, the structured form of one serialized
Lavaplayer track, plus the explicit merge step used to fold
source-specific extension fields into it.

Design Decisions:
    - TrackInfo is frozen; a value lives only for the call that produced it
    - Field names are snake_case; to_dict() / from_dict() speak the
      camelCase names of a Lavalink REST "info" object
    - is_seekable is derived from is_stream and is never stored
    - Extension fields live in `details` unless they name a base field,
      in which case they replace it (see merge_details)

Usage:
    from track_codec.codec.models import TrackInfo

    info = TrackInfo(
        title="Song Title",
        author="Artist Name",
        length=212000,
        identifier="dQw4w9WgXcQ",
        is_stream=False,
        uri="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        source_name="youtube",
    )
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Final, Mapping

from track_codec.core.exceptions import TrackEncodeError


# Python field name -> Lavalink "info" key
WIRE_NAMES: Final = {
    "title": "title",
    "author": "author",
    "length": "length",
    "identifier": "identifier",
    "is_stream": "isStream",
    "uri": "uri",
    "source_name": "sourceName",
    "position": "position",
}

_FIELD_BY_ALIAS: Final = {
    **{name: name for name in WIRE_NAMES},
    **{wire: name for name, wire in WIRE_NAMES.items()},
}

_DERIVED_NAMES: Final = frozenset({"is_seekable", "isSeekable"})

_REQUIRED_WIRE_KEYS: Final = ("title", "author", "length", "identifier", "isStream", "sourceName")


@dataclass(frozen=True)
class TrackInfo:
    """
    Immutable representation of one audio track's metadata.

    Attributes:
        title: Track title.
               Example: "Rick Astley - Never Gonna Give You Up"

        author: Uploader or artist name.
                Example: "RickAstleyVEVO"

        length: Total duration in milliseconds. Meaningless for live
                streams but always present on the wire.
                Example: 212000

        identifier: Source-specific track identifier.
                    Example: "dQw4w9WgXcQ"

        is_stream: Whether the track is a live stream.

        uri: Track URI, or None when the source has none.
             None and "" are different values and both round-trip.

        source_name: Name of the source that produced the track.
                     Example: "youtube"

        position: Playback offset in milliseconds.

        details: Source-specific extension fields decoded by a details
                 hook. Empty when no hook was used.

    Properties:
        is_seekable: Always `not is_stream`.
    """

    title: str
    author: str
    length: int
    identifier: str
    is_stream: bool
    uri: str | None
    source_name: str
    position: int = 0
    details: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def is_seekable(self) -> bool:
        return not self.is_stream

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrackInfo":
        """
        Create a TrackInfo from a Lavalink-style info mapping.

        Args:
            data: Mapping with camelCase keys (title, author, length,
                  identifier, isStream, uri, sourceName, position).
                  uri and position are optional.

        Returns:
            TrackInfo: A new instance. Any isSeekable value is discarded
                       and recomputed; unknown keys become details.

        Raises:
            TrackEncodeError: If a required key is missing or isStream
                              is not a boolean.

        Example:
            info = TrackInfo.from_dict({
                "title": "Song", "author": "Artist", "length": 1000,
                "identifier": "abc", "isStream": False,
                "uri": None, "sourceName": "http",
            })
        """
        missing = [key for key in _REQUIRED_WIRE_KEYS if key not in data]
        if missing:
            raise TrackEncodeError(
                f"Track info is missing required keys: {', '.join(missing)}",
                details={"missing": missing}
            )

        if not isinstance(data["isStream"], bool):
            raise TrackEncodeError(
                f"isStream must be true or false, got {data['isStream']!r}",
                details={"field": "isStream", "value": data["isStream"]}
            )

        details = {
            key: value
            for key, value in data.items()
            if key not in WIRE_NAMES.values() and key not in _DERIVED_NAMES
        }

        return cls(
            title=data["title"],
            author=data["author"],
            length=data["length"],
            identifier=data["identifier"],
            is_stream=data["isStream"],
            uri=data.get("uri"),
            source_name=data["sourceName"],
            position=data.get("position", 0),
            details=details,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the camelCase Lavalink info form.

        Returns:
            Dictionary with the base keys, isSeekable derived from isStream,
            then any details flattened in.
        """
        result = {
            "title": self.title,
            "author": self.author,
            "length": self.length,
            "identifier": self.identifier,
            "isStream": self.is_stream,
            "isSeekable": self.is_seekable,
            "uri": self.uri,
            "sourceName": self.source_name,
            "position": self.position,
        }
        result.update(self.details)
        return result


def merge_details(track: TrackInfo, extra: Mapping[str, Any]) -> TrackInfo:
    """
    Fold extension fields into a decoded track.

    Keys naming a base field (snake_case or camelCase) replace that field;
    the extension value wins. All other keys are added to details.

    Args:
        track: The track decoded from the base fields.
        extra: Fields returned by a details decoder.

    Returns:
        A new TrackInfo. track itself is unchanged.

    Raises:
        ValueError: If extra tries to set is_seekable / isSeekable,
                    which is derived from is_stream.
    """
    derived = _DERIVED_NAMES.intersection(extra)
    if derived:
        raise ValueError(
            f"{sorted(derived)[0]} is derived from is_stream and cannot be set by a details decoder"
        )

    overrides: dict[str, Any] = {}
    details = dict(track.details)
    for key, value in extra.items():
        name = _FIELD_BY_ALIAS.get(key)
        if name is not None:
            overrides[name] = value
        else:
            details[key] = value

    return dataclasses.replace(track, details=details, **overrides)
