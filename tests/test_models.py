"""Test the TrackInfo model"""

import dataclasses

import pytest

from track_codec.codec.models import TrackInfo, merge_details
from track_codec.core.exceptions import TrackEncodeError


class TestTrackInfo:
    """Test TrackInfo construction and conversion"""

    def test_from_dict(self, rick_roll, rick_roll_info_dict):
        """A Lavalink info object maps onto the snake_case fields"""
        assert TrackInfo.from_dict(rick_roll_info_dict) == rick_roll

    def test_from_dict_defaults(self):
        """uri and position are optional"""
        info = TrackInfo.from_dict({
            "title": "Test Song",
            "author": "Test Artist",
            "length": 180000,
            "identifier": "track1",
            "isStream": False,
            "sourceName": "http",
        })

        assert info.uri is None
        assert info.position == 0
        assert info.details == {}

    def test_from_dict_missing_keys(self):
        """Missing required keys are reported together"""
        with pytest.raises(TrackEncodeError) as exc_info:
            TrackInfo.from_dict({"title": "Only a title"})

        assert exc_info.value.details["missing"] == [
            "author", "length", "identifier", "isStream", "sourceName"
        ]

    @pytest.mark.parametrize("value", ["false", 0, 1, None])
    def test_from_dict_is_stream_must_be_bool(self, rick_roll_info_dict, value):
        """isStream is never coerced from text or numbers"""
        rick_roll_info_dict["isStream"] = value
        with pytest.raises(TrackEncodeError) as exc_info:
            TrackInfo.from_dict(rick_roll_info_dict)
        assert exc_info.value.details["field"] == "isStream"

    def test_from_dict_unknown_keys_become_details(self, rick_roll_info_dict):
        """Keys outside the base schema are kept as details"""
        rick_roll_info_dict["artworkUrl"] = "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq720.jpg"
        info = TrackInfo.from_dict(rick_roll_info_dict)

        assert info.details == {"artworkUrl": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq720.jpg"}
        assert info.to_dict() == rick_roll_info_dict

    def test_is_seekable_derived(self, rick_roll):
        """is_seekable is the negation of is_stream"""
        assert rick_roll.is_seekable is True
        assert dataclasses.replace(rick_roll, is_stream=True).is_seekable is False

    def test_is_seekable_not_settable(self, rick_roll):
        """The model is frozen and is_seekable has no setter"""
        with pytest.raises(dataclasses.FrozenInstanceError):
            rick_roll.is_seekable = False
        with pytest.raises(dataclasses.FrozenInstanceError):
            rick_roll.title = "Changed"

    def test_hashable_with_details(self, rick_roll):
        """details do not take part in hashing"""
        with_details = dataclasses.replace(rick_roll, details={"isrc": "X"})
        assert hash(with_details) == hash(rick_roll)
        assert with_details != rick_roll


class TestMergeDetails:
    """Test the explicit merge of extension fields"""

    def test_extra_fields_go_to_details(self, rick_roll):
        """Non-base keys are added to details"""
        merged = merge_details(rick_roll, {"isrc": "GBARL9300135"})
        assert merged.details == {"isrc": "GBARL9300135"}
        assert rick_roll.details == {}

    def test_base_field_override(self, rick_roll):
        """Base field names, in either spelling, replace the field"""
        merged = merge_details(rick_roll, {"author": "Rick Astley", "isStream": True})

        assert merged.author == "Rick Astley"
        assert merged.is_stream is True
        assert merged.is_seekable is False
        assert merged.details == {}

    def test_existing_details_kept(self, rick_roll):
        """Later keys are added to, and override, existing details"""
        base = dataclasses.replace(rick_roll, details={"a": 1, "b": 2})
        merged = merge_details(base, {"b": 3})
        assert merged.details == {"a": 1, "b": 3}
        assert base.details == {"a": 1, "b": 2}

    @pytest.mark.parametrize("key", ["is_seekable", "isSeekable"])
    def test_seekable_rejected(self, rick_roll, key):
        """is_seekable cannot be supplied"""
        with pytest.raises(ValueError):
            merge_details(rick_roll, {key: False})
