"""Test configuration and fixtures"""

import logging
import tempfile
from pathlib import Path

import pytest

from track_codec.codec import TrackInfo
from track_codec.core.logger import shutdown_logging


RICK_ROLL_ENCODED = (
    "QAAAjQIAJVJpY2sgQXN0bGV5IC0gTmV2ZXIgR29ubmEgR2l2ZSBZb3UgVXAADlJpY2tBc3RsZXlWRVZP"
    "AAAAAAADPCAAC2RRdzR3OVdnWGNRAAEAK2h0dHBzOi8vd3d3LnlvdXR1YmUuY29tL3dhdGNoP3Y9ZFF3"
    "NHc5V2dYY1EAB3lvdXR1YmUAAAAAAAAAAA=="
)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def rick_roll_encoded():
    """Base64 track as returned by a Lavalink server"""
    return RICK_ROLL_ENCODED


@pytest.fixture
def rick_roll_info_dict():
    """Lavalink REST 'info' object for the encoded track"""
    return {
        "title": "Rick Astley - Never Gonna Give You Up",
        "author": "RickAstleyVEVO",
        "length": 212000,
        "identifier": "dQw4w9WgXcQ",
        "isStream": False,
        "isSeekable": True,
        "uri": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "sourceName": "youtube",
        "position": 0,
    }


@pytest.fixture
def rick_roll():
    """TrackInfo for the encoded track"""
    return TrackInfo(
        title="Rick Astley - Never Gonna Give You Up",
        author="RickAstleyVEVO",
        length=212000,
        identifier="dQw4w9WgXcQ",
        is_stream=False,
        uri="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        source_name="youtube",
        position=0,
    )


@pytest.fixture
def live_stream():
    """A live stream track with no URI and a non-zero position"""
    return TrackInfo(
        title="Lofi Radio 24/7 \U0001f3a7",
        author="Lofi Girl",
        length=9223372036854775807,
        identifier="jfKfPfyJRdk",
        is_stream=True,
        uri=None,
        source_name="youtube",
        position=123456,
    )


@pytest.fixture
def clean_logging():
    """Tear down any handlers a test installed on the root logger"""
    yield
    shutdown_logging()
    logging.getLogger().setLevel(logging.WARNING)
