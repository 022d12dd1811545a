"""Shared fixtures: fake HTTP session/response objects and info bodies."""

import json
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

import pytest
import requests

from tubeloader.core import StreamDescriptor, VideoMetadata

VIDEO_ID = "jdskfjl_ajs"


class FakeResponse:
    """Minimal stand-in for requests.Response used with stream=True."""

    def __init__(self, status_code: int = 200, chunks: Iterable[bytes] = (),
                 text: str = "", headers: Optional[Dict[str, str]] = None,
                 error: Optional[Exception] = None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self._chunks = list(chunks)
        self._error = error
        self.closed = False
        self.iterated = False

    def iter_content(self, chunk_size: int = 1):
        self.iterated = True
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_format(itag: int, width: int = 0, height: int = 0, **extra) -> Dict[str, Any]:
    fmt = {"itag": itag, "url": f"https://media.example/{itag}"}
    if width:
        fmt["width"] = width
    if height:
        fmt["height"] = height
    fmt.update(extra)
    return fmt


def make_player_response(status: str = "OK", formats=None, adaptive_formats=None,
                         details: Optional[Dict[str, Any]] = None,
                         reason: Optional[str] = None) -> Dict[str, Any]:
    playability: Dict[str, Any] = {"status": status}
    if reason:
        playability["reason"] = reason
    streaming: Dict[str, Any] = {}
    if formats is not None:
        streaming["formats"] = formats
    if adaptive_formats is not None:
        streaming["adaptiveFormats"] = adaptive_formats
    return {
        "playabilityStatus": playability,
        "videoDetails": details if details is not None else {
            "videoId": VIDEO_ID,
            "title": "Big Buck Bunny",
            "author": "Blender",
            "viewCount": "12345",
            "keywords": ["animation", "open movie"],
            "shortDescription": "A large rabbit & some rodents.",
            "thumbnail": {"thumbnails": [
                {"url": "https://i.example/default.jpg", "width": 120, "height": 90},
                {"url": "https://i.example/hq.jpg", "width": 480, "height": 360},
            ]},
        },
        "streamingData": streaming,
    }


def make_info_body(player_response: Dict[str, Any], **extra: str) -> str:
    """Encode the way the host does: form-urlencoded pairs, JSON player_response."""
    fields = {"status": "ok", "video_id": VIDEO_ID}
    fields.update(extra)
    fields["player_response"] = json.dumps(player_response)
    return urlencode(fields)


@pytest.fixture
def info_body() -> str:
    return make_info_body(make_player_response(
        formats=[
            make_format(18, 640, 360, quality="medium", qualityLabel="360p",
                        audioChannels=2, fps=30, mimeType='video/mp4; codecs="avc1.42001E, mp4a.40.2"'),
        ],
        adaptive_formats=[
            make_format(137, 1920, 1080, quality="hd1080", qualityLabel="1080p",
                        fps=30, mimeType='video/mp4; codecs="avc1.640028"'),
            make_format(248, 1920, 1080, quality="hd1080", qualityLabel="1080p",
                        fps=30, mimeType='video/webm; codecs="vp9"'),
            make_format(140, quality="tiny", audioChannels=2, mimeType='audio/mp4; codecs="mp4a.40.2"'),
        ],
    ))


@pytest.fixture
def metadata() -> VideoMetadata:
    return VideoMetadata(
        video_id=VIDEO_ID,
        title="Sample",
        streams=(
            StreamDescriptor(itag=18, url="https://media.example/18", width=640, height=360,
                             has_audio=True),
            StreamDescriptor(itag=22, url="https://media.example/22", width=1280, height=720,
                             has_audio=True),
            StreamDescriptor(itag=136, url="https://media.example/136", width=1280, height=720),
            StreamDescriptor(itag=137, url="https://media.example/137", width=1920, height=1080),
            StreamDescriptor(itag=135, url="https://media.example/135", width=854, height=480),
            StreamDescriptor(itag=140, url="https://media.example/140", has_audio=True),
        ),
    )


@pytest.fixture
def connection_reset() -> Exception:
    return requests.exceptions.ChunkedEncodingError("Connection reset by peer")
