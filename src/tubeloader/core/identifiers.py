"""Video identifier extraction."""

import re

from .errors import IdentifierNotFound

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# Substring match, so query (?v=ID), short-link (/ID) and embed forms all work.
_VIDEO_ID_PATTERN = re.compile(r"[a-z0-9_-]{11}", re.IGNORECASE)


def extract_id(url: str) -> str:
    """Return the first 11-character video ID found anywhere in *url*."""
    if not isinstance(url, str):
        raise IdentifierNotFound(url)
    match = _VIDEO_ID_PATTERN.search(url)
    if not match:
        raise IdentifierNotFound(url)
    return match.group(0)


def is_valid_id(value: str) -> bool:
    """Check whether *value* is itself a bare video ID."""
    return isinstance(value, str) and bool(_VIDEO_ID_PATTERN.fullmatch(value))


def build_url(video_id: str) -> str:
    """Build the canonical watch URL for a video ID."""
    return WATCH_URL.format(video_id=video_id)
