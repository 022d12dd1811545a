"""Decoding of the host's get_video_info response."""

import json
import logging
from typing import Any, Dict, List
from urllib.parse import unquote_plus

from .errors import MalformedInfoResponse, VideoNotFound, VideoUnplayable
from .models import StreamDescriptor, Thumbnail, VideoMetadata

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_UNPLAYABLE = "UNPLAYABLE"


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _unquote(raw: str) -> str:
    try:
        return unquote_plus(raw, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedInfoResponse(f"Invalid percent-encoding in {raw[:80]!r}: {e}") from e


def _decode_value(raw: str) -> Any:
    """Decode a form-urlencoded value, parsing it as JSON when it is valid JSON."""
    text = _unquote(raw)
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def parse_video_info(body: str) -> Dict[str, Any]:
    """Parse an ampersand-delimited key=value body into a flat dict.

    Keys and values are decoded with application/x-www-form-urlencoded rules
    ('+' is a space). Values that are valid JSON are replaced by the parsed
    JSON value. Pairs are split on the first '=' only and never re-split
    after decoding. Invalid UTF-8 escapes raise MalformedInfoResponse.
    """
    result: Dict[str, Any] = {}
    for pair in body.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        result[_unquote(key)] = _decode_value(value)
    return result


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any, default: int = 0) -> int:
    """Non-negative integer from a JSON number or numeric string."""
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def _stream_from_format(fmt: Dict[str, Any]) -> StreamDescriptor:
    return StreamDescriptor(
        itag=_as_int(fmt.get("itag")),
        url=_as_str(fmt.get("url")),
        width=_as_int(fmt.get("width")),
        height=_as_int(fmt.get("height")),
        quality=_as_str(fmt.get("quality"), "low"),
        quality_label=_as_str(fmt.get("qualityLabel"), "320p"),
        fps=_as_int(fmt.get("fps")),
        has_audio=_as_int(fmt.get("audioChannels")) > 0,
        mime_type=_as_str(fmt.get("mimeType")),
    )


def _thumbnail(entry: Dict[str, Any]) -> Thumbnail:
    return Thumbnail(
        url=_as_str(entry.get("url")),
        width=_as_int(entry.get("width")),
        height=_as_int(entry.get("height")),
    )


def check_playability(video_id: str, player_response: Dict[str, Any]) -> None:
    """Raise unless the player response reports the video as playable."""
    status_info = _as_dict(player_response.get("playabilityStatus"))
    status = status_info.get("status")
    if status == STATUS_OK:
        return
    reason = status_info.get("reason")
    logger.warning("Video %s is not playable: status=%s reason=%s", video_id, status, reason)
    if status == STATUS_UNPLAYABLE:
        raise VideoUnplayable(video_id, status, reason)
    raise VideoNotFound(video_id, status, reason)


def decode_video_info(video_id: str, body: str) -> VideoMetadata:
    """Decode a raw info response into a VideoMetadata record."""
    info = parse_video_info(body)
    player_response = info.get("player_response")
    if not isinstance(player_response, dict):
        logger.warning("Info response for %s has no player_response", video_id)
        raise VideoNotFound(video_id, reason="missing player_response")

    check_playability(video_id, player_response)

    details = _as_dict(player_response.get("videoDetails"))
    streaming_data = _as_dict(player_response.get("streamingData"))

    formats = _as_list(streaming_data.get("formats")) + _as_list(
        streaming_data.get("adaptiveFormats")
    )
    streams = tuple(_stream_from_format(f) for f in formats if isinstance(f, dict))
    thumbnails = tuple(
        _thumbnail(t)
        for t in _as_list(_as_dict(details.get("thumbnail")).get("thumbnails"))
        if isinstance(t, dict)
    )

    metadata = VideoMetadata(
        video_id=video_id,
        title=_as_str(details.get("title")),
        keywords=tuple(_as_str(k) for k in _as_list(details.get("keywords"))),
        thumbnails=thumbnails,
        view_count=_as_int(details.get("viewCount")),
        creator=_as_str(details.get("author")),
        short_description=_as_str(details.get("shortDescription")),
        streams=streams,
    )
    logger.debug(
        "Decoded video %s: %r with %d streams", video_id, metadata.title, len(streams)
    )
    return metadata
