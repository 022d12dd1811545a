"""Core functionality for tubeloader."""

from .errors import (
    TubeLoaderError,
    IdentifierNotFound,
    TransportError,
    MalformedInfoResponse,
    PlayabilityError,
    VideoNotFound,
    VideoUnplayable,
    NoStreamAvailable,
    DownloadError,
)
from .models import (
    Thumbnail,
    StreamDescriptor,
    VideoMetadata,
    StreamField,
    Operator,
    FilterRule,
)
from .identifiers import extract_id, build_url, is_valid_id
from .info_decoder import parse_video_info, decode_video_info
from .cache import MetadataCache, CacheState
from .selector import filter_streams, select_best
from .youtube_client import YouTubeClient
from .downloader import StreamDownloader, DownloadState

__all__ = [
    "TubeLoaderError",
    "IdentifierNotFound",
    "TransportError",
    "MalformedInfoResponse",
    "PlayabilityError",
    "VideoNotFound",
    "VideoUnplayable",
    "NoStreamAvailable",
    "DownloadError",
    "Thumbnail",
    "StreamDescriptor",
    "VideoMetadata",
    "StreamField",
    "Operator",
    "FilterRule",
    "extract_id",
    "build_url",
    "is_valid_id",
    "parse_video_info",
    "decode_video_info",
    "MetadataCache",
    "CacheState",
    "filter_streams",
    "select_best",
    "YouTubeClient",
    "StreamDownloader",
    "DownloadState",
]
