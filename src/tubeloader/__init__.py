"""Resolve video page URLs into quality-tagged streams and download them."""

from .core import (
    YouTubeClient,
    StreamDownloader,
    FilterRule,
    StreamDescriptor,
    VideoMetadata,
    TubeLoaderError,
)
from .version import __version__

__all__ = [
    "YouTubeClient",
    "StreamDownloader",
    "FilterRule",
    "StreamDescriptor",
    "VideoMetadata",
    "TubeLoaderError",
    "__version__",
]
