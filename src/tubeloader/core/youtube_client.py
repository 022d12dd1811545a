"""YouTube metadata resolution with single-slot caching."""

import logging
from typing import List, Optional

import requests

from .cache import MetadataCache
from .errors import TransportError
from .http import DEFAULT_TIMEOUT, build_session, is_success
from .identifiers import extract_id
from .info_decoder import decode_video_info
from .models import StreamDescriptor, VideoMetadata
from .selector import FilterChain, filter_streams, select_best

logger = logging.getLogger(__name__)

INFO_URL = "https://www.youtube.com/get_video_info"


class YouTubeClient:
    """Resolves one video URL into metadata and stream descriptors.

    The client owns a single-slot cache keyed implicitly by its current URL.
    set_url() clears the cache before any later fetch. Reassigning the URL
    while another thread is fetching through the same client is not
    supported; callers must serialise that.
    """

    def __init__(self, url: str, session: Optional[requests.Session] = None,
                 info_url: str = INFO_URL, timeout: float = DEFAULT_TIMEOUT):
        self._url = url
        self._cache = MetadataCache()
        self.session = session or build_session()
        self.info_url = info_url
        self.timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def set_url(self, url: str) -> None:
        """Point the client at another video and drop any cached metadata."""
        self._cache.reset()
        self._url = url

    @property
    def cache(self) -> MetadataCache:
        return self._cache

    @property
    def video_id(self) -> str:
        return extract_id(self._url)

    def get_video_info(self) -> VideoMetadata:
        """Return the video's metadata, fetching it only when not cached."""
        cached = self._cache.get()
        if cached is not None:
            logger.debug("Using cached metadata for %s", cached.video_id)
            return cached

        video_id = self.video_id
        body = self._fetch_info(video_id)
        metadata = decode_video_info(video_id, body)
        self._cache.store(metadata)
        logger.info("Resolved %s: %r (%d streams)", video_id, metadata.title, len(metadata.streams))
        return metadata

    def _fetch_info(self, video_id: str) -> str:
        params = {"html5": "1", "video_id": video_id}
        logger.debug("Fetching video info for %s from %s", video_id, self.info_url)
        try:
            response = self.session.get(self.info_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(
                f"Failed to fetch video info for {video_id}: {e}", url=self.info_url
            ) from e

        if not is_success(response.status_code):
            raise TransportError(
                f"HTTP {response.status_code} fetching video info for {video_id}",
                url=self.info_url,
                status_code=response.status_code,
            )
        return response.text

    def get_streams(self, filters: Optional[FilterChain] = None) -> List[StreamDescriptor]:
        """Streams of the current video that satisfy every filter rule."""
        return filter_streams(self.get_video_info(), filters)

    def get_best_stream(self, filters: Optional[FilterChain] = None) -> StreamDescriptor:
        """Highest resolution stream of the current video after filtering."""
        return select_best(self.get_video_info(), filters)
