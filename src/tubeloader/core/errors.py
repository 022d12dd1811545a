"""Exceptions raised while resolving and downloading videos."""

from typing import Optional


class TubeLoaderError(Exception):
    """Base class for all tubeloader errors."""


class IdentifierNotFound(TubeLoaderError, ValueError):
    """Raised when no 11-character video identifier can be found in a URL."""

    def __init__(self, url):
        super().__init__(f"No video ID found in {url!r}")
        self.url = url


class TransportError(TubeLoaderError):
    """Raised when an HTTP call fails or answers with a non-2xx status."""

    def __init__(self, message: str, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedInfoResponse(TubeLoaderError, ValueError):
    """Raised when the info response body cannot be decoded."""


class PlayabilityError(TubeLoaderError):
    """Raised when the host refuses to play a video."""

    def __init__(self, video_id: str, status: Optional[str] = None,
                 reason: Optional[str] = None):
        message = f"Video {video_id} is not playable"
        if status:
            message += f" (status {status})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.video_id = video_id
        self.status = status
        self.reason = reason


class VideoNotFound(PlayabilityError):
    """Raised when the host reports the video as missing or unavailable."""


class VideoUnplayable(PlayabilityError):
    """Raised when the host reports the video as UNPLAYABLE."""


class NoStreamAvailable(TubeLoaderError, LookupError):
    """Raised when filtering or selection leaves no stream to pick."""


class DownloadError(TubeLoaderError):
    """Raised when a streamed download fails after the transfer started."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
