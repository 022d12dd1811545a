"""Streamed media downloads with cleanup on failure."""

import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

import requests

from .errors import DownloadError, NoStreamAvailable, TransportError
from .http import DEFAULT_TIMEOUT, is_success
from .models import StreamDescriptor
from .selector import FilterChain
from .youtube_client import YouTubeClient

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 64

ProgressCallback = Callable[[float, int, int], None]
PathLike = Union[str, Path]


class DownloadState(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class _Transfer:
    """Tracks one download's terminal outcome.

    Whatever goes wrong first (bad status, stream error, sink error,
    cancellation) commits the outcome; a transfer is committed exactly once.
    """

    def __init__(self, url: str, destination: Path):
        self.url = url
        self.destination = destination
        self.state = DownloadState.PENDING
        self.file_opened = False
        self.bytes_written = 0

    def _commit(self, state: DownloadState) -> None:
        if self.state is not DownloadState.PENDING:
            raise RuntimeError(
                f"Download of {self.url} already finished as {self.state.value}"
            )
        self.state = state

    def succeed(self) -> None:
        self._commit(DownloadState.SUCCEEDED)

    def fail(self) -> None:
        self._commit(DownloadState.FAILED)
        if self.file_opened:
            self._remove_partial_file()

    def _remove_partial_file(self) -> None:
        try:
            self.destination.unlink(missing_ok=True)
            logger.debug("Removed partial download %s", self.destination)
        except OSError as e:
            # best-effort
            logger.debug("Could not remove partial download %s: %s", self.destination, e)


class StreamDownloader:
    """Downloads selected streams of a video to local files.

    Each download is a single streamed GET whose body is copied chunk by
    chunk into the destination. On any failure after the file was opened
    the partial file is deleted.
    """

    def __init__(self, client: YouTubeClient, download_path: Optional[PathLike] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE, timeout: float = DEFAULT_TIMEOUT,
                 progress_callback: Optional[ProgressCallback] = None,
                 session: Optional[requests.Session] = None):
        self.client = client
        self.download_path = Path(download_path) if download_path is not None else None
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.progress_callback = progress_callback
        self.session = session or client.session

        self._stop_event = threading.Event()

    def stop(self):
        """Abandon the running download; its partial file is removed."""
        self._stop_event.set()

    def _resolve_destination(self, destination: Optional[PathLike]) -> Path:
        if destination is not None:
            return Path(destination)
        if self.download_path is None:
            raise ValueError("No destination given and no default download_path set")
        return self.download_path

    def download(self, stream: StreamDescriptor,
                 destination: Optional[PathLike] = None) -> Path:
        """Download *stream* to *destination* and return the written path.

        Raises TransportError when the request fails or the server answers
        with a non-2xx status; the destination is left untouched then.
        Raises DownloadError when the transfer breaks off after writing
        started, and re-raises OSError when the file cannot be written.
        """
        output_path = self._resolve_destination(destination)
        transfer = _Transfer(stream.url, output_path)
        self._stop_event.clear()

        logger.info("Downloading itag %s to %s", stream.itag, output_path)
        try:
            response = self.session.get(stream.url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            transfer.fail()
            raise TransportError(f"Request for {stream.url} failed: {e}", url=stream.url) from e

        with response:
            if not is_success(response.status_code):
                transfer.fail()
                raise TransportError(
                    f"HTTP {response.status_code} downloading {stream.url}",
                    url=stream.url,
                    status_code=response.status_code,
                )
            total = _content_length(response)

            try:
                self._copy_body(response, transfer, total)
            except requests.RequestException as e:
                transfer.fail()
                raise DownloadError(f"Download of {stream.url} failed: {e}", url=stream.url) from e
            except BaseException:
                # File-system errors, cancellation and interrupts propagate unchanged.
                transfer.fail()
                raise

        transfer.succeed()
        logger.info("Download completed: %s (%d bytes)", output_path, transfer.bytes_written)
        if self.progress_callback and total:
            self.progress_callback(100.0, transfer.bytes_written, total)
        return output_path

    def _copy_body(self, response: requests.Response, transfer: _Transfer, total: int) -> None:
        output_path = transfer.destination
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            transfer.file_opened = True
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if self._stop_event.is_set():
                    raise DownloadError(f"Download of {transfer.url} was cancelled", url=transfer.url)
                if chunk:
                    f.write(chunk)
                    transfer.bytes_written += len(chunk)
                    self._report_progress(transfer.bytes_written, total)
            f.flush()
            os.fsync(f.fileno())

        if total and transfer.bytes_written < total:
            raise DownloadError(
                f"Download incomplete: expected {total} bytes, got {transfer.bytes_written}",
                url=transfer.url,
            )

    def _report_progress(self, current: int, total: int) -> None:
        if self.progress_callback and total > 0:
            percent = (current / total) * 100
            self.progress_callback(percent, current, total)

    def download_at_index(self, index: int,
                          destination: Optional[PathLike] = None) -> Path:
        """Download the stream at *index* of the video's stream list."""
        streams = self.client.get_video_info().streams
        if index < 0 or index >= len(streams):
            raise NoStreamAvailable(
                f"No stream at index {index}; video has {len(streams)} streams"
            )
        return self.download(streams[index], destination)

    def download_best(self, filters: Optional[FilterChain] = None,
                      destination: Optional[PathLike] = None) -> Path:
        """Download the highest resolution stream passing *filters*."""
        return self.download(self.client.get_best_stream(filters), destination)


def _content_length(response: requests.Response) -> int:
    try:
        return int(response.headers.get("content-length", 0))
    except (TypeError, ValueError):
        return 0
