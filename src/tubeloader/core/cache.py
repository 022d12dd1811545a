"""Single-slot metadata cache owned by a loader."""

import logging
from enum import Enum
from typing import Optional

from .models import VideoMetadata

logger = logging.getLogger(__name__)


class CacheState(Enum):
    UNCACHED = "uncached"
    CACHED = "cached"


class MetadataCache:
    """Holds at most one VideoMetadata record.

    Transitions are explicit: store() moves to CACHED, reset() back to
    UNCACHED. Only fully decoded records are ever stored.
    """

    def __init__(self):
        self._record: Optional[VideoMetadata] = None

    @property
    def state(self) -> CacheState:
        return CacheState.UNCACHED if self._record is None else CacheState.CACHED

    def get(self) -> Optional[VideoMetadata]:
        return self._record

    def store(self, record: VideoMetadata) -> None:
        if not isinstance(record, VideoMetadata):
            raise TypeError(f"Expected VideoMetadata, got {type(record).__name__}")
        self._record = record

    def reset(self) -> None:
        if self._record is not None:
            logger.debug("Dropping cached metadata for %s", self._record.video_id)
        self._record = None
