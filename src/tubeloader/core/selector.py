"""Stream filtering and best-quality selection."""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import NoStreamAvailable
from .models import FilterRule, StreamDescriptor, VideoMetadata

logger = logging.getLogger(__name__)

FilterChain = Iterable[Union[FilterRule, Tuple[Any, Any, Any]]]


def build_rules(filters: Optional[FilterChain]) -> List[FilterRule]:
    """Normalise a filter chain into FilterRule objects."""
    if not filters:
        return []
    return [FilterRule.from_triple(rule) for rule in filters]


def matches_all(stream: StreamDescriptor, rules: Sequence[FilterRule]) -> bool:
    return all(rule.matches(stream) for rule in rules)


def filter_streams(metadata: VideoMetadata,
                   filters: Optional[FilterChain] = None) -> List[StreamDescriptor]:
    """Return the streams satisfying every rule, in their original order."""
    rules = build_rules(filters)
    if not rules:
        return list(metadata.streams)
    return [s for s in metadata.streams if matches_all(s, rules)]


def is_better(candidate: StreamDescriptor, current: StreamDescriptor) -> bool:
    # Both dimensions must grow; a wider-only or taller-only stream never wins.
    return candidate.width > current.width and candidate.height > current.height


def select_best(metadata: VideoMetadata,
                filters: Optional[FilterChain] = None) -> StreamDescriptor:
    """Pick the highest resolution stream among those passing the filters."""
    candidates = filter_streams(metadata, filters)
    if not candidates:
        raise NoStreamAvailable(
            f"No stream of video {metadata.video_id} matches the given filters"
        )

    best = candidates[0]
    for stream in candidates[1:]:
        if is_better(stream, best):
            best = stream

    logger.debug(
        "Selected itag %s (%s) for %s", best.itag, best.resolution, metadata.video_id
    )
    return best
