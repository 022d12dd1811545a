"""Output path helpers."""

import re
from pathlib import Path

from ..core.models import StreamDescriptor, VideoMetadata


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid in file names on common platforms."""
    name = re.sub(r'[\\/:"*?<>|]+', "_", name)
    name = re.sub(r"\s+", " ", name).strip().strip(".")
    return name[:200] or "video"


def default_output_path(directory: Path, metadata: VideoMetadata,
                        stream: StreamDescriptor) -> Path:
    """Build '<directory>/<title>-<itag>.<ext>' for a stream of a video."""
    title = sanitize_filename(metadata.title or metadata.video_id)
    return Path(directory) / f"{title}-{stream.itag}.{stream.extension}"
