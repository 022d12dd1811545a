"""Data models for video metadata, streams and stream filters."""

import operator
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

_EXTENSION_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9.+-]*")
# Two-character symbols come first so ">=" at a position wins over ">".
_OPERATOR_PATTERN = re.compile(r"==|!=|<=|>=|<|>")


@dataclass(frozen=True)
class Thumbnail:
    """A preview image of a video."""
    url: str
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class StreamDescriptor:
    """Represents a single downloadable media stream."""
    itag: int = 0
    url: str = ""
    width: int = 0
    height: int = 0
    quality: str = "low"
    quality_label: str = "320p"
    fps: int = 0
    has_audio: bool = False
    mime_type: str = ""  # e.g. 'video/mp4; codecs="avc1.42001E, mp4a.40.2"'

    @property
    def resolution(self) -> str:
        if self.width and self.height:
            return f"{self.width}x{self.height}"
        return "N/A"

    @property
    def is_video_only(self) -> bool:
        return self.width > 0 and self.height > 0 and not self.has_audio

    @property
    def extension(self) -> str:
        """File extension derived from the mime type, 'mp4' when unknown."""
        media_type = self.mime_type.split(";", 1)[0].strip()
        if "/" in media_type:
            subtype = media_type.split("/", 1)[1].strip()
            if _EXTENSION_PATTERN.fullmatch(subtype):
                return subtype
        return "mp4"


@dataclass(frozen=True)
class VideoMetadata:
    """Metadata for a single video."""
    video_id: str
    title: str = ""
    keywords: Tuple[str, ...] = ()
    thumbnails: Tuple[Thumbnail, ...] = ()
    view_count: int = 0
    creator: str = ""
    short_description: str = ""
    streams: Tuple[StreamDescriptor, ...] = ()

    @property
    def best_thumbnail(self) -> Optional[Thumbnail]:
        if not self.thumbnails:
            return None
        return max(self.thumbnails, key=lambda t: t.width * t.height)


class StreamField(Enum):
    """Filterable stream attributes, each with the attribute name and its type."""
    ITAG = ("itag", int)
    URL = ("url", str)
    WIDTH = ("width", int)
    HEIGHT = ("height", int)
    QUALITY = ("quality", str)
    QUALITY_LABEL = ("quality_label", str)
    FPS = ("fps", int)
    HAS_AUDIO = ("has_audio", bool)
    MIME_TYPE = ("mime_type", str)

    def __init__(self, attribute: str, value_type: type):
        self.attribute = attribute
        self.value_type = value_type

    @classmethod
    def lookup(cls, name) -> "StreamField":
        """Resolve a member from itself, its member name or attribute name.

        The host's camelCase spelling ('qualityLabel', 'hasAudio') is accepted too.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        normalized = "".join(
            "_" + c.lower() if c.isupper() else c for c in key
        ).lstrip("_").lower()
        for member in cls:
            if key.upper() == member.name or normalized == member.attribute:
                return member
        raise ValueError(f"Unknown stream field: {name!r}")

    def coerce(self, value: Any) -> Any:
        """Convert a comparison value to this field's type."""
        if self.value_type is bool:
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in ("true", "yes", "1"):
                    return True
                if lowered in ("false", "no", "0"):
                    return False
                raise ValueError(f"Expected a boolean for {self.attribute}, got {value!r}")
            return bool(value)
        if self.value_type is int:
            if isinstance(value, bool):
                raise ValueError(f"Expected an integer for {self.attribute}, got {value!r}")
            try:
                return int(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(
                    f"Expected an integer for {self.attribute}, got {value!r}"
                ) from exc
        return str(value)

    def read(self, stream: StreamDescriptor) -> Any:
        return getattr(stream, self.attribute)


class Operator(Enum):
    """Comparison operators usable in a filter rule."""
    EQUAL = ("==", operator.eq)
    NOT_EQUAL = ("!=", operator.ne)
    LESS = ("<", operator.lt)
    GREATER = (">", operator.gt)
    LESS_OR_EQUAL = ("<=", operator.le)
    GREATER_OR_EQUAL = (">=", operator.ge)

    def __init__(self, symbol: str, compare: Callable[[Any, Any], bool]):
        self.symbol = symbol
        self.compare = compare

    @classmethod
    def lookup(cls, name) -> "Operator":
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for member in cls:
            if key == member.symbol or key.upper() == member.name:
                return member
        raise ValueError(f"Unknown comparison operator: {name!r}")


@dataclass(frozen=True)
class FilterRule:
    """One (operator, field, value) condition a stream must satisfy."""
    op: Operator
    field: StreamField
    value: Any

    def __post_init__(self):
        # Accept names, symbols and loosely typed values.
        object.__setattr__(self, "op", Operator.lookup(self.op))
        object.__setattr__(self, "field", StreamField.lookup(self.field))
        object.__setattr__(self, "value", self.field.coerce(self.value))

    @classmethod
    def from_triple(cls, rule) -> "FilterRule":
        if isinstance(rule, cls):
            return rule
        try:
            op, field, value = rule
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Filter rule must be an (operator, field, value) triple, got {rule!r}"
            ) from exc
        return cls(op, field, value)

    @classmethod
    def parse(cls, expression: str) -> "FilterRule":
        """Parse a textual rule such as 'height>=720' or 'has_audio==true'."""
        # Split at the first operator; the value may contain operator characters.
        match = _OPERATOR_PATTERN.search(expression)
        if match:
            field = expression[:match.start()].strip()
            value = expression[match.end():].strip()
            if field and value:
                return cls(Operator.lookup(match.group(0)), field, value)
        raise ValueError(f"Cannot parse filter rule: {expression!r}")

    def matches(self, stream: StreamDescriptor) -> bool:
        return self.op.compare(self.field.read(stream), self.value)

    def __str__(self) -> str:
        return f"{self.field.attribute}{self.op.symbol}{self.value}"
