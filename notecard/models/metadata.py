"""
Metadata extraction data models.
Shared by the classifier, the per-category extractors and the HTTP layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_TITLE = "Untitled"


class Category(Enum):
    """Extractor chosen for a URL."""
    VIDEO = "video"
    LINK_POST = "link_post"
    MICROBLOG = "microblog"
    MUSIC = "music"
    MOVIE = "movie"
    BOOK = "book"
    GENERIC = "generic"


class ContentType(Enum):
    """Content type tag that drives the card's embed/render strategy."""
    VIDEO = "video"
    ARTICLE = "article"
    LINK_POST = "link_post"
    MICROBLOG = "microblog"
    MUSIC = "music"
    MOVIE = "movie"
    BOOK = "book"
    AUDIO_STREAM = "audio_stream"
    GENERIC = "generic"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "ContentType":
        """Map a raw type tag onto the closed set, defaulting to GENERIC."""
        try:
            return cls(tag)
        except ValueError:
            return cls.GENERIC


class ExtractionStatus(Enum):
    """Status of metadata extraction."""
    SUCCESS = "success"
    INVALID_URL = "invalid_url"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractionRequest:
    """Request data for metadata extraction."""
    url: str
    want_screenshot: bool = False


@dataclass
class RawMetadata:
    """Metadata as produced by a single extractor, before normalization."""
    type: str
    title: Optional[str] = None
    author: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class NormalizedMetadata:
    """Display metadata for a saved URL."""
    type: ContentType
    title: str
    author: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None
    extra_metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_raw(cls, raw: RawMetadata) -> "NormalizedMetadata":
        """Trim string fields, apply the title default and map the type tag."""
        return cls(
            type=ContentType.from_tag(raw.type),
            title=_clean(raw.title) or DEFAULT_TITLE,
            author=_clean(raw.author),
            thumbnail_url=_clean(raw.thumbnail_url),
            duration=_clean(raw.duration),
            description=_clean(raw.description),
            extra_metadata=dict(raw.extra) if raw.extra else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used by the HTTP API."""
        return {
            "type": self.type.value,
            "title": self.title,
            "author": self.author,
            "thumbnailUrl": self.thumbnail_url,
            "duration": self.duration,
            "description": self.description,
            "metadata": self.extra_metadata,
        }


@dataclass
class ExtractionResult:
    """Response from metadata extraction."""
    status: ExtractionStatus
    metadata: Optional[NormalizedMetadata] = None
    error_message: str = ""
    category: Optional[Category] = None
    processing_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == ExtractionStatus.SUCCESS
