"""Data models for content acquisition and render planning."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class MediaKind(str, Enum):
    """What a provider is asked to search for."""

    IMAGE = "image"
    VIDEO = "video"


class MediaType(str, Enum):
    """Classification of an entry in the media plan."""

    IMAGE = "image"
    VIDEO = "video"
    UNKNOWN = "unknown"


@dataclass
class ContentItem:
    """A search hit from any provider.

    Identity is (source, id); a provider never returns the same id twice
    in one result set.
    """

    url: str  # Direct file URL, or page URL for remote-only providers
    source: str  # pexels, unsplash, youtube, pixabay
    id: str
    title: Optional[str] = None

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.source, self.id)


@dataclass
class DownloadedItem(ContentItem):
    """A ContentItem after the download step.

    Remote-only items keep their URL as local_path and are never
    materialized on disk.
    """

    local_path: Optional[str] = None
    is_remote_only: bool = False

    @classmethod
    def from_item(
        cls, item: ContentItem, local_path: Optional[str], is_remote_only: bool = False
    ) -> "DownloadedItem":
        return cls(
            url=item.url,
            source=item.source,
            id=item.id,
            title=item.title,
            local_path=local_path,
            is_remote_only=is_remote_only,
        )


@dataclass
class SearchOutcome:
    """Result of one provider search: "no results" vs "call failed"."""

    source: str
    kind: MediaKind
    items: List[ContentItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class DownloadOutcome:
    """Result of materializing one ContentItem."""

    item: ContentItem
    downloaded: Optional[DownloadedItem] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.downloaded is None


@dataclass
class ContentBundle:
    """Downloaded images and videos for one request, in merge order."""

    images: List[DownloadedItem] = field(default_factory=list)
    videos: List[DownloadedItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.images and not self.videos


@dataclass(frozen=True)
class MediaPlanEntry:
    """One visual in the render job."""

    path: str
    media_type: MediaType

    def to_dict(self) -> dict:
        return {"path": self.path, "type": self.media_type.value}


@dataclass(frozen=True)
class RenderJob:
    """Complete, renderer-agnostic description of one video to produce."""

    media: Tuple[MediaPlanEntry, ...]
    narration: str
    title: str
    output_path: str

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "media", tuple(self.media))

    def to_dict(self) -> dict:
        return {
            "media": [entry.to_dict() for entry in self.media],
            "narration": self.narration,
            "title": self.title,
            "output_path": self.output_path,
        }


@dataclass
class RenderResult:
    """Outcome of a full pipeline run, as reported to the caller."""

    success: bool
    video_path: Optional[str] = None
    error: Optional[str] = None

    def to_response(self) -> dict:
        """Build the inbound API response body."""
        response = {"success": self.success}
        if self.success:
            response["videoPath"] = self.video_path
        else:
            response["error"] = self.error
        return response
