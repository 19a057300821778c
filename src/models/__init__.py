# Data models for reelsmith
from .content import (
    ContentBundle,
    ContentItem,
    DownloadedItem,
    DownloadOutcome,
    MediaKind,
    MediaPlanEntry,
    MediaType,
    RenderJob,
    RenderResult,
    SearchOutcome,
)

__all__ = [
    "ContentBundle",
    "ContentItem",
    "DownloadedItem",
    "DownloadOutcome",
    "MediaKind",
    "MediaPlanEntry",
    "MediaType",
    "RenderJob",
    "RenderResult",
    "SearchOutcome",
]
