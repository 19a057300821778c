"""Content sources package for multi-provider image and video acquisition."""

from services.content_sources.base import ContentSource
from services.content_sources.pexels import PexelsSource, select_best_rendition
from services.content_sources.pixabay import PixabaySource
from services.content_sources.unsplash import UnsplashSource
from services.content_sources.youtube import YouTubeSource

__all__ = [
    "ContentSource",
    "PexelsSource",
    "PixabaySource",
    "UnsplashSource",
    "YouTubeSource",
    "select_best_rendition",
]
