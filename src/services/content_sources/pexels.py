"""Pexels source for CC0-licensed stock photos and footage."""

import logging
from typing import Optional

from models.content import ContentItem, MediaKind
from services.content_sources.base import ContentSource
from utils.retry import retry_api_call

logger = logging.getLogger(__name__)


def select_best_rendition(renditions: list[dict]) -> Optional[dict]:
    """Pick the highest-quality rendition of a multi-file video.

    Total order: an explicit "hd" quality flag wins, then the greatest
    height, then the earliest position in the list.

    Args:
        renditions: Pexels `video_files` entries

    Returns:
        The chosen rendition, or None for an empty list
    """
    candidates = [r for r in renditions if isinstance(r, dict) and r.get("link")]
    if not candidates:
        return None

    def rank(indexed: tuple[int, dict]) -> tuple:
        index, rendition = indexed
        height = rendition.get("height") or 0
        return (rendition.get("quality") == "hd", height, -index)

    return max(enumerate(candidates), key=rank)[1]


class PexelsSource(ContentSource):
    """Pexels photo and video search.

    API Documentation: https://www.pexels.com/api/documentation/

    Rate limits: 200 requests per hour, 20,000 requests per month
    """

    PHOTO_URL = "https://api.pexels.com/v1/search"
    VIDEO_URL = "https://api.pexels.com/videos/search"

    def __init__(
        self,
        api_key: str = "",
        images_per_page: int = 15,
        videos_per_page: int = 10,
        **kwargs,
    ):
        super().__init__(api_key=api_key, **kwargs)
        self.images_per_page = min(images_per_page, 80)  # Pexels API limit
        self.videos_per_page = min(videos_per_page, 80)

        if not self.api_key:
            logger.warning("[Pexels] No API key configured. Set PEXELS_API_KEY to enable Pexels search.")

    def get_source_name(self) -> str:
        return "pexels"

    def supported_kinds(self) -> frozenset:
        return frozenset({MediaKind.IMAGE, MediaKind.VIDEO})

    @retry_api_call(max_retries=3, base_delay=1.0)
    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        headers = {"Authorization": self.api_key}

        if kind == MediaKind.IMAGE:
            data = await self._get_json(
                self.PHOTO_URL,
                params={"query": query, "per_page": self.images_per_page},
                headers=headers,
            )
            parsed = (self._parse_photo(photo) for photo in data.get("photos") or [])
        else:
            data = await self._get_json(
                self.VIDEO_URL,
                params={"query": query, "per_page": self.videos_per_page},
                headers=headers,
            )
            parsed = (self._parse_video(video) for video in data.get("videos") or [])

        return [item for item in parsed if item]

    def _parse_photo(self, photo: dict) -> Optional[ContentItem]:
        """Parse a Pexels photo into a ContentItem, or None if unusable."""
        photo_id = str(photo.get("id", ""))
        src = photo.get("src") or {}
        url = src.get("original") or src.get("large2x") or src.get("large")
        if not photo_id or not url:
            return None

        alt_text = photo.get("alt") or ""
        return ContentItem(
            url=url,
            source="pexels",
            id=photo_id,
            title=alt_text[:100] or None,
        )

    def _parse_video(self, video: dict) -> Optional[ContentItem]:
        """Parse a Pexels video, keeping only its best rendition."""
        video_id = str(video.get("id", ""))
        if not video_id:
            return None

        best = select_best_rendition(video.get("video_files") or [])
        if best is None:
            logger.debug(f"[Pexels] Video {video_id} has no downloadable renditions")
            return None

        # Pexels page URLs look like https://www.pexels.com/video/title-here-12345/
        page_url = video.get("url") or ""
        slug = page_url.rstrip("/").split("/")[-1] if page_url else ""
        if slug.endswith(f"-{video_id}"):
            slug = slug[: -len(f"-{video_id}")]
        title = slug.replace("-", " ").title() or None

        return ContentItem(url=best["link"], source="pexels", id=video_id, title=title)
