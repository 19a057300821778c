"""Pixabay source for CC0-licensed photos and footage."""

import logging
from typing import Optional

from models.content import ContentItem, MediaKind
from services.content_sources.base import ContentSource
from utils.retry import retry_api_call

logger = logging.getLogger(__name__)


class PixabaySource(ContentSource):
    """Pixabay photo and video search.

    API Documentation: https://pixabay.com/api/docs/

    Rate limits: 100 requests per minute
    """

    IMAGE_URL = "https://pixabay.com/api/"
    VIDEO_URL = "https://pixabay.com/api/videos/"

    # Rendition keys in the `videos` dict, best first
    VIDEO_QUALITY_ORDER = ("large", "medium", "small", "tiny")

    def __init__(self, api_key: str = "", per_page: int = 10, **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        # Pixabay requires per_page between 3 and 200
        self.per_page = max(3, min(per_page, 200))

        if not self.api_key:
            logger.warning("[Pixabay] No API key configured. Set PIXABAY_API_KEY to enable Pixabay search.")

    def get_source_name(self) -> str:
        return "pixabay"

    def supported_kinds(self) -> frozenset:
        return frozenset({MediaKind.IMAGE, MediaKind.VIDEO})

    @retry_api_call(max_retries=3, base_delay=1.0)
    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        params = {
            "key": self.api_key,
            "q": query,
            "per_page": self.per_page,
            "safesearch": "true",
        }

        if kind == MediaKind.IMAGE:
            params["image_type"] = "photo"
            data = await self._get_json(self.IMAGE_URL, params=params)
            parsed = (self._parse_image(hit) for hit in data.get("hits") or [])
        else:
            data = await self._get_json(self.VIDEO_URL, params=params)
            parsed = (self._parse_video(hit) for hit in data.get("hits") or [])

        return [item for item in parsed if item]

    @staticmethod
    def _title_from_tags(tags: str) -> Optional[str]:
        if not tags:
            return None
        return " ".join(tags.replace(",", " ").split()[:5]).title()

    def _parse_image(self, hit: dict) -> Optional[ContentItem]:
        image_id = str(hit.get("id", ""))
        url = hit.get("largeImageURL") or hit.get("webformatURL")
        if not image_id or not url:
            return None
        return ContentItem(url=url, source="pixabay", id=image_id, title=self._title_from_tags(hit.get("tags", "")))

    def _parse_video(self, hit: dict) -> Optional[ContentItem]:
        video_id = str(hit.get("id", ""))
        videos = hit.get("videos") or {}
        if not video_id or not videos:
            return None

        url = None
        for quality in self.VIDEO_QUALITY_ORDER:
            rendition = videos.get(quality) or {}
            if rendition.get("url"):
                url = rendition["url"]
                break

        if not url:
            return None
        return ContentItem(url=url, source="pixabay", id=video_id, title=self._title_from_tags(hit.get("tags", "")))
