"""Unsplash image source."""

import logging
from typing import Optional

from models.content import ContentItem, MediaKind
from services.content_sources.base import ContentSource
from utils.retry import retry_api_call

logger = logging.getLogger(__name__)


class UnsplashSource(ContentSource):
    """Unsplash photo search.

    API Documentation: https://unsplash.com/documentation#search-photos

    Authenticates with a "Client-ID <access key>" header. Demo apps are
    limited to 50 requests per hour.
    """

    BASE_URL = "https://api.unsplash.com/search/photos"

    def __init__(self, api_key: str = "", per_page: int = 15, **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        self.per_page = min(per_page, 30)  # Unsplash API limit

        if not self.api_key:
            logger.warning("[Unsplash] No API key configured. Set UNSPLASH_API_KEY to enable Unsplash search.")

    def get_source_name(self) -> str:
        return "unsplash"

    def supported_kinds(self) -> frozenset:
        return frozenset({MediaKind.IMAGE})

    @retry_api_call(max_retries=3, base_delay=1.0)
    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        data = await self._get_json(
            self.BASE_URL,
            params={"query": query, "per_page": self.per_page},
            headers={"Authorization": f"Client-ID {self.api_key}"},
        )
        parsed = (self._parse_photo(photo) for photo in data.get("results") or [])
        return [item for item in parsed if item]

    def _parse_photo(self, photo: dict) -> Optional[ContentItem]:
        photo_id = str(photo.get("id") or "")
        urls = photo.get("urls") or {}
        url = urls.get("full") or urls.get("regular")
        if not photo_id or not url:
            return None

        title = photo.get("description") or photo.get("alt_description")
        return ContentItem(url=url, source="unsplash", id=photo_id, title=title[:100] if title else None)
