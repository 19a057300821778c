"""YouTube video source using the YouTube Data API v3.

YouTube exposes no direct file URL, so its items are remote-only: they are
kept by watch-page reference and never downloaded.
"""

import logging
from typing import Optional

from models.content import ContentItem, MediaKind
from services.content_sources.base import ContentSource
from utils.retry import retry_api_call

logger = logging.getLogger(__name__)


class YouTubeSource(ContentSource):
    """YouTube search (search.list, 100 quota units per call)."""

    BASE_URL = "https://www.googleapis.com/youtube/v3/search"
    WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

    def __init__(self, api_key: str = "", max_results: int = 10, **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        self.max_results = min(max_results, 50)  # YouTube API limit

        if not self.api_key:
            logger.warning("[YouTube] No API key configured. Set YOUTUBE_API_KEY to enable YouTube search.")

    def get_source_name(self) -> str:
        return "youtube"

    def supported_kinds(self) -> frozenset:
        return frozenset({MediaKind.VIDEO})

    def is_remote_only(self, kind: MediaKind) -> bool:
        return True

    @retry_api_call(max_retries=3, base_delay=2.0)
    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        data = await self._get_json(
            self.BASE_URL,
            params={
                "part": "snippet",
                "q": query,
                "type": "video",
                "maxResults": self.max_results,
                "key": self.api_key,
            },
        )
        parsed = (self._parse_item(entry) for entry in data.get("items") or [])
        return [item for item in parsed if item]

    def _parse_item(self, entry: dict) -> Optional[ContentItem]:
        video_id = (entry.get("id") or {}).get("videoId")
        if not video_id:
            return None

        snippet = entry.get("snippet") or {}
        return ContentItem(
            url=self.WATCH_URL.format(video_id=video_id),
            source="youtube",
            id=video_id,
            title=snippet.get("title"),
        )
