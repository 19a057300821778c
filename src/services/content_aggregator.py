"""Concurrent multi-provider content search and download.

Searches every registered source at once, merges hits in registration
order, caps them per kind, then downloads the survivors concurrently.
Provider and download failures only ever shrink the result.
"""

import asyncio
import logging
import re
import uuid
from pathlib import Path
from typing import Optional, Sequence

from models.content import (
    ContentBundle,
    ContentItem,
    DownloadedItem,
    DownloadOutcome,
    MediaKind,
    SearchOutcome,
)
from services.content_sources.base import ContentSource
from services.errors import ConfigurationError

logger = logging.getLogger(__name__)

FILE_EXTENSIONS = {
    MediaKind.IMAGE: ".jpg",
    MediaKind.VIDEO: ".mp4",
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def download_filename(kind: MediaKind, item: ContentItem) -> str:
    """Deterministic scratch filename for an item, e.g. image_pexels_123.jpg."""
    source = _UNSAFE_FILENAME_CHARS.sub("_", item.source)
    item_id = _UNSAFE_FILENAME_CHARS.sub("_", item.id)
    return f"{kind.value}_{source}_{item_id}{FILE_EXTENSIONS[kind]}"


class ContentAggregator:
    """Fans search and download calls out across providers."""

    def __init__(
        self,
        image_sources: Sequence[ContentSource],
        video_sources: Sequence[ContentSource],
        temp_dir: str,
        max_images: int = 10,
        max_videos: int = 5,
        max_concurrent_downloads: int = 10,
    ):
        """Initialize the aggregator.

        Args:
            image_sources: Image providers in registration (merge) order
            video_sources: Video providers in registration (merge) order
            temp_dir: Scratch root; each request downloads into its own subdirectory
            max_images: Cap on merged image hits
            max_videos: Cap on merged video hits
            max_concurrent_downloads: Semaphore size for the download fan-out
        """
        self.image_sources = list(image_sources)
        self.video_sources = list(video_sources)
        self.temp_dir = Path(temp_dir)
        self.max_images = max_images
        self.max_videos = max_videos
        self.max_concurrent_downloads = max_concurrent_downloads

    def _sources_for(self, kind: MediaKind) -> list[ContentSource]:
        return self.image_sources if kind == MediaKind.IMAGE else self.video_sources

    def _cap_for(self, kind: MediaKind) -> int:
        return self.max_images if kind == MediaKind.IMAGE else self.max_videos

    def new_request_dir(self) -> Path:
        """Unique scratch subdirectory for one request's downloads."""
        return self.temp_dir / f"request_{uuid.uuid4().hex[:12]}"

    async def find_content(self, keywords: Sequence[str], scratch_dir: Optional[Path] = None) -> ContentBundle:
        """Find and download images and videos for a keyword list.

        Args:
            keywords: Ordered keywords; joined with spaces into one query
            scratch_dir: Directory owned by this request (a fresh one under
                temp_dir when omitted); never shared with another request

        Returns:
            ContentBundle whose lists keep post-merge order

        Raises:
            ConfigurationError: the scratch directory cannot be created
        """
        scratch_dir = Path(scratch_dir) if scratch_dir else self.new_request_dir()
        try:
            scratch_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot create scratch directory {scratch_dir}: {e}") from e

        query = " ".join(k for k in keywords if k).strip()
        if not query:
            logger.warning("[ContentAggregator] No keywords to search for")
            return ContentBundle()

        if not self.image_sources and not self.video_sources:
            logger.warning("[ContentAggregator] No content sources registered")
            return ContentBundle()

        logger.info(f"[ContentAggregator] Searching for: '{query}'")

        images, videos = await asyncio.gather(
            self._find_kind(query, MediaKind.IMAGE, scratch_dir),
            self._find_kind(query, MediaKind.VIDEO, scratch_dir),
        )

        logger.info(f"[ContentAggregator] Collected {len(images)} images and {len(videos)} videos")
        return ContentBundle(images=images, videos=videos)

    async def _find_kind(self, query: str, kind: MediaKind, scratch_dir: Path) -> list[DownloadedItem]:
        candidates = await self.search_all(query, kind)
        return await self.download_all(candidates, kind, scratch_dir)

    async def search_all(self, query: str, kind: MediaKind) -> list[tuple[ContentItem, ContentSource]]:
        """Search every source for one kind concurrently and merge.

        Results are concatenated in registration order regardless of which
        call finishes first, then truncated to the kind's cap.
        """
        sources = self._sources_for(kind)
        if not sources:
            return []

        outcomes: list[SearchOutcome] = await asyncio.gather(
            *(source.search(query, kind) for source in sources)
        )

        merged: list[tuple[ContentItem, ContentSource]] = []
        for source, outcome in zip(sources, outcomes):
            if outcome.failed:
                logger.warning(
                    f"[ContentAggregator] {outcome.source} {kind.value} search failed: {outcome.error}"
                )
                continue
            merged.extend((item, source) for item in outcome.items)

        cap = self._cap_for(kind)
        if len(merged) > cap:
            logger.debug(f"[ContentAggregator] Truncating {len(merged)} {kind.value}s to {cap}")
        return merged[:cap]

    async def download_all(
        self,
        candidates: list[tuple[ContentItem, ContentSource]],
        kind: MediaKind,
        scratch_dir: Path,
    ) -> list[DownloadedItem]:
        """Download candidates concurrently, dropping any that fail.

        Output order follows input order, not completion order.
        """
        if not candidates:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent_downloads)

        async def download_one(item: ContentItem, source: ContentSource) -> DownloadOutcome:
            if source.is_remote_only(kind):
                return DownloadOutcome(
                    item=item,
                    downloaded=DownloadedItem.from_item(item, local_path=item.url, is_remote_only=True),
                )

            output_path = scratch_dir / download_filename(kind, item)
            async with semaphore:
                try:
                    path = await source.download(item, str(output_path))
                except Exception as e:
                    return DownloadOutcome(item=item, error=str(e) or type(e).__name__)
            return DownloadOutcome(item=item, downloaded=DownloadedItem.from_item(item, local_path=path))

        outcomes = await asyncio.gather(*(download_one(item, source) for item, source in candidates))

        downloaded = []
        for outcome in outcomes:
            if outcome.failed:
                logger.error(
                    f"[ContentAggregator] Dropping {kind.value} {outcome.item.source}/{outcome.item.id}: {outcome.error}"
                )
                continue
            downloaded.append(outcome.downloaded)

        logger.info(f"[ContentAggregator] Downloaded {len(downloaded)}/{len(candidates)} {kind.value}s")
        return downloaded
