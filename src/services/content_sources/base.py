"""Base abstraction for content sources."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from models.content import ContentItem, MediaKind, SearchOutcome
from services.errors import DownloadError, ProviderError
from utils.retry import NetworkError, TemporaryServiceError

logger = logging.getLogger(__name__)


class ContentSource(ABC):
    """Abstract base class for image/video providers (Pexels, Unsplash, YouTube, etc.).

    Subclasses implement `_search` and may raise freely; `search` converts
    every failure into a failed SearchOutcome so one provider can never
    abort an aggregate search.
    """

    def __init__(self, api_key: str = "", search_timeout: float = 30.0, download_timeout: float = 120.0):
        self.api_key = api_key or ""
        self.search_timeout = search_timeout
        self.download_timeout = download_timeout

    @abstractmethod
    def get_source_name(self) -> str:
        """Get the name of this source (e.g. "pexels")."""

    @abstractmethod
    def supported_kinds(self) -> frozenset:
        """Media kinds this source can search for."""

    @abstractmethod
    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        """Provider-specific search. May raise on any failure."""

    def is_configured(self) -> bool:
        """Check if this source has required configuration (API keys, etc.).

        Default implementation requires a non-empty API key.
        """
        return bool(self.api_key)

    def is_remote_only(self, kind: MediaKind) -> bool:
        """Whether items of this kind are kept by reference instead of downloaded."""
        return False

    async def search(self, query: str, kind: MediaKind) -> SearchOutcome:
        """Search this provider, never raising.

        Args:
            query: Search string
            kind: Image or video

        Returns:
            SearchOutcome with items, or with `error` set if the call failed
        """
        name = self.get_source_name()

        if kind not in self.supported_kinds():
            return SearchOutcome(source=name, kind=kind)

        if not query.strip():
            return SearchOutcome(source=name, kind=kind)

        if not self.is_configured():
            logger.debug(f"[{name}] Skipping {kind.value} search - no API key configured")
            return SearchOutcome(source=name, kind=kind)

        try:
            items = await self._search(query, kind)
        except Exception as e:
            logger.error(f"[{name}] {kind.value} search failed for '{query}': {e}")
            return SearchOutcome(source=name, kind=kind, error=str(e) or type(e).__name__)

        logger.info(f"[{name}] Found {len(items)} {kind.value}s for '{query}'")
        return SearchOutcome(source=name, kind=kind, items=self._unique(items))

    @staticmethod
    def _unique(items: list[ContentItem]) -> list[ContentItem]:
        """Drop repeated ids, keeping the first occurrence."""
        seen = set()
        unique = []
        for item in items:
            if item.identity in seen:
                continue
            seen.add(item.identity)
            unique.append(item)
        return unique

    async def _get_json(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> dict:
        """GET a JSON document, mapping HTTP failures onto the error taxonomy.

        Raises:
            TemporaryServiceError: 429 or 5xx (retryable)
            NetworkError: connection failure or timeout (retryable)
            ProviderError: any other non-200 status or a non-object payload
        """
        name = self.get_source_name()
        timeout = aiohttp.ClientTimeout(total=self.search_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, params=params, headers=headers) as response:
                    if response.status == 429 or response.status >= 500:
                        raise TemporaryServiceError(f"{name} returned status {response.status}")

                    if response.status != 200:
                        text = await response.text()
                        raise ProviderError(f"{name} returned status {response.status}: {text[:200]}")

                    data = await response.json(content_type=None)

        except aiohttp.ClientError as e:
            raise NetworkError(f"{name} network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"{name} timed out after {self.search_timeout}s") from e

        if not isinstance(data, dict):
            raise ProviderError(f"{name} returned a malformed payload")
        return data

    async def download(self, item: ContentItem, output_path: str) -> str:
        """Download an item's URL to output_path.

        Args:
            item: ContentItem with a direct file URL
            output_path: Full path where the file should be saved

        Returns:
            output_path once written

        Raises:
            DownloadError: on any network, status or file error
        """
        name = self.get_source_name()
        timeout = aiohttp.ClientTimeout(total=self.download_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(item.url) as response:
                    if response.status != 200:
                        raise DownloadError(
                            f"[{name}] Download of {item.id} failed with status {response.status}"
                        )
                    content = await response.read()
        except aiohttp.ClientError as e:
            raise DownloadError(f"[{name}] Network error downloading {item.id}: {e}") from e
        except asyncio.TimeoutError as e:
            raise DownloadError(f"[{name}] Download of {item.id} timed out") from e

        try:
            with open(output_path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise DownloadError(f"[{name}] File error saving {item.id}: {e}") from e

        logger.debug(f"[{name}] Downloaded {item.id} to {output_path}")
        return output_path
