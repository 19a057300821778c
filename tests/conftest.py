"""Shared pytest fixtures for reelsmith tests."""

import asyncio
import sys
import tempfile
from pathlib import Path
from typing import Dict, Generator, Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from models.content import ContentItem, MediaKind  # noqa: E402
from services.content_sources.base import ContentSource  # noqa: E402
from services.errors import AIServiceError, DownloadError, ProviderError  # noqa: E402


class FakeSource(ContentSource):
    """In-memory ContentSource double.

    `results` maps MediaKind -> list of ContentItem. `fail_search` makes
    `_search` raise, `fail_downloads` lists item ids whose download raises,
    and `delay` postpones the search response.
    """

    def __init__(
        self,
        name: str,
        results: Optional[dict] = None,
        kinds: Optional[set] = None,
        remote_only: bool = False,
        fail_search: bool = False,
        fail_downloads: Optional[set] = None,
        delay: float = 0.0,
    ):
        super().__init__(api_key="test_key")
        self.name = name
        self.results = results or {}
        self.kinds = frozenset(kinds or self.results.keys() or {MediaKind.IMAGE, MediaKind.VIDEO})
        self.remote_only = remote_only
        self.fail_search = fail_search
        self.fail_downloads = fail_downloads or set()
        self.delay = delay
        self.search_calls = []
        self.download_calls = []

    def get_source_name(self) -> str:
        return self.name

    def supported_kinds(self) -> frozenset:
        return self.kinds

    def is_remote_only(self, kind: MediaKind) -> bool:
        return self.remote_only

    async def _search(self, query: str, kind: MediaKind) -> list[ContentItem]:
        self.search_calls.append((query, kind))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_search:
            raise ProviderError(f"{self.name} is down")
        return list(self.results.get(kind, []))

    async def download(self, item: ContentItem, output_path: str) -> str:
        self.download_calls.append((item.id, output_path))
        if item.id in self.fail_downloads:
            raise DownloadError(f"cannot fetch {item.id}")
        Path(output_path).write_bytes(b"fake media bytes")
        return output_path


def make_items(source: str, count: int, prefix: str = "item") -> list[ContentItem]:
    """Build `count` ContentItems for a source."""
    return [
        ContentItem(url=f"https://{source}.example.com/{prefix}{i}", source=source, id=f"{prefix}{i}")
        for i in range(count)
    ]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_source_cls():
    """The FakeSource class, for tests that build their own providers."""
    return FakeSource


@pytest.fixture
def item_factory():
    return make_items


@pytest.fixture
def sample_config(tmp_path) -> Dict:
    """Sample configuration for testing."""
    return {
        "output_dir": str(tmp_path / "output"),
        "temp_dir": str(tmp_path / "temp"),
        "max_images": 10,
        "max_videos": 5,
        "max_keywords": 10,
        "images_per_source": 15,
        "videos_per_source": 10,
        "remote_videos_per_source": 2,
        "max_concurrent_downloads": 10,
        "search_timeout_seconds": 5.0,
        "download_timeout_seconds": 5.0,
        "ai_timeout_seconds": 5.0,
        "render_timeout_seconds": 5.0,
        "renderer_command": "reelsmith-render",
        "gemini_api_key": None,
        "gemini_model": "gemini-2.5-flash",
        "pexels_api_key": "test_pexels_key",
        "unsplash_api_key": "test_unsplash_key",
        "youtube_api_key": "test_youtube_key",
        "pixabay_api_key": "",
        "host": "127.0.0.1",
        "port": 3000,
    }


@pytest.fixture
def mock_ai_service():
    """Mock AIService whose generate_text returns a fixed response."""
    mock = Mock()
    mock.generate_text = AsyncMock(return_value="forest\nmorning light")
    return mock


@pytest.fixture
def failing_ai_service():
    """Mock AIService that is unreachable."""
    mock = Mock()
    mock.generate_text = AsyncMock(side_effect=AIServiceError("AI backend unreachable"))
    return mock
