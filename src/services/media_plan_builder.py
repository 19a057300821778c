"""Media plan construction for the external renderer."""

import logging
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import urlparse

from models.content import DownloadedItem, MediaPlanEntry, MediaType, RenderJob
from services.errors import EmptyPlanError

logger = logging.getLogger(__name__)

EXTENSION_TYPES = {
    ".mp4": MediaType.VIDEO,
    ".avi": MediaType.VIDEO,
    ".mov": MediaType.VIDEO,
    ".wmv": MediaType.VIDEO,
    ".flv": MediaType.VIDEO,
    ".mkv": MediaType.VIDEO,
    ".jpg": MediaType.IMAGE,
    ".jpeg": MediaType.IMAGE,
    ".png": MediaType.IMAGE,
    ".gif": MediaType.IMAGE,
    ".bmp": MediaType.IMAGE,
    ".webp": MediaType.IMAGE,
}


def classify_media(path: str) -> MediaType:
    """Classify a file by extension; unmapped extensions are UNKNOWN."""
    return EXTENSION_TYPES.get(Path(path).suffix.lower(), MediaType.UNKNOWN)


def is_remote_url(path: str) -> bool:
    parsed = urlparse(path)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _usable(path: Optional[str]) -> bool:
    return bool(path) and (Path(path).exists() or is_remote_url(path))


class MediaPlanBuilder:
    """Merges downloaded and local media into a shuffled RenderJob."""

    def __init__(self, output_dir: str, rng: Optional[random.Random] = None):
        """Initialize the builder.

        Args:
            output_dir: Directory where rendered videos are written
            rng: Random source for the shuffle (injectable for tests)
        """
        self.output_dir = Path(output_dir)
        self.rng = rng or random.Random()

    def build(
        self,
        images: Sequence[DownloadedItem],
        videos: Sequence[DownloadedItem],
        local_files: Sequence[str],
        narration: str,
        description: str,
    ) -> RenderJob:
        """Build the render job.

        Remote-only videos are left out of the visual plan because the
        renderer cannot fetch them.

        Raises:
            EmptyPlanError: no usable media from any source
        """
        entries: list[MediaPlanEntry] = []

        for image in images:
            if _usable(image.local_path):
                entries.append(MediaPlanEntry(path=image.local_path, media_type=MediaType.IMAGE))
            else:
                logger.warning(f"Skipping image {image.source}/{image.id}: no local file")

        for video in videos:
            if video.is_remote_only:
                logger.debug(f"Excluding remote-only video {video.source}/{video.id} from plan")
                continue
            if _usable(video.local_path):
                entries.append(MediaPlanEntry(path=video.local_path, media_type=MediaType.VIDEO))
            else:
                logger.warning(f"Skipping video {video.source}/{video.id}: no local file")

        for path in local_files:
            if not Path(path).exists():
                logger.warning(f"Skipping missing local file: {path}")
                continue
            media_type = classify_media(path)
            if media_type == MediaType.UNKNOWN:
                logger.warning(f"Local file {path} has an unrecognized extension")
            entries.append(MediaPlanEntry(path=str(path), media_type=media_type))

        if not entries:
            raise EmptyPlanError("No usable media found from providers or uploaded files")

        # Fisher-Yates; provider order should not dictate visual order
        self.rng.shuffle(entries)

        job = RenderJob(
            media=entries,
            narration=narration,
            title=description,
            output_path=str(self.unique_output_path()),
        )
        logger.info(f"Built media plan with {len(entries)} entries -> {job.output_path}")
        return job

    def unique_output_path(self) -> Path:
        """Timestamped output path with a random suffix against same-instant collisions."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        return self.output_dir / f"video_{timestamp}_{uuid.uuid4().hex[:8]}.mp4"
