"""Configuration loading and validation for reelsmith."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

logger = logging.getLogger(__name__)

API_KEY_NAMES = (
    "pexels_api_key",
    "unsplash_api_key",
    "youtube_api_key",
    "pixabay_api_key",
)


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def load_config() -> dict:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Storage
        "output_dir": resolve_path(os.getenv("OUTPUT_DIRECTORY"), "output"),
        "temp_dir": resolve_path(os.getenv("TEMP_DIRECTORY"), "temp"),
        # Content caps
        "max_images": _env_int("MAX_IMAGES", 10),
        "max_videos": _env_int("MAX_VIDEOS", 5),
        "max_keywords": _env_int("MAX_KEYWORDS", 10),
        "images_per_source": _env_int("IMAGES_PER_SOURCE", 15),
        "videos_per_source": _env_int("VIDEOS_PER_SOURCE", 10),
        # Remote-only hits never reach the plan; keep them from filling every video slot
        "remote_videos_per_source": _env_int("REMOTE_VIDEOS_PER_SOURCE", 2),
        "max_concurrent_downloads": _env_int("MAX_CONCURRENT_DOWNLOADS", 10),
        # Timeouts (seconds) for every external call
        "search_timeout_seconds": _env_float("SEARCH_TIMEOUT_SECONDS", 30.0),
        "download_timeout_seconds": _env_float("DOWNLOAD_TIMEOUT_SECONDS", 120.0),
        "ai_timeout_seconds": _env_float("AI_TIMEOUT_SECONDS", 60.0),
        "render_timeout_seconds": _env_float("RENDER_TIMEOUT_SECONDS", 1800.0),
        # External renderer
        "renderer_command": os.getenv("RENDERER_COMMAND", "reelsmith-render"),
        # AI backend
        "gemini_api_key": os.getenv("GEMINI_API_KEY"),
        "gemini_model": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        # Content providers
        "pexels_api_key": os.getenv("PEXELS_API_KEY", ""),
        "unsplash_api_key": os.getenv("UNSPLASH_API_KEY", ""),
        "youtube_api_key": os.getenv("YOUTUBE_API_KEY", ""),
        "pixabay_api_key": os.getenv("PIXABAY_API_KEY", ""),
        # HTTP server
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": _env_int("PORT", 3000),
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    for key in ("max_images", "max_videos", "max_keywords", "max_concurrent_downloads"):
        if config.get(key, 0) <= 0:
            errors.append(f"{key} must be a positive integer")

    for key in ("output_dir", "temp_dir"):
        folder = config.get(key)
        if not folder:
            errors.append(f"{key} is required")
            continue
        try:
            Path(folder).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Cannot create {key} '{folder}': {e}")

    if not any(config.get(name) for name in API_KEY_NAMES):
        errors.append(
            "No content provider configured: set at least one of "
            "PEXELS_API_KEY, UNSPLASH_API_KEY, YOUTUBE_API_KEY or PIXABAY_API_KEY"
        )

    if not config.get("renderer_command", "").strip():
        errors.append("RENDERER_COMMAND must not be empty")

    return errors


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration with Rich for terminal output."""
    # Clear any existing handlers
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # Provider titles may contain [brackets]
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )

    # Suppress noisy third-party loggers
    noisy_loggers = [
        "httpx",
        "google_genai",
        "google_genai.models",
        "aiohttp.access",
        "urllib3.connectionpool",
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
