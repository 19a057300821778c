"""End-to-end video creation: description in, rendered file path out."""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from models.content import RenderResult
from services.ai_service import AIService
from services.content_aggregator import ContentAggregator
from services.content_sources import PexelsSource, PixabaySource, UnsplashSource, YouTubeSource
from services.errors import PipelineError
from services.keyword_extractor import KeywordExtractor
from services.media_plan_builder import MediaPlanBuilder
from services.render_dispatcher import RenderDispatcher
from services.script_generator import ScriptGenerator

logger = logging.getLogger(__name__)


class VideoPipeline:
    """Coordinates keyword extraction, acquisition, narration, planning and rendering.

    All collaborators are injected so tests can swap in doubles for the
    providers, the AI backend and the renderer.
    """

    def __init__(
        self,
        keyword_extractor: KeywordExtractor,
        content_aggregator: ContentAggregator,
        script_generator: ScriptGenerator,
        plan_builder: MediaPlanBuilder,
        render_dispatcher: RenderDispatcher,
    ):
        self.keyword_extractor = keyword_extractor
        self.content_aggregator = content_aggregator
        self.script_generator = script_generator
        self.plan_builder = plan_builder
        self.render_dispatcher = render_dispatcher

    @classmethod
    def from_config(cls, config: dict, ai_service: Optional[AIService] = None) -> "VideoPipeline":
        """Wire a pipeline from a load_config() dictionary."""
        ai = ai_service or AIService(
            api_key=config.get("gemini_api_key"),
            model_name=config.get("gemini_model", "gemini-2.5-flash"),
            timeout=config.get("ai_timeout_seconds", 60.0),
        )

        timeouts = {
            "search_timeout": config.get("search_timeout_seconds", 30.0),
            "download_timeout": config.get("download_timeout_seconds", 120.0),
        }
        images_per_source = config.get("images_per_source", 15)
        videos_per_source = config.get("videos_per_source", 10)

        pexels = PexelsSource(
            api_key=config.get("pexels_api_key", ""),
            images_per_page=images_per_source,
            videos_per_page=videos_per_source,
            **timeouts,
        )
        unsplash = UnsplashSource(api_key=config.get("unsplash_api_key", ""), per_page=images_per_source, **timeouts)
        youtube = YouTubeSource(
            api_key=config.get("youtube_api_key", ""),
            max_results=min(videos_per_source, config.get("remote_videos_per_source", 2)),
            **timeouts,
        )

        image_sources = [pexels, unsplash]
        video_sources = [youtube, pexels]

        # Pixabay is optional and goes last so the default ordering is unchanged
        if config.get("pixabay_api_key"):
            pixabay = PixabaySource(api_key=config["pixabay_api_key"], per_page=videos_per_source, **timeouts)
            image_sources.append(pixabay)
            video_sources.append(pixabay)

        return cls(
            keyword_extractor=KeywordExtractor(ai, max_keywords=config.get("max_keywords", 10)),
            content_aggregator=ContentAggregator(
                image_sources=image_sources,
                video_sources=video_sources,
                temp_dir=config["temp_dir"],
                max_images=config.get("max_images", 10),
                max_videos=config.get("max_videos", 5),
                max_concurrent_downloads=config.get("max_concurrent_downloads", 10),
            ),
            script_generator=ScriptGenerator(ai),
            plan_builder=MediaPlanBuilder(output_dir=config["output_dir"]),
            render_dispatcher=RenderDispatcher(
                temp_dir=config["temp_dir"],
                renderer_command=config.get("renderer_command", "reelsmith-render"),
                timeout=config.get("render_timeout_seconds", 1800.0),
            ),
        )

    async def create_video(self, description: str, local_files: Sequence[str] = ()) -> RenderResult:
        """Run the full pipeline for one request.

        Args:
            description: Free-text video description
            local_files: Paths of caller-supplied media files

        Returns:
            RenderResult; request-level failures are reported in it, not raised
        """
        # Downloads, job and result files for this request only; removed once the render is done
        scratch_dir = self.content_aggregator.new_request_dir()
        try:
            keywords = await self.keyword_extractor.extract(description)

            # Acquisition and narration are independent; the plan needs both
            bundle, narration = await asyncio.gather(
                self.content_aggregator.find_content(keywords, scratch_dir),
                self.script_generator.generate(description),
            )

            job = self.plan_builder.build(
                images=bundle.images,
                videos=bundle.videos,
                local_files=list(local_files),
                narration=narration,
                description=description,
            )

            video_path = await asyncio.to_thread(self.render_dispatcher.dispatch, job, scratch_dir)

        except PipelineError as e:
            logger.error(f"Video creation failed ({type(e).__name__}): {e}")
            return RenderResult(success=False, error=str(e))
        finally:
            await asyncio.to_thread(_remove_scratch_dir, scratch_dir)

        return RenderResult(success=True, video_path=video_path)


def _remove_scratch_dir(scratch_dir: Path) -> None:
    if not scratch_dir.exists():
        return
    try:
        shutil.rmtree(scratch_dir)
    except OSError as e:
        logger.warning(f"Failed to remove scratch directory {scratch_dir}: {e}")
