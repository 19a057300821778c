"""Integration tests for the full video creation pipeline.

Real keyword extraction, aggregation, narration and planning run against
in-memory providers; only the AI backend and the renderer are doubles.
"""

import random
from pathlib import Path
from unittest.mock import Mock

import pytest

from models.content import MediaKind, MediaType, RenderResult
from services.content_aggregator import ContentAggregator
from services.errors import RenderError
from services.keyword_extractor import KeywordExtractor
from services.media_plan_builder import MediaPlanBuilder
from services.script_generator import ScriptGenerator
from services.video_pipeline import VideoPipeline
from services.content_sources import PexelsSource, PixabaySource, UnsplashSource, YouTubeSource


DESCRIPTION = "a calm morning in the forest"


@pytest.fixture
def renderer():
    mock = Mock()
    mock.dispatch = Mock(return_value="/renders/forest.mp4")
    return mock


def build_pipeline(ai, image_sources, video_sources, renderer, temp_dir, max_images=10, max_videos=5):
    return VideoPipeline(
        keyword_extractor=KeywordExtractor(ai),
        content_aggregator=ContentAggregator(
            image_sources=image_sources,
            video_sources=video_sources,
            temp_dir=str(temp_dir / "temp"),
            max_images=max_images,
            max_videos=max_videos,
        ),
        script_generator=ScriptGenerator(ai),
        plan_builder=MediaPlanBuilder(output_dir=str(temp_dir / "output"), rng=random.Random(7)),
        render_dispatcher=renderer,
    )


class TestCreateVideo:

    @pytest.mark.asyncio
    async def test_end_to_end_without_ai(self, failing_ai_service, fake_source_cls, item_factory, renderer, temp_dir):
        pexels = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 1)})
        unsplash = fake_source_cls("unsplash", {MediaKind.IMAGE: item_factory("unsplash", 1)})
        youtube = fake_source_cls("youtube", {MediaKind.VIDEO: item_factory("youtube", 1, "vid")}, remote_only=True)

        pipeline = build_pipeline(failing_ai_service, [pexels, unsplash], [youtube], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert result == RenderResult(success=True, video_path="/renders/forest.mp4")

        # Token filter alone produced the query
        assert pexels.search_calls == [("calm morning forest", MediaKind.IMAGE)]
        assert youtube.search_calls == [("calm morning forest", MediaKind.VIDEO)]
        assert youtube.download_calls == []

        job = renderer.dispatch.call_args.args[0]
        assert job.narration == DESCRIPTION
        assert job.title == DESCRIPTION
        assert len(job.media) == 2
        assert {entry.media_type for entry in job.media} == {MediaType.IMAGE}
        assert {Path(entry.path).name for entry in job.media} == {
            "image_pexels_item0.jpg",
            "image_unsplash_item0.jpg",
        }
        assert Path(job.output_path).parent == temp_dir / "output"

    @pytest.mark.asyncio
    async def test_ai_keywords_and_narration_are_used(self, fake_source_cls, item_factory, renderer, temp_dir):
        ai = Mock()

        async def generate_text(prompt, temperature=0.5, max_output_tokens=None):
            if "keyword" in prompt.lower():
                return "- sunrise\n- misty trees"
            return "Light spills through the trees as the forest wakes."

        ai.generate_text = generate_text
        source = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 2)})

        pipeline = build_pipeline(ai, [source], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert result.success
        query, _ = source.search_calls[0]
        assert query.startswith("sunrise misty trees")
        job = renderer.dispatch.call_args.args[0]
        assert job.narration == "Light spills through the trees as the forest wakes."

    @pytest.mark.asyncio
    async def test_local_files_join_the_plan(self, failing_ai_service, fake_source_cls, renderer, temp_dir):
        clip = temp_dir / "holiday.MOV"
        clip.write_bytes(b"clip")
        notes = temp_dir / "notes.txt"
        notes.write_text("keep me")
        empty = fake_source_cls("pexels", {MediaKind.IMAGE: []})

        pipeline = build_pipeline(failing_ai_service, [empty], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION, [str(clip), str(notes), str(temp_dir / "gone.jpg")])

        assert result.success
        job = renderer.dispatch.call_args.args[0]
        assert sorted((e.path, e.media_type) for e in job.media) == sorted([
            (str(clip), MediaType.VIDEO),
            (str(notes), MediaType.UNKNOWN),
        ])

    @pytest.mark.asyncio
    async def test_no_media_fails_without_rendering(self, failing_ai_service, fake_source_cls, renderer, temp_dir):
        broken = fake_source_cls("pexels", {MediaKind.IMAGE: []}, fail_search=True)

        pipeline = build_pipeline(failing_ai_service, [broken], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert not result.success
        assert "No usable media" in result.error
        renderer.dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_stop_words_fails_extraction(self, failing_ai_service, fake_source_cls, renderer, temp_dir):
        source = fake_source_cls("pexels", {MediaKind.IMAGE: []})

        pipeline = build_pipeline(failing_ai_service, [source], [], renderer, temp_dir)
        result = await pipeline.create_video("it is in the of")

        assert not result.success
        assert "keywords" in result.error
        assert source.search_calls == []

    @pytest.mark.asyncio
    async def test_render_failure_is_reported(
        self, failing_ai_service, fake_source_cls, item_factory, renderer, temp_dir
    ):
        renderer.dispatch.side_effect = RenderError("Renderer exited with code 1: boom", stderr="boom", returncode=1)
        source = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 1)})

        pipeline = build_pipeline(failing_ai_service, [source], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert result == RenderResult(success=False, error="Renderer exited with code 1: boom")

    @pytest.mark.asyncio
    async def test_renderer_without_path(self, failing_ai_service, fake_source_cls, item_factory, renderer, temp_dir):
        renderer.dispatch.return_value = None
        source = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 1)})

        pipeline = build_pipeline(failing_ai_service, [source], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert result.success
        assert result.video_path is None
        assert result.to_response() == {"success": True, "videoPath": None}


class TestScratchLifecycle:

    @pytest.mark.asyncio
    async def test_request_scratch_dir_removed_after_render(
        self, failing_ai_service, fake_source_cls, item_factory, renderer, temp_dir
    ):
        seen = {}

        def dispatch(job, scratch_dir):
            seen["scratch_dir"] = scratch_dir
            seen["files_present"] = all(Path(e.path).exists() for e in job.media)
            return "/renders/forest.mp4"

        renderer.dispatch.side_effect = dispatch
        source = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 2)})

        pipeline = build_pipeline(failing_ai_service, [source], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert result.success
        assert seen["files_present"]
        assert seen["scratch_dir"].parent == temp_dir / "temp"
        assert not seen["scratch_dir"].exists()

    @pytest.mark.asyncio
    async def test_scratch_dir_removed_after_failure(self, failing_ai_service, fake_source_cls, item_factory, renderer, temp_dir):
        renderer.dispatch.side_effect = RenderError("Renderer exited with code 1: boom")
        source = fake_source_cls("pexels", {MediaKind.IMAGE: item_factory("pexels", 1)})

        pipeline = build_pipeline(failing_ai_service, [source], [], renderer, temp_dir)
        result = await pipeline.create_video(DESCRIPTION)

        assert not result.success
        assert list((temp_dir / "temp").iterdir()) == []


class TestFromConfig:

    def test_default_provider_wiring(self, sample_config, mock_ai_service):
        pipeline = VideoPipeline.from_config(sample_config, ai_service=mock_ai_service)
        aggregator = pipeline.content_aggregator

        assert [type(s) for s in aggregator.image_sources] == [PexelsSource, UnsplashSource]
        assert [type(s) for s in aggregator.video_sources] == [YouTubeSource, PexelsSource]
        assert aggregator.image_sources[0] is aggregator.video_sources[1]
        assert aggregator.max_images == 10
        assert aggregator.max_videos == 5
        assert pipeline.render_dispatcher.renderer_argv == ["reelsmith-render"]

    def test_pixabay_joins_when_keyed(self, sample_config, mock_ai_service):
        sample_config["pixabay_api_key"] = "pix"

        pipeline = VideoPipeline.from_config(sample_config, ai_service=mock_ai_service)
        aggregator = pipeline.content_aggregator

        assert isinstance(aggregator.image_sources[-1], PixabaySource)
        assert isinstance(aggregator.video_sources[-1], PixabaySource)

    def test_remote_only_provider_leaves_room_for_downloadable_videos(self, sample_config, mock_ai_service):
        pipeline = VideoPipeline.from_config(sample_config, ai_service=mock_ai_service)
        youtube, pexels = pipeline.content_aggregator.video_sources

        assert youtube.max_results == 2
        assert pexels.videos_per_page == 10
        assert youtube.max_results < pipeline.content_aggregator.max_videos
