"""Pydantic request/response models for the reelsmith API."""

from typing import Optional

from pydantic import BaseModel, Field

# =============================================================================
# Response Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "reelsmith API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    providers: list[str] = Field(default_factory=list)

    model_config = {"json_schema_extra": {"examples": [{"status": "healthy", "providers": ["pexels", "youtube"]}]}}


class CreateVideoResponse(BaseModel):
    """Outcome of a video creation request.

    `videoPath` is null when the renderer succeeded without reporting a path.
    """

    success: bool
    video_path: Optional[str] = Field(default=None, alias="videoPath")
    error: Optional[str] = None

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"success": True, "videoPath": "output/video_2026-10-19T10-00-00-000000Z_1a2b3c4d.mp4"},
                {"success": False, "error": "No usable media found from providers or uploaded files"},
            ]
        },
    }
