"""Dependency injection for the reelsmith API.

The pipeline is built once per application in the lifespan hook and
stored on `app.state`; routes receive it through `Depends`.
"""

from fastapi import Request

from services.video_pipeline import VideoPipeline


def get_pipeline(request: Request) -> VideoPipeline:
    """Return the application's VideoPipeline."""
    return request.app.state.pipeline


def get_config(request: Request) -> dict:
    """Return the configuration the application was started with."""
    return request.app.state.config
