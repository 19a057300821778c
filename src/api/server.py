#!/usr/bin/env python
"""FastAPI server for the reelsmith web interface."""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import core, videos
from services.video_pipeline import VideoPipeline
from utils.config import load_config, validate_config

logger = logging.getLogger(__name__)


def create_app(config: Optional[dict] = None, pipeline: Optional[VideoPipeline] = None) -> FastAPI:
    """Build the application.

    Args:
        config: Configuration dict (defaults to load_config())
        pipeline: Pre-built pipeline, mainly for tests; built from config otherwise
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for problem in validate_config(config):
            logger.warning(f"Configuration: {problem}")

        for key in ("output_dir", "temp_dir"):
            Path(config[key]).mkdir(parents=True, exist_ok=True)

        app.state.config = config
        app.state.pipeline = pipeline or VideoPipeline.from_config(config)
        logger.info("reelsmith API ready")
        yield

    app = FastAPI(title=core.SERVICE_NAME, version=core.SERVICE_VERSION, lifespan=lifespan)

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Keep the {success, error} body for malformed requests too
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in exc.errors()
        )
        logger.warning(f"Rejected {request.method} {request.url.path}: {problems}")
        return JSONResponse(status_code=400, content={"success": False, "error": f"Invalid request: {problems}"})

    app.include_router(core.router)
    app.include_router(videos.router)
    return app


def run(host: Optional[str] = None, port: Optional[int] = None, log_level: str = "INFO", json_logs: bool = False) -> None:
    """Start the server with uvicorn."""
    import uvicorn

    from utils.logging import setup_logging

    setup_logging(log_level, json_output=json_logs)
    config = load_config()
    uvicorn.run(
        create_app(config),
        host=host or config["host"],
        port=port or config["port"],
        log_config=None,  # keep the structlog handlers
    )


if __name__ == "__main__":
    run()
