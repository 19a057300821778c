"""Video creation route for the reelsmith API."""

import asyncio
import logging
import re
import shutil
import time
import uuid
from pathlib import Path

from api.dependencies import get_config, get_pipeline
from api.schemas import CreateVideoResponse
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from services.video_pipeline import VideoPipeline
from utils.logging import bind_request_id, clear_request_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Videos"])

MAX_UPLOADS = 10

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def upload_filename(original_name: str) -> str:
    """Scratch filename for an upload: <epoch ms>-<sanitized basename>."""
    base = Path(original_name or "upload").name
    safe = _UNSAFE_FILENAME_CHARS.sub("_", base) or "upload"
    return f"{int(time.time() * 1000)}-{safe}"


def _write_upload(path: Path, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)


async def save_uploads(files: list[UploadFile], upload_dir: Path) -> list[str]:
    """Persist uploaded files into this request's upload directory."""
    upload_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for upload in files:
        if not upload.filename:
            continue
        path = upload_dir / f"{uuid.uuid4().hex[:6]}-{upload_filename(upload.filename)}"
        content = await upload.read()
        await asyncio.to_thread(_write_upload, path, content)
        logger.info(f"Saved upload: {path}")
        paths.append(str(path))
    return paths


def remove_uploads(upload_dir: Path) -> None:
    if not upload_dir.exists():
        return
    try:
        shutil.rmtree(upload_dir)
    except OSError as e:
        logger.warning(f"Failed to remove upload directory {upload_dir}: {e}")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.post(
    "/api/create-video",
    response_model=CreateVideoResponse,
    response_model_by_alias=True,
    summary="Create a video",
    description="Builds a short video from a description and optional uploaded media files.",
)
async def create_video(
    description: str = Form(""),
    localFiles: list[UploadFile] = File(default=[]),
    pipeline: VideoPipeline = Depends(get_pipeline),
    config: dict = Depends(get_config),
) -> JSONResponse:
    """Run the video pipeline for one request."""
    request_id = uuid.uuid4().hex[:12]
    bind_request_id(request_id)
    upload_dir = Path(config["temp_dir"]) / f"uploads_{request_id}"
    try:
        if not description.strip():
            return error_response(400, "description is required")

        if len(localFiles) > MAX_UPLOADS:
            return error_response(400, f"At most {MAX_UPLOADS} local files are accepted")

        local_paths = await save_uploads(localFiles, upload_dir)
        logger.info(f"Creating video: '{description[:60]}' with {len(local_paths)} local files")

        result = await pipeline.create_video(description, local_paths)
        status_code = 200 if result.success else 500
        return JSONResponse(status_code=status_code, content=result.to_response())

    except Exception as e:
        logger.exception(f"Error creating video: {e}")
        return error_response(500, str(e))
    finally:
        await asyncio.to_thread(remove_uploads, upload_dir)
        clear_request_context()
