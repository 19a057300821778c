"""Service metadata routes: API root and health check."""

from api.dependencies import get_config
from api.schemas import HealthResponse, RootResponse
from fastapi import APIRouter, Depends
from utils.config import API_KEY_NAMES

SERVICE_NAME = "reelsmith API"
SERVICE_VERSION = "1.0.0"

router = APIRouter(tags=["Core"])


@router.get("/", response_model=RootResponse, summary="API root")
async def root() -> RootResponse:
    return RootResponse(message=SERVICE_NAME, version=SERVICE_VERSION)


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Liveness check; also lists the content providers that have an API key.",
)
async def health(config: dict = Depends(get_config)) -> HealthResponse:
    providers = [name.removesuffix("_api_key") for name in API_KEY_NAMES if config.get(name)]
    return HealthResponse(status="healthy", providers=providers)
