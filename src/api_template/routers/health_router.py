import logging
from pathlib import Path

from fastapi import APIRouter, Request

from api_template.data_models import HealthResponse
from api_template.routers.versions import V1
from api_template.versioning import versioned_router

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

# =============================================================================
#   Router
# =============================================================================
router = versioned_router(V1, "/health", tags=["health"])


@router.get(
    "",
    summary="Service health.",
    description="Reports status, environment and whether a database pool is registered.",
    response_model=HealthResponse,
)
async def health(request: Request) -> HealthResponse:
    state = request.app.state
    return HealthResponse(
        status="ok",
        environment=state.environment,
        databaseConfigured=getattr(state, "db_pool", None) is not None,
        supportedVersions=[str(v) for v in state.api_versions.supported_versions],
    )
