from api_template.routers.health_router import router as health_router
from api_template.routers.samples_router import create_samples_router
from api_template.routers.versions import API_VERSIONS, V1, V2

__all__ = [
    "health_router",
    "create_samples_router",
    "API_VERSIONS",
    "V1",
    "V2",
]
