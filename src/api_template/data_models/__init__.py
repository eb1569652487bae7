from api_template.data_models.error_responses import ErrorResponse
from api_template.data_models.api_models import (
    DatabaseTimeResponse,
    HealthResponse,
    MessageResponse,
    Priority,
    SampleRequest,
    SampleResponse,
    TokenClaims,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "DatabaseTimeResponse",
    "HealthResponse",
    "MessageResponse",
    "Priority",
    "SampleRequest",
    "SampleResponse",
    "TokenClaims",
    "UserResponse",
]
