import logging
from pathlib import Path

from fastapi import APIRouter, Depends, status
from psycopg import Connection

from api_template.data_models import (
    DatabaseTimeResponse,
    ErrorResponse,
    MessageResponse,
    SampleRequest,
    SampleResponse,
    TokenClaims,
    UserResponse,
)
from api_template.persistence.database import get_db_connection
from api_template.security.authentication import allow_anonymous, authorize
from api_template.utils.mapping import ObjectMapper, get_mapper
from api_template.versioning import ApiVersion, versioned_router

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse[str]}}
_INVALID = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse[dict]}}


# =============================================================================
#   Router factory – one router per API version
# =============================================================================
def create_samples_router(version: ApiVersion) -> APIRouter:
    """Sample endpoints under /{version}/samples; every endpoint requires a token unless anonymous."""
    router = versioned_router(
        version,
        "/samples",
        tags=["samples"],
        dependencies=[Depends(authorize)],
    )
    api_version = str(version)

    # -------------------------------------------------------------------------
    @router.get(
        "/public",
        summary="Anonymous sample.",
        description="Reachable without a bearer token.",
        response_model=MessageResponse,
    )
    @allow_anonymous
    async def public_sample() -> MessageResponse:
        """Return a greeting that needs no authentication."""
        return MessageResponse(message="Hello, anonymous caller.", apiVersion=api_version)

    # -------------------------------------------------------------------------
    @router.get(
        "/me",
        summary="Current caller.",
        description="Returns the identity carried by the bearer token.",
        response_model=UserResponse,
        response_model_exclude_none=True,
        responses=_UNAUTHORIZED,
    )
    async def current_user(
        claims: TokenClaims = Depends(authorize),
        mapper: ObjectMapper = Depends(get_mapper),
    ) -> UserResponse:
        """Map the validated token claims to the public user shape."""
        return mapper.map(claims, UserResponse)

    # -------------------------------------------------------------------------
    @router.post(
        "/echo",
        summary="Validated echo.",
        description=(
            "Validates the body and echoes it back. "
            "Invalid bodies yield a 400 error envelope keyed by field."
        ),
        response_model=SampleResponse,
        response_model_exclude_none=True,
        responses={**_UNAUTHORIZED, **_INVALID},
    )
    async def echo_sample(
        body: SampleRequest,
        claims: TokenClaims = Depends(authorize),
    ) -> SampleResponse:
        """Echo a validated sample, stamped with the caller's subject."""
        logger.debug("POST /%s/samples/echo – sub='%s'", version.group_name, claims.sub)
        return SampleResponse(
            **body.model_dump(),
            submittedBy=claims.sub,
            apiVersion=api_version,
        )

    if version.major < 2:
        return router

    # -------------------------------------------------------------------------
    @router.get(
        "/db-time",
        summary="Database clock.",
        description="Reads the current time from the configured database.",
        response_model=DatabaseTimeResponse,
        responses=_UNAUTHORIZED,
    )
    def database_time(conn: Connection = Depends(get_db_connection)) -> DatabaseTimeResponse:
        """Query the database server time through the pooled connection."""
        with conn.cursor() as cur:
            cur.execute("SELECT now()")
            row = cur.fetchone()
        return DatabaseTimeResponse(serverTime=row[0])

    return router
