"""Global exception handlers registered on the FastAPI application. """

import logging
from pathlib import Path
from typing import Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api_template.data_models.error_responses import ErrorResponse
from api_template.domain.error_codes import UNAUTHORIZED_ERROR, VALIDATION_ERROR
from api_template.utils.exceptions import UnauthorizedError

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

# First segment of a pydantic error location names where the value came from.
_LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}


# =============================================================================
#   Helpers
# =============================================================================
def field_name(loc: tuple) -> str:
    """Turn a pydantic error location into a dotted field name.

    ("body", "address", "city") -> "address.city"
    ("query", "page")           -> "page"
    ("body",)                   -> "body"
    """
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]
    return ".".join(parts)


def collect_field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group validation messages by field, keeping only fields that failed.

    A body that is not valid JSON is reported at a character offset, so
    it is keyed by its source ("body") instead.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = tuple(error["loc"])
        key = str(loc[0]) if error.get("type") == "json_invalid" and loc else field_name(loc)
        errors.setdefault(key, []).append(error["msg"])
    return errors


# =============================================================================
#   Validation Error Handler
# =============================================================================
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handles validation exceptions raised when request validation fails.

    Replaces FastAPI's automatic 422 response with the error envelope.

    Args:
        request (Request): The HTTP request object that triggered the validation error.
        exc (RequestValidationError): The exception object containing details of
            validation failures.

    Returns:
        JSONResponse: A 400 response whose `data` maps each invalid field to its
            error messages.
    """
    errors = collect_field_errors(exc)

    logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, errors)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse[Dict[str, List[str]]](
            code=VALIDATION_ERROR,
            message="Invalid data format",
            data=errors,
        ).to_content(),
    )


# =============================================================================
#   Unauthorized Error Handler
# =============================================================================
async def unauthorized_exception_handler(
    request: Request, exc: UnauthorizedError
) -> JSONResponse:
    """Challenge response for missing or invalid bearer tokens."""
    logger.info("Authentication failed for %s %s: %s", request.method, request.url.path, exc.reason)

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=ErrorResponse[str](code=UNAUTHORIZED_ERROR, message="Unauthorized").to_content(),
        headers={"WWW-Authenticate": "Bearer"},
    )
