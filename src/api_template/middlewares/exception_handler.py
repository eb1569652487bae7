"""Catch-all exception handling for the request pipeline."""

import logging
from pathlib import Path

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from api_template.data_models.error_responses import ErrorResponse
from api_template.domain.error_codes import APPLICATION_ERROR

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping the rest of the pipeline into a 500 error envelope.

    The exception text is returned as the envelope message unless
    `expose_exception_messages` is off.
    """

    def __init__(self, app: ASGIApp, expose_exception_messages: bool = True) -> None:
        super().__init__(app)
        self._expose_exception_messages = expose_exception_messages

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
            return self._error_response(exc)

    def _error_response(self, exc: Exception) -> JSONResponse:
        if self._expose_exception_messages:
            message = str(exc) or type(exc).__name__
        else:
            message = GENERIC_ERROR_MESSAGE

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse[str](code=APPLICATION_ERROR, message=message).to_content(),
        )
