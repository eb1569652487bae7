"""One-line registration helpers used by the application factory.

Each helper switches on a single concern and returns the app so calls
read top to bottom in `create_app`.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api_template.config.config import Config
from api_template.data_models.mapping_profiles import DefaultMappingProfile
from api_template.extensions.swagger import SwaggerGenOptions, register_swagger_routes
from api_template.filters.swagger_ui_filter import OperationFilter, SwaggerUIFilter
from api_template.persistence.database import create_pool
from api_template.security.authentication import JwtSettings
from api_template.utils.error_handlers import (
    unauthorized_exception_handler,
    validation_exception_handler,
)
from api_template.utils.exceptions import UnauthorizedError
from api_template.utils.mapping import MappingProfile, ObjectMapper
from api_template.versioning import (
    ApiVersion,
    ApiVersionDescriptionProvider,
    ApiVersionReportingMiddleware,
)

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)


# =============================================================================
#   MVC – request validation and error envelopes
# =============================================================================
def add_custom_mvc(app: FastAPI) -> FastAPI:
    # Replaces FastAPI's automatic 422 with the 400 error envelope
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_exception_handler)
    return app


# =============================================================================
#   API versioning
# =============================================================================
def add_custom_api_versioning(app: FastAPI, versions: Iterable[ApiVersion]) -> FastAPI:
    provider = ApiVersionDescriptionProvider(versions)
    app.state.api_versions = provider
    # Reports "api-supported-versions" and "api-deprecated-versions" headers
    app.add_middleware(ApiVersionReportingMiddleware, provider=provider)
    return app


# =============================================================================
#   Authentication
# =============================================================================
def add_custom_authentication(app: FastAPI, configuration: Config) -> FastAPI:
    """Resolve JWT validation settings; fails fast when the signing secret is missing."""
    app.state.jwt_settings = JwtSettings.from_config(configuration.jwt)
    logger.info(
        "JWT bearer authentication enabled (issuer='%s', audience='%s').",
        configuration.jwt.issuer, configuration.jwt.audience,
    )
    return app


# =============================================================================
#   Object mapping
# =============================================================================
def add_custom_mapper(
    app: FastAPI, profiles: Optional[Sequence[MappingProfile]] = None
) -> FastAPI:
    mapper = ObjectMapper()
    for profile in profiles or [DefaultMappingProfile()]:
        mapper.add_profile(profile)
    app.state.mapper = mapper
    return app


# =============================================================================
#   Database
# =============================================================================
def add_custom_database(app: FastAPI, configuration: Config) -> FastAPI:
    """Register the connection pool; it is opened and closed by the app lifespan."""
    app.state.db_pool = create_pool(configuration.database)
    return app


# =============================================================================
#   Swagger
# =============================================================================
def add_custom_swagger(
    app: FastAPI,
    configuration: Config,
    operation_filters: Optional[Sequence[OperationFilter]] = None,
) -> FastAPI:
    """Serve per-version OpenAPI documents and Swagger UI.

    Only registered in development, or when `swagger.enabled` is set.
    Requires `add_custom_api_versioning` to have run first.
    """
    if not (configuration.is_development or configuration.swagger.enabled):
        logger.info("Swagger disabled in '%s' environment.", configuration.environment)
        return app

    options = SwaggerGenOptions(
        title=configuration.swagger.title,
        description=configuration.swagger.description,
        operation_filters=list(operation_filters or [SwaggerUIFilter()]),
    )
    register_swagger_routes(app, app.state.api_versions, options)
    return app


# =============================================================================
#   CORS
# =============================================================================
def add_custom_cors(app: FastAPI, configuration: Config) -> FastAPI:
    policy = configuration.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=policy.allow_origins,
        allow_methods=policy.allow_methods,
        allow_headers=policy.allow_headers,
    )
    logger.info("CORS policy '%s' enabled.", policy.policy_name)
    return app
