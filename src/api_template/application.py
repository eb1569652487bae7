"""Application factory: registers services, middleware and routers."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from api_template.config import Config, configuration as default_configuration
from api_template.extensions import (
    add_custom_api_versioning,
    add_custom_authentication,
    add_custom_cors,
    add_custom_database,
    add_custom_mapper,
    add_custom_mvc,
    add_custom_swagger,
)
from api_template.middlewares import ExceptionHandlerMiddleware
from api_template.routers import API_VERSIONS, create_samples_router, health_router

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)


# =============================================================================
#   Lifespan – open and close the DB pool around the app's lifetime
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the DB pool on startup; close it on shutdown."""
    pool = getattr(app.state, "db_pool", None)

    if pool is not None:
        logger.info("Opening PostgreSQL connection pool.")
        pool.open()

    logger.info("Application startup complete.")
    yield

    logger.info("Shutting down.")
    if pool is not None:
        pool.close()
    logger.info("Application shutdown complete.")


# =============================================================================
#   create_app
# =============================================================================
def create_app(configuration: Optional[Config] = None) -> FastAPI:
    """Build the FastAPI application.

    Middleware runs outermost first: HTTPS redirect (optional), exception
    handler, CORS, API version reporting.

    Args:
        configuration: Settings to build from; defaults to config/config.yml.

    Returns:
        The configured application.
    """
    configuration = configuration or default_configuration

    app = FastAPI(
        debug=False,
        title=configuration.swagger.title,
        description=configuration.swagger.description,
        # documentation is served per API version under /swagger
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.environment = configuration.environment

    # --- Services ---
    add_custom_mvc(app)
    add_custom_api_versioning(app, API_VERSIONS)
    add_custom_authentication(app, configuration)
    add_custom_mapper(app)
    add_custom_database(app, configuration)
    add_custom_swagger(app, configuration)

    # --- Middleware (each add wraps the previous ones) ---
    add_custom_cors(app, configuration)
    app.add_middleware(
        ExceptionHandlerMiddleware,
        expose_exception_messages=configuration.errors.expose_exception_messages,
    )
    if configuration.server.https_redirect:
        app.add_middleware(HTTPSRedirectMiddleware)

    # --- Routers ---
    app.include_router(health_router)
    for version in API_VERSIONS:
        app.include_router(create_samples_router(version))

    @app.get("/", tags=["health"], include_in_schema=False)
    async def root() -> dict:
        """Health-check root endpoint."""
        return {"message": "API Template is up and running."}

    logger.info("Application created for '%s' environment.", configuration.environment)
    return app
