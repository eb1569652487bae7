"""One OpenAPI document and Swagger UI per API version."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from fastapi import FastAPI, HTTPException, status
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute

from api_template.filters.swagger_ui_filter import (
    JWT_BEARER_SCHEME,
    OperationFilter,
    OperationFilterContext,
)
from api_template.versioning import ApiVersion, ApiVersionDescriptionProvider

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

DEPRECATED_NOTICE = " This API version has been deprecated."

JWT_BEARER_SECURITY_SCHEME: Dict[str, Any] = {
    "type": "apiKey",
    "name": "Authorization",
    "in": "header",
    "scheme": "bearer",
    "bearerFormat": "JWT",
    "description": "Please enter into field the word 'Bearer' following by space and JWT",
}


# =============================================================================
#   SwaggerGenOptions
# =============================================================================
@dataclass
class SwaggerGenOptions:
    """Inputs to document generation."""

    title: str
    description: str = ""
    operation_filters: List[OperationFilter] = field(default_factory=list)
    security_schemes: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: {JWT_BEARER_SCHEME: dict(JWT_BEARER_SECURITY_SCHEME)}
    )

    def describe(self, version: ApiVersion) -> str:
        if version.deprecated:
            return self.description + DEPRECATED_NOTICE
        return self.description


# =============================================================================
#   Document generation
# =============================================================================
def iter_api_routes(
    routes: Iterable[BaseRoute], prefix: str = ""
) -> Iterator[Tuple[str, APIRoute]]:
    """Yield (path, route) for every APIRoute, descending into included routers.

    Recent FastAPI releases keep each included router as a node in
    `app.routes` instead of copying its routes up, so the walk has to recurse.
    """
    for route in routes:
        if isinstance(route, APIRoute):
            path = route.path_format
            if prefix and not path.startswith(prefix):
                path = prefix + path
            yield path, route
            continue

        router = getattr(route, "router", None)
        children = getattr(route, "routes", None) or getattr(router, "routes", None)
        if children:
            nested_prefix = getattr(route, "prefix", None) or getattr(router, "prefix", None) or ""
            yield from iter_api_routes(children, prefix + nested_prefix)


def version_routes(app: FastAPI, version: ApiVersion) -> List[Tuple[str, APIRoute]]:
    """API routes whose URL starts with the version segment, with their paths."""
    prefix = f"/{version.group_name}/"
    return [(path, route) for path, route in iter_api_routes(app.routes) if path.startswith(prefix)]


def build_openapi_document(
    app: FastAPI, version: ApiVersion, options: SwaggerGenOptions
) -> Dict[str, Any]:
    """Generate the OpenAPI document of a single API version.

    FastAPI builds the document over the whole app and only the paths under
    the version segment are kept. Security schemes are declared under
    components, then every operation filter runs over every operation of the
    version's routes.
    """
    document = get_openapi(
        title=options.title,
        version=str(version),
        description=options.describe(version),
        routes=app.routes,
    )

    segment = f"/{version.group_name}/"
    paths = {
        path: item for path, item in document.get("paths", {}).items()
        if path.startswith(segment)
    }
    document["paths"] = paths

    components = document.setdefault("components", {})
    components.setdefault("securitySchemes", {}).update(options.security_schemes)

    for path, route in version_routes(app, version):
        if not route.include_in_schema:
            continue
        path_item = paths.get(path, {})
        context = OperationFilterContext(route=route, api_version=version)
        for method in route.methods:
            operation = path_item.get(method.lower())
            if operation is None:
                continue
            for operation_filter in options.operation_filters:
                operation_filter.apply(operation, context)

    return document


# =============================================================================
#   Routes
# =============================================================================
def register_swagger_routes(
    app: FastAPI,
    provider: ApiVersionDescriptionProvider,
    options: SwaggerGenOptions,
) -> None:
    """Serve /swagger/{group}/swagger.json, /swagger/{group} and /swagger."""
    documents: Dict[str, Dict[str, Any]] = {}

    def _version_or_404(group_name: str) -> ApiVersion:
        version = provider.by_group_name(group_name)
        if version is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown API version '{group_name}'",
            )
        return version

    @app.get("/swagger/{group_name}/swagger.json", include_in_schema=False)
    async def swagger_document(group_name: str) -> JSONResponse:
        version = _version_or_404(group_name)
        if group_name not in documents:
            documents[group_name] = build_openapi_document(app, version, options)
            logger.debug("Generated OpenAPI document for %s", group_name)
        return JSONResponse(documents[group_name])

    @app.get("/swagger/{group_name}", include_in_schema=False)
    async def swagger_ui(group_name: str) -> HTMLResponse:
        version = _version_or_404(group_name)
        return get_swagger_ui_html(
            openapi_url=f"/swagger/{version.group_name}/swagger.json",
            title=f"{options.title} - {version.group_name.upper()}",
            swagger_ui_parameters={"persistAuthorization": True},
        )

    @app.get("/swagger", include_in_schema=False)
    async def swagger_index() -> RedirectResponse:
        return RedirectResponse(url=f"/swagger/{provider.latest.group_name}")

    logger.info(
        "Swagger UI available for versions: %s",
        ", ".join(v.group_name for v in provider.api_version_descriptions),
    )
