from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi.routing import APIRoute

from api_template.security.authentication import requires_authorization
from api_template.versioning import ApiVersion

JWT_BEARER_SCHEME = "jwt_bearer"


@dataclass(frozen=True)
class OperationFilterContext:
    """What an operation filter knows about the operation it is given."""

    route: APIRoute
    api_version: Optional[ApiVersion] = None


class OperationFilter:
    """Hook that mutates the OpenAPI operation generated for one endpoint."""

    def apply(self, operation: Dict[str, Any], context: OperationFilterContext) -> None:
        raise NotImplementedError


class SwaggerUIFilter(OperationFilter):
    """Flags deprecated versions and documents the bearer requirement of protected endpoints."""

    def apply(self, operation: Dict[str, Any], context: OperationFilterContext) -> None:
        """
        Applies the filter to the specified operation using the given context.

        Args:
            operation: The OpenAPI operation object to update in place.
            context: The route the operation was generated from and its API version.
        """
        version = context.api_version
        deprecated = bool(operation.get("deprecated")) or bool(version and version.deprecated)
        if deprecated:
            operation["deprecated"] = True

        if not requires_authorization(context.route):
            return

        # The scheme must also be declared under components.securitySchemes.
        operation.setdefault("security", []).append({JWT_BEARER_SCHEME: []})
