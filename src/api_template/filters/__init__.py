from api_template.filters.swagger_ui_filter import (
    JWT_BEARER_SCHEME,
    OperationFilter,
    OperationFilterContext,
    SwaggerUIFilter,
)

__all__ = [
    "JWT_BEARER_SCHEME",
    "OperationFilter",
    "OperationFilterContext",
    "SwaggerUIFilter",
]
