from api_template.extensions.services import (
    add_custom_api_versioning,
    add_custom_authentication,
    add_custom_cors,
    add_custom_database,
    add_custom_mapper,
    add_custom_mvc,
    add_custom_swagger,
)

__all__ = [
    "add_custom_api_versioning",
    "add_custom_authentication",
    "add_custom_cors",
    "add_custom_database",
    "add_custom_mapper",
    "add_custom_mvc",
    "add_custom_swagger",
]
