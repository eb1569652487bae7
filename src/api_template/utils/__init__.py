from api_template.utils.exceptions import (
    DatabaseNotConfiguredError,
    MappingNotFoundError,
    UnauthorizedError,
)
from api_template.utils.logging import setup_logging

__all__ = [
    "setup_logging",
    "DatabaseNotConfiguredError",
    "MappingNotFoundError",
    "UnauthorizedError",
]
