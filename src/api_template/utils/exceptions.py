# =============================================================================
#   Application Exceptions
# =============================================================================

class UnauthorizedError(Exception):
    """Raised when a request to a protected endpoint lacks a valid bearer token."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(reason)
        self.reason = reason


class DatabaseNotConfiguredError(Exception):
    """Raised when a database connection is requested but no pool was registered."""
    pass


class MappingNotFoundError(Exception):
    """Raised when no mapping is registered between a source and destination type."""

    def __init__(self, source: type, destination: type) -> None:
        super().__init__(
            f"No mapping registered from '{source.__name__}' to '{destination.__name__}'."
        )
        self.source = source
        self.destination = destination
