import logging
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request
from psycopg import Connection
from psycopg_pool import ConnectionPool

from api_template.config.config import DatabaseConfig
from api_template.utils.exceptions import DatabaseNotConfiguredError

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)


# =============================================================================
#   Pool factory
# =============================================================================
def create_pool(config: DatabaseConfig) -> Optional[ConnectionPool]:
    """Build a connection pool for the configured database, without opening it.

    The connection string is read from the environment variable named by
    `connection_string_secret_name`. Returns None when it is not set.
    """
    conninfo = config.connection_string
    if not conninfo:
        logger.warning(
            "%s environment variable is not set; database access is disabled.",
            config.connection_string_secret_name,
        )
        return None

    return ConnectionPool(
        conninfo=conninfo,
        min_size=config.pool_min_size,
        max_size=config.pool_max_size,
        open=False,
    )


# =============================================================================
#   Dependency
# =============================================================================
def get_db_connection(request: Request) -> Iterator[Connection]:
    """FastAPI dependency that yields a pooled connection for the request.

    Raises:
        DatabaseNotConfiguredError: If no pool was registered on app state.
    """
    pool: Optional[ConnectionPool] = getattr(request.app.state, "db_pool", None)
    if pool is None:
        raise DatabaseNotConfiguredError("Database connection is not configured.")

    with pool.connection() as conn:
        yield conn
