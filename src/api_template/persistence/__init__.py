from api_template.persistence.database import create_pool, get_db_connection

__all__ = ["create_pool", "get_db_connection"]
