from .connection import (
    engine,
    async_session,
    get_db,
    init_db,
    normalize_database_url,
    register_sqlite_functions,
)

__all__ = [
    "engine",
    "async_session",
    "get_db",
    "init_db",
    "normalize_database_url",
    "register_sqlite_functions",
]
