from shared.database.engine import (
    AsyncSessionFactory,
    Base,
    create_all,
    get_async_session_factory,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "create_all",
    "get_async_session_factory",
]
