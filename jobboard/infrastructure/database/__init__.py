"""Database infrastructure built on SQLAlchemy's async engine.

- **base**: Declarative base and common record fields
- **models**: Profile, job, application and feed tables
- **session**: Shared connection lifecycle (``ConnectionManager``)
- **repository**: The four collection operations the gateway performs
"""

from jobboard.infrastructure.database.base import Base, BaseModel
from jobboard.infrastructure.database.models import (
    Application,
    FeedPost,
    Job,
    Profile,
    create_all_tables,
)
from jobboard.infrastructure.database.repository import CollectionRepository
from jobboard.infrastructure.database.session import (
    ConnectionManager,
    ConnectionState,
    check_database_connection,
    close_database,
    create_database_engine,
    get_connection_manager,
)

__all__ = [
    "Application",
    "Base",
    "BaseModel",
    "CollectionRepository",
    "ConnectionManager",
    "ConnectionState",
    "FeedPost",
    "Job",
    "Profile",
    "check_database_connection",
    "close_database",
    "create_all_tables",
    "create_database_engine",
    "get_connection_manager",
]
