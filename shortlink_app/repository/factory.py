"""
Factory for creating mapping repositories.
"""

from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from shortlink_app.logging_config import get_logger
from .strategies import MappingRepository, SQLAlchemyMappingRepository, InMemoryMappingRepository

logger = get_logger(__name__)


class RepositoryBackend(Enum):
    """Available repository backends"""
    SQL = "sql"
    MEMORY = "memory"


class RepositoryFactory:
    """
    Factory for mapping repositories.

    SQL repositories wrap the per-request Session, so a new one is built for
    every call. The in-memory store has no session and is a process-wide
    singleton, otherwise each request would see an empty store.
    """

    _memory_instance: InMemoryMappingRepository = None

    @classmethod
    def create(cls, backend: RepositoryBackend, db: Optional[Session] = None) -> MappingRepository:
        """
        Create a repository for the given backend.

        Args:
            backend: Type of repository backend (from enum)
            db: Database session (required for the SQL backend)

        Returns:
            MappingRepository instance
        """
        if backend == RepositoryBackend.SQL:
            if db is None:
                raise ValueError("SQL repository requires a database session")
            return SQLAlchemyMappingRepository(db)

        elif backend == RepositoryBackend.MEMORY:
            if cls._memory_instance is None:
                cls._memory_instance = InMemoryMappingRepository()
                logger.info("In-memory mapping repository initialized")
            return cls._memory_instance

        else:
            raise ValueError(f"Unknown repository backend: {backend}")

    @classmethod
    def clear_instance(cls):
        """Clear cached in-memory instance (for testing)"""
        cls._memory_instance = None
