"""
Repository module for short code mappings.
Implements Strategy Pattern for pluggable storage backends.
"""

from .strategies import MappingRepository, SQLAlchemyMappingRepository, InMemoryMappingRepository
from .factory import RepositoryFactory, RepositoryBackend

__all__ = [
    "MappingRepository",
    "SQLAlchemyMappingRepository",
    "InMemoryMappingRepository",
    "RepositoryFactory",
    "RepositoryBackend",
]
