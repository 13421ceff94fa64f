"""
Mapping repository strategies using Strategy Pattern.

The repository is the persistence boundary the allocator depends on. Any store
works as long as it enforces uniqueness of short_code on insert:
- SQLAlchemy: the real store (SQLite by default, any SQLAlchemy URL works)
- In-memory: process-local store for development and tests
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from shortlink_app.logging_config import get_logger
from shortlink_app.models.mapping import Mapping
from shortlink_app.services.exceptions import StoreUnavailable, UniqueViolation

logger = get_logger(__name__)


class MappingRepository(ABC):
    """
    Abstract base class for mapping repositories.

    Lookups return None on a miss; only insert() raises on a conflict.
    Every method may raise StoreUnavailable when the store cannot be reached.
    """

    @abstractmethod
    def insert(self, long_url: str, short_code: str, owner_id: Optional[str] = None) -> Mapping:
        """
        Insert a new mapping.

        Args:
            long_url: The original URL
            short_code: Candidate short code
            owner_id: Optional session subject owning the mapping

        Returns:
            The stored Mapping with id, click_count and created_at filled in

        Raises:
            UniqueViolation: If short_code is already taken
            StoreUnavailable: On connection/transport failure
            IntegrityError: If the store rejects the row for any other constraint
        """
        pass

    @abstractmethod
    def find_by_code(self, short_code: str) -> Optional[Mapping]:
        """Get mapping by exact short code"""
        pass

    @abstractmethod
    def find_by_long_url(self, long_url: str) -> Optional[Mapping]:
        """Get the earliest mapping for an identical long URL"""
        pass

    @abstractmethod
    def find_by_id(self, mapping_id: int) -> Optional[Mapping]:
        """Get mapping by primary key"""
        pass

    @abstractmethod
    def list_all(self) -> List[Mapping]:
        """Get every mapping, oldest first"""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> List[Mapping]:
        """Get every mapping owned by a session, oldest first"""
        pass

    @abstractmethod
    def increment_clicks(self, short_code: str) -> Optional[Mapping]:
        """
        Atomically add one to click_count.

        Returns:
            The updated mapping, or None if the code does not exist
        """
        pass


class SQLAlchemyMappingRepository(MappingRepository):
    """
    Repository backed by a SQLAlchemy Session.

    The session is owned by the caller (one per request via get_db); this
    class only issues statements on it. The unique index on urls.short_code
    is the single source of truth for conflicts.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_errors(self):
        """Translate driver-level failures into StoreUnavailable"""
        try:
            yield
        except IntegrityError:
            raise
        except DBAPIError as exc:
            self.db.rollback()
            logger.error("Mapping store error: %s", exc)
            raise StoreUnavailable(f"Mapping store unavailable: {exc.orig}") from exc

    @staticmethod
    def _is_unique_violation(exc: IntegrityError) -> bool:
        """True when the driver reports a unique / duplicate-key constraint"""
        if getattr(exc.orig, "pgcode", None) == "23505":
            return True
        message = str(exc.orig).lower()
        return "unique" in message or "duplicate" in message

    def insert(self, long_url: str, short_code: str, owner_id: Optional[str] = None) -> Mapping:
        mapping = Mapping(
            long_url=long_url,
            short_code=short_code,
            owner_id=owner_id,
            click_count=0
        )
        with self._store_errors():
            try:
                self.db.add(mapping)
                # id and created_at are loaded before commit, so every failure
                # below still rolls back to zero rows
                self.db.flush()
                self.db.refresh(mapping)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if self._is_unique_violation(exc):
                    raise UniqueViolation(short_code) from exc
                logger.error("Insert of short code %s rejected by the store: %s", short_code, exc.orig)
                raise
        return mapping

    def find_by_code(self, short_code: str) -> Optional[Mapping]:
        with self._store_errors():
            return self.db.query(Mapping).filter(Mapping.short_code == short_code).first()

    def find_by_long_url(self, long_url: str) -> Optional[Mapping]:
        with self._store_errors():
            return (
                self.db.query(Mapping)
                .filter(Mapping.long_url == long_url)
                .order_by(Mapping.id)
                .first()
            )

    def find_by_id(self, mapping_id: int) -> Optional[Mapping]:
        with self._store_errors():
            return self.db.get(Mapping, mapping_id)

    def list_all(self) -> List[Mapping]:
        with self._store_errors():
            return self.db.query(Mapping).order_by(Mapping.id).all()

    def list_by_owner(self, owner_id: str) -> List[Mapping]:
        with self._store_errors():
            return (
                self.db.query(Mapping)
                .filter(Mapping.owner_id == owner_id)
                .order_by(Mapping.id)
                .all()
            )

    def increment_clicks(self, short_code: str) -> Optional[Mapping]:
        with self._store_errors():
            result = self.db.execute(
                update(Mapping)
                .where(Mapping.short_code == short_code)
                .values(click_count=Mapping.click_count + 1)
            )
            self.db.commit()
            if result.rowcount == 0:
                return None
            return (
                self.db.query(Mapping)
                .filter(Mapping.short_code == short_code)
                .populate_existing()
                .first()
            )


class InMemoryMappingRepository(MappingRepository):
    """
    In-memory repository using Python dicts.

    Pros:
    - No database needed (development, tests)
    - Enforces the same short_code uniqueness as the SQL store

    Cons:
    - Not shared between processes
    - Lost on restart

    A lock guards every mutation so concurrent requests in one process see
    the same guarantees the unique index gives the SQL store.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: Dict[int, Mapping] = {}
        self._by_code: Dict[str, Mapping] = {}
        self._next_id = 1

    def insert(self, long_url: str, short_code: str, owner_id: Optional[str] = None) -> Mapping:
        with self._lock:
            if short_code in self._by_code:
                raise UniqueViolation(short_code)
            mapping = Mapping(
                id=self._next_id,
                long_url=long_url,
                short_code=short_code,
                owner_id=owner_id,
                click_count=0,
                created_at=datetime.now(timezone.utc)
            )
            self._next_id += 1
            self._by_id[mapping.id] = mapping
            self._by_code[short_code] = mapping
            return mapping

    def find_by_code(self, short_code: str) -> Optional[Mapping]:
        return self._by_code.get(short_code)

    def find_by_long_url(self, long_url: str) -> Optional[Mapping]:
        with self._lock:
            for mapping in self._by_id.values():
                if mapping.long_url == long_url:
                    return mapping
        return None

    def find_by_id(self, mapping_id: int) -> Optional[Mapping]:
        return self._by_id.get(mapping_id)

    def list_all(self) -> List[Mapping]:
        with self._lock:
            return list(self._by_id.values())

    def list_by_owner(self, owner_id: str) -> List[Mapping]:
        with self._lock:
            return [m for m in self._by_id.values() if m.owner_id == owner_id]

    def increment_clicks(self, short_code: str) -> Optional[Mapping]:
        with self._lock:
            mapping = self._by_code.get(short_code)
            if mapping is None:
                return None
            mapping.click_count += 1
            return mapping

    def clear(self):
        """Drop every mapping (tests)"""
        with self._lock:
            self._by_id.clear()
            self._by_code.clear()
            self._next_id = 1
